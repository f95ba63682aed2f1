"""
Skeletal animation model and forward kinematics queries.

SkeletalMotion holds one or more skeleton trees, the per-frame local
transforms of every animated joint and the per-frame root trajectories.
Everything except the display scale is fixed once the model is built.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import numpy as np

from .skeleton_joint import SkeletonJoint
from .transform import Transform


logger = logging.getLogger(__name__)


@dataclass
class PoseQuery:
    """
    World-space outputs of one forward kinematics pass.

    Each field is None unless it was requested.

    Attributes:
        joint_positions: Joint positions in traversal (pre-order) order
        joint_positions_by_name: Joint name -> position, first visit wins
        segment_positions: (parent position, child position) per tree edge
        cumulative_transforms_by_name: Joint name -> transform in which the
            joint's local offset is expressed, first visit wins
    """
    joint_positions: Optional[List[np.ndarray]] = None
    joint_positions_by_name: Optional[Dict[str, np.ndarray]] = None
    segment_positions: Optional[List[Tuple[np.ndarray, np.ndarray]]] = None
    cumulative_transforms_by_name: Optional[Dict[str, Transform]] = None


class SkeletalMotion:
    """
    An imported animation clip.

    Example usage:
        motion = SkeletalMotion.bvh_import("walk.bvh")
        motion.set_normalized_scale_with_multiplier(2.0)

        pose = motion.query_skeletal_animation(
            frame_index=0, skeleton_index=0, add_root_offset=True,
            joint_positions_by_name=True, segment_positions=True,
        )
        for start, end in pose.segment_positions:
            draw_line(start, end)

    Queries traverse the whole skeleton and assemble the full pose each time.
    Nothing is cached between calls, so query a frame once and reuse the
    result where possible.

    The display scale is the only mutable state and is not synchronized.
    Change it only while no query is running, or pass scale= per query.
    """

    def __init__(
        self,
        name: str,
        root_trajectories,
        joint_transforms: Dict[SkeletonJoint, List[Transform]],
        skeleton_roots: List[SkeletonJoint],
        sampling_rate: float,
        frame_count: int,
    ):
        """
        Args:
            name: Clip name (the imported file path for imported clips)
            root_trajectories: (frame_count, len(skeleton_roots), 3) root positions
            joint_transforms: Joint -> local transform per frame, for every
                joint with at least one child
            skeleton_roots: Root joint of each skeleton, in declaration order
            sampling_rate: Frames per second
            frame_count: Number of frames

        Raises:
            ValueError: If the tables disagree with frame_count or the trees
        """
        self._name = name
        self._skeleton_roots = tuple(skeleton_roots)
        self._sampling_rate = float(sampling_rate)
        self._frame_count = int(frame_count)
        self._skeleton_scale = 1.0

        trajectories = np.array(root_trajectories, dtype=np.float64).reshape(
            self._frame_count, len(self._skeleton_roots), 3)
        trajectories.setflags(write=False)
        self._root_trajectories = trajectories

        self._local_transforms = {}
        self._transforms_by_name = {}
        self._channel_orderings = {}
        for root in self._skeleton_roots:
            for joint in root.iter_preorder():
                if joint.channels and joint.name not in self._channel_orderings:
                    self._channel_orderings[joint.name] = joint.channels
                if joint.is_leaf:
                    if joint in joint_transforms:
                        raise ValueError(f"Leaf joint {joint.name} must not have transforms")
                    continue
                transforms = joint_transforms.get(joint)
                if transforms is None or len(transforms) != self._frame_count:
                    raise ValueError(
                        f"Joint {joint.name} needs exactly {self._frame_count} transforms")
                transforms = tuple(transforms)
                self._local_transforms[joint] = transforms
                self._transforms_by_name.setdefault(joint.name, transforms)

    @classmethod
    def bvh_import(cls, bvh_file_path, config=None):
        """
        Import a BVH file.

        Args:
            bvh_file_path: Path to the BVH file
            config: Optional ImportConfig

        Returns:
            Fully built SkeletalMotion

        Raises:
            BVHImportError: If the file is unreadable or malformed
        """
        from ..importer.bvh_importer import load_bvh_file

        return load_bvh_file(bvh_file_path, config=config)

    @property
    def name(self):
        return self._name

    @property
    def sampling_rate(self):
        """Frames per second, as specified by the Frame Time of the file."""
        return self._sampling_rate

    @property
    def frame_time(self):
        return 1.0 / self._sampling_rate

    @property
    def frame_count(self):
        return self._frame_count

    @property
    def duration(self):
        """Clip length in seconds."""
        return self._frame_count / self._sampling_rate

    @property
    def skeleton_count(self):
        return len(self._skeleton_roots)

    @property
    def skeleton_roots(self):
        return self._skeleton_roots

    @property
    def skeleton_scale(self):
        return self._skeleton_scale

    @property
    def root_trajectories(self):
        """Read-only (frame_count, skeleton_count, 3) array of root positions."""
        return self._root_trajectories

    @property
    def channel_orderings(self):
        """Joint name -> declared channel axis indices, first declaration wins."""
        return {name: list(axes) for name, axes in self._channel_orderings.items()}

    @property
    def joint_transforms(self):
        """
        Joint name -> list of local transforms (copies), one per frame.

        Only joints with children appear. Builds frame_count copies per joint.
        """
        return {name: [t.copy() for t in transforms]
                for name, transforms in self._transforms_by_name.items()}

    def get_name(self):
        return self._name

    def get_sampling_rate(self):
        return self._sampling_rate

    def get_frame_count(self):
        return self._frame_count

    def get_root(self, index):
        """Root joint of the skeleton at the given declaration index."""
        self._check_skeleton_index(index)
        return self._skeleton_roots[index]

    def get_local_transform_by_name(self, name, frame_index):
        """
        Local transform of a joint at a frame.

        Raises:
            KeyError: If no animated joint has this name
            IndexError: If frame_index is out of range
        """
        if name not in self._transforms_by_name:
            raise KeyError(f"No animated joint named {name!r}")
        self._check_frame_index(frame_index)
        return self._transforms_by_name[name][frame_index].copy()

    def set_scale(self, scale):
        """Sets the scale applied to positions returned by queries."""
        scale = float(scale)
        if not np.isfinite(scale):
            raise ValueError(f"Invalid skeleton scale: {scale}")
        self._skeleton_scale = scale

    def set_normalized_scale(self):
        return self.set_normalized_scale_with_multiplier(1.0)

    def set_normalized_scale_with_multiplier(self, scale_coeff):
        """
        Scale skeleton 0 so its farthest frame-0 joint lies at scale_coeff.

        Positions are measured at scale 1 without root offset. A degenerate
        pose (all joints at the origin) or an empty clip leaves the scale
        unchanged.

        Returns:
            The skeleton scale after the call
        """
        if self._frame_count == 0 or not self._skeleton_roots:
            logger.warning(f"Cannot normalize scale of {self._name}: no frames")
            return self._skeleton_scale

        pose = self.query_skeletal_animation(0, 0, False, joint_positions=True, scale=1.0)
        max_length = max(float(np.linalg.norm(p)) for p in pose.joint_positions)

        if max_length == 0.0:
            logger.warning(f"Cannot normalize scale of {self._name}: all joints at the origin")
            return self._skeleton_scale

        self._skeleton_scale = scale_coeff / max_length
        return self._skeleton_scale

    def query_skeleton(self, skeleton_index=0):
        """Name -> joint lookup and (parent, child) name edges of a skeleton."""
        return self.get_root(skeleton_index).query_skeleton()

    def query_skeletal_animation(
        self,
        frame_index: int,
        skeleton_index: int = 0,
        add_root_offset: bool = False,
        *,
        joint_positions: bool = False,
        joint_positions_by_name: bool = False,
        segment_positions: bool = False,
        cumulative_transforms_by_name: bool = False,
        scale: Optional[float] = None,
    ) -> PoseQuery:
        """
        Compute the world pose of a skeleton at a frame.

        All requested outputs are filled during a single pre-order traversal.
        At each joint with children the cumulative transform is composed with
        the joint's local transform for the frame; leaves reuse their parent's
        cumulative transform. A joint's world position is
        cumulative.apply_to_point(local_offset) * scale.

        Args:
            frame_index: Frame to sample
            skeleton_index: Which skeleton (root) to evaluate
            add_root_offset: Translate by the frame's root trajectory position
            joint_positions: Request the flat position list
            joint_positions_by_name: Request the name -> position mapping
            segment_positions: Request (parent, child) position pairs
            cumulative_transforms_by_name: Request name -> cumulative transform
            scale: Scale for this call only; defaults to skeleton_scale

        Returns:
            PoseQuery with the requested fields set

        Raises:
            IndexError: If frame_index or skeleton_index is out of range
        """
        result = PoseQuery()
        if not (joint_positions or joint_positions_by_name
                or segment_positions or cumulative_transforms_by_name):
            return result

        self._check_frame_index(frame_index)
        self._check_skeleton_index(skeleton_index)
        scale = self._skeleton_scale if scale is None else float(scale)

        if joint_positions:
            result.joint_positions = []
        if joint_positions_by_name:
            result.joint_positions_by_name = {}
        if segment_positions:
            result.segment_positions = []
        if cumulative_transforms_by_name:
            result.cumulative_transforms_by_name = {}

        root_transform = Transform()
        if add_root_offset:
            root_transform.origin = self._root_trajectories[frame_index, skeleton_index]

        # (joint, cumulative transform, parent world position)
        stack = [(self._skeleton_roots[skeleton_index], root_transform, None)]
        while stack:
            joint, cumulative, parent_position = stack.pop()
            position = cumulative.apply_to_point(joint.local_offset) * scale

            if result.segment_positions is not None and parent_position is not None:
                result.segment_positions.append((parent_position.copy(), position.copy()))

            if result.joint_positions is not None:
                result.joint_positions.append(position)

            if result.joint_positions_by_name is not None:
                result.joint_positions_by_name.setdefault(joint.name, position.copy())

            if result.cumulative_transforms_by_name is not None and \
                    joint.name not in result.cumulative_transforms_by_name:
                result.cumulative_transforms_by_name[joint.name] = cumulative.copy()

            # Leaf joints have no transforms
            if joint.is_leaf:
                continue

            next_cumulative = cumulative.compose(self._local_transforms[joint][frame_index])
            for child in reversed(joint.children):
                stack.append((child, next_cumulative, position))

        return result

    def _check_frame_index(self, frame_index):
        if not 0 <= frame_index < self._frame_count:
            raise IndexError(f"Frame index {frame_index} out of range [0, {self._frame_count})")

    def _check_skeleton_index(self, skeleton_index):
        if not 0 <= skeleton_index < len(self._skeleton_roots):
            raise IndexError(
                f"Skeleton index {skeleton_index} out of range [0, {len(self._skeleton_roots)})")

    def __repr__(self):
        return (f"SkeletalMotion(name={self._name!r}, skeletons={len(self._skeleton_roots)}, "
                f"frames={self._frame_count}, sampling_rate={self._sampling_rate})")
