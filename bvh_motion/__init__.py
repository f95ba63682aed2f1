"""
bvh_motion - BVH motion capture import and forward kinematics.

This package reads BVH files into an immutable skeleton and animation model
and computes world-space joint positions for any frame.

Main classes:
    - SkeletalMotion: Imported clip; answers forward kinematics queries
    - SkeletonJoint: Node of a skeleton tree
    - Transform: Rigid transform (rotation + origin)
    - ImportConfig: Import options
    - BVHImportError: Raised when a file cannot be imported

Example usage:
    from bvh_motion import load_bvh_file

    motion = load_bvh_file("walk.bvh")
    motion.set_normalized_scale_with_multiplier(2.0)

    for frame in range(motion.frame_count):
        pose = motion.query_skeletal_animation(
            frame, skeleton_index=0, add_root_offset=True,
            joint_positions_by_name=True, segment_positions=True,
        )
        # pose.joint_positions_by_name["Hips"] -> np.array([x, y, z])
        # pose.segment_positions -> [(parent_pos, child_pos), ...]
"""

from .config import EndSiteOffset, ImportConfig, LeafChannels
from .errors import BVHImportError
from .importer import load_bvh_file, load_bvh_string, tokenize
from .skeleton import PoseQuery, SkeletalMotion, SkeletonJoint, Transform
from .utils import setup_logging

__version__ = "0.1.0"
__all__ = [
    "BVHImportError",
    "EndSiteOffset",
    "ImportConfig",
    "LeafChannels",
    "PoseQuery",
    "SkeletalMotion",
    "SkeletonJoint",
    "Transform",
    "load_bvh_file",
    "load_bvh_string",
    "setup_logging",
    "tokenize",
]
