"""
Skeleton hierarchy node.

A skeleton is a tree of SkeletonJoint objects. Each joint owns its children;
there are no parent back-references.
"""

import sys

import numpy as np


class SkeletonJoint:
    """
    A named joint with a local offset from its parent and ordered children.

    The tree is not modified after import. The only mutation offered is
    apply_offset_normalization(), a preprocessing step that must run before
    any transform is built from the offsets.

    Attributes (read-only properties):
        name: Joint name (not guaranteed unique within a skeleton)
        local_offset: Offset from the parent joint, (3,) float64
        children: Tuple of child joints, empty for leaves
        channels: Tuple of channel axis indices as declared (empty for End Sites)
        is_end_site: True for synthesized "End Site" leaves
    """

    def __init__(self, name, children=(), local_offset=(0.0, 0.0, 0.0), channels=(), is_end_site=False):
        self._name = str(name)
        self._children = tuple(children)
        self._local_offset = np.array(local_offset, dtype=np.float64).reshape(3)
        self._channels = tuple(int(c) for c in channels)
        self._is_end_site = bool(is_end_site)

    @property
    def name(self):
        return self._name

    @property
    def local_offset(self):
        return self._local_offset.copy()

    @property
    def children(self):
        return self._children

    @property
    def channels(self):
        return self._channels

    @property
    def is_end_site(self):
        return self._is_end_site

    @property
    def is_leaf(self):
        return not self._children

    def get_name(self):
        return self._name

    def get_local_offset(self):
        return self.local_offset

    def get_direct_children(self):
        """All direct descendants of this joint; an end joint returns an empty list."""
        return list(self._children)

    def apply_offset_normalization(self, normalizer):
        """
        Divide the local offset by a scalar.

        Args:
            normalizer: Non-zero divisor

        Raises:
            ValueError: If normalizer is zero or not finite
        """
        normalizer = float(normalizer)
        if normalizer == 0.0 or not np.isfinite(normalizer):
            raise ValueError(f"Invalid offset normalizer: {normalizer}")
        self._local_offset = self._local_offset / normalizer

    def iter_preorder(self):
        """Yield this joint and all its descendants in pre-order."""
        stack = [self]
        while stack:
            joint = stack.pop()
            yield joint
            stack.extend(reversed(joint._children))

    def query_skeleton(self, joints_by_name=True, bones_by_joint_names=True):
        """
        Collect lookup tables for the subtree rooted at this joint.

        Traverses the whole subtree; avoid calling it per frame.

        Args:
            joints_by_name: Build the name -> joint mapping (first visit wins)
            bones_by_joint_names: Build the (parent name, child name) edge list

        Returns:
            Tuple (joints_by_name, bones) where an entry is None if not requested
        """
        joints = {} if joints_by_name else None
        bones = [] if bones_by_joint_names else None

        # (joint, parent name) pairs; edges are emitted when the child is reached
        stack = [(self, None)]
        while stack:
            joint, parent_name = stack.pop()
            if bones is not None and parent_name is not None:
                bones.append((parent_name, joint._name))
            if joints is not None and joint._name not in joints:
                joints[joint._name] = joint
            for child in reversed(joint._children):
                stack.append((child, joint._name))

        return joints, bones

    def format_tree(self):
        """Render the subtree, one joint per line, indented with '_' per depth."""
        lines = []
        stack = [(self, 0)]
        while stack:
            joint, depth = stack.pop()
            lines.append("_" * depth + joint._name)
            for child in reversed(joint._children):
                stack.append((child, depth + 1))
        return "\n".join(lines)

    def print_joint(self, file=None):
        print(self.format_tree(), file=file if file is not None else sys.stdout)

    def __repr__(self):
        return f"SkeletonJoint(name={self._name!r}, children={len(self._children)}, offset={self._local_offset.tolist()})"
