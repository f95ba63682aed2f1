"""
Rigid affine transform (rotation + origin).

A Transform is stored as a 4x4 homogeneous matrix acting on column vectors.
Only rigid transforms (orthonormal rotation) are supported; inverse() relies
on it.
"""

import numpy as np

from ..utils.rotation_utils import matrix_to_quat, is_orthonormal


class Transform:
    """
    Rigid transform mapping local coordinates into a parent frame.

    Composition follows the usual matrix convention: a.compose(b) (or a @ b)
    applies b first, then a. During forward kinematics this reads as
    parent_cumulative.compose(local).

    Example usage:
        t = Transform(rotation, origin)
        world_point = parent.compose(t).apply_to_point(local_point)
    """

    def __init__(self, rotation=None, origin=None):
        """
        Args:
            rotation: (3, 3) rotation matrix, identity if None
            origin: 3-vector translation, zero if None
        """
        self._matrix = np.eye(4)
        if rotation is not None:
            self._matrix[:3, :3] = np.asarray(rotation, dtype=np.float64)
        if origin is not None:
            self._matrix[:3, 3] = np.asarray(origin, dtype=np.float64)

    @classmethod
    def identity(cls):
        return cls()

    @classmethod
    def _from_matrix(cls, matrix):
        t = cls()
        t._matrix = matrix
        return t

    @property
    def matrix(self):
        """Copy of the 4x4 homogeneous matrix."""
        return self._matrix.copy()

    @property
    def origin(self):
        return self._matrix[:3, 3].copy()

    @origin.setter
    def origin(self, origin):
        self._matrix[:3, 3] = np.asarray(origin, dtype=np.float64)

    @property
    def rotation(self):
        return self._matrix[:3, :3].copy()

    @rotation.setter
    def rotation(self, rotation):
        self._matrix[:3, :3] = np.asarray(rotation, dtype=np.float64)

    def get_origin(self):
        return self.origin

    def set_origin(self, origin):
        self.origin = origin

    def get_rotation(self):
        return self.rotation

    def set_rotation(self, rotation):
        self.rotation = rotation

    def compose(self, other):
        """
        Compose two transforms.

        Args:
            other: Transform applied first

        Returns:
            New Transform equivalent to applying other, then self
        """
        return Transform._from_matrix(self._matrix @ other._matrix)

    def __matmul__(self, other):
        if not isinstance(other, Transform):
            return NotImplemented
        return self.compose(other)

    def apply_to_direction(self, direction):
        """Rotate a direction vector (the origin is ignored)."""
        return self._matrix[:3, :3] @ np.asarray(direction, dtype=np.float64)

    def apply_to_point(self, point):
        """Map a point through the full affine transform."""
        return self._matrix[:3, :3] @ np.asarray(point, dtype=np.float64) + self._matrix[:3, 3]

    def inverse(self):
        """
        Inverse of a rigid transform: (R^T, -R^T @ origin).

        The result is meaningless for a non-orthonormal rotation.
        """
        rot_t = self._matrix[:3, :3].T
        return Transform(rot_t, -rot_t @ self._matrix[:3, 3])

    def is_rigid(self, atol=1e-6):
        return is_orthonormal(self._matrix[:3, :3], atol=atol)

    def as_quat(self):
        """Rotation part as a quaternion (w, x, y, z)."""
        return matrix_to_quat(self._matrix[:3, :3])

    def copy(self):
        return Transform._from_matrix(self._matrix.copy())

    def __eq__(self, other):
        if not isinstance(other, Transform):
            return NotImplemented
        return bool(np.array_equal(self._matrix, other._matrix))

    __hash__ = None

    def __repr__(self):
        return f"Transform(rotation={self._matrix[:3, :3].tolist()}, origin={self._matrix[:3, 3].tolist()})"
