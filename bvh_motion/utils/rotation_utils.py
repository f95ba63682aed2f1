"""
Rotation utility functions for BVH channel data.

All rotation matrices are right-handed, active and act on column vectors.
Angles coming from BVH files are in degrees. Quaternions are in
(w, x, y, z) format unless otherwise specified.
"""

import numpy as np
from scipy.spatial.transform import Rotation as R


# Channel name -> axis index (0 = X, 1 = Y, 2 = Z)
ROTATION_CHANNELS = {
    "Xrotation": 0,
    "Yrotation": 1,
    "Zrotation": 2,
}

POSITION_CHANNELS = {
    "Xposition": 0,
    "Yposition": 1,
    "Zposition": 2,
}


def channel_to_axis(channel):
    """
    Map a BVH channel name to its axis index.

    Args:
        channel: Channel token, e.g. "Zrotation" or "Xposition"

    Returns:
        Axis index (0, 1 or 2), or -1 if the channel name is unknown
    """
    if channel in ROTATION_CHANNELS:
        return ROTATION_CHANNELS[channel]
    return POSITION_CHANNELS.get(channel, -1)


def is_rotation_channel(channel):
    return channel in ROTATION_CHANNELS


def is_position_channel(channel):
    return channel in POSITION_CHANNELS


def elementary_rotation(axis, angle):
    """
    Rotation matrix about a single coordinate axis.

    Args:
        axis: Axis index (0 = X, 1 = Y, 2 = Z)
        angle: Rotation angle in degrees

    Returns:
        (3, 3) rotation matrix

    Raises:
        ValueError: If the axis index is not 0, 1 or 2
    """
    rad = np.radians(angle)
    c = np.cos(rad)
    s = np.sin(rad)

    if axis == 0:
        return np.array([
            [1.0, 0.0, 0.0],
            [0.0, c, -s],
            [0.0, s, c],
        ])
    if axis == 1:
        return np.array([
            [c, 0.0, s],
            [0.0, 1.0, 0.0],
            [-s, 0.0, c],
        ])
    if axis == 2:
        return np.array([
            [c, -s, 0.0],
            [s, c, 0.0],
            [0.0, 0.0, 1.0],
        ])
    raise ValueError(f"Invalid rotation axis: {axis}")


def euler_to_matrix(angles, axes):
    """
    Compose per-axis rotations in the given order.

    The first axis is the leftmost factor, so axes (2, 0, 1) with angles
    (z, x, y) produce Rz(z) @ Rx(x) @ Ry(y). This matches the intrinsic
    convention of scipy's Rotation.from_euler with an upper-case order.

    Args:
        angles: Sequence of angles in degrees
        axes: Sequence of axis indices, same length as angles

    Returns:
        (3, 3) rotation matrix
    """
    rotation = np.eye(3)
    for axis, angle in zip(axes, angles):
        rotation = rotation @ elementary_rotation(axis, angle)
    return rotation


def matrix_to_quat(matrix):
    """
    Convert a rotation matrix to a quaternion.

    Args:
        matrix: (3, 3) rotation matrix

    Returns:
        Quaternion (w, x, y, z)
    """
    return R.from_matrix(matrix).as_quat(scalar_first=True)


def quat_to_matrix(q):
    """
    Convert a quaternion to a rotation matrix.

    Args:
        q: Quaternion (w, x, y, z)

    Returns:
        (3, 3) rotation matrix
    """
    return R.from_quat(q, scalar_first=True).as_matrix()


def is_orthonormal(matrix, atol=1e-6):
    """Check that a 3x3 matrix is a proper rotation (R^T R = I, det = +1)."""
    matrix = np.asarray(matrix, dtype=np.float64)
    if matrix.shape != (3, 3):
        return False
    return bool(
        np.allclose(matrix.T @ matrix, np.eye(3), atol=atol)
        and np.isclose(np.linalg.det(matrix), 1.0, atol=atol)
    )
