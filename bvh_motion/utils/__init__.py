"""
Utility functions for BVH processing.

This module provides:
    - rotation_utils: Channel mapping, per-axis rotations and quaternion conversion
    - log_utils: Logging setup for scripts
"""

from .log_utils import setup_logging
from .rotation_utils import (
    channel_to_axis,
    elementary_rotation,
    euler_to_matrix,
    matrix_to_quat,
    quat_to_matrix,
)

__all__ = [
    "setup_logging",
    "channel_to_axis",
    "elementary_rotation",
    "euler_to_matrix",
    "matrix_to_quat",
    "quat_to_matrix",
]
