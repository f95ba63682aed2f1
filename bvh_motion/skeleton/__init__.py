"""
Skeleton and animation model.

Provides Transform, SkeletonJoint and SkeletalMotion (with PoseQuery results).
"""

from .skeletal_motion import PoseQuery, SkeletalMotion
from .skeleton_joint import SkeletonJoint
from .transform import Transform

__all__ = ["PoseQuery", "SkeletalMotion", "SkeletonJoint", "Transform"]
