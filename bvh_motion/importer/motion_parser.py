"""
Parser for the MOTION section of a BVH file.

Frame data is a flat run of numbers: for every frame, for every skeleton in
declaration order, the channel values of each joint with children in
pre-order. A root always contributes its position values.
"""

import numpy as np

from ..skeleton.transform import Transform
from ..utils.rotation_utils import euler_to_matrix


def parse_motion_header(stream):
    """
    Read "MOTION Frames: N Frame Time: T".

    Returns:
        Tuple (frame_count, frame_time)
    """
    stream.expect("MOTION")
    stream.expect("Frames:")
    frame_count = stream.read_int()
    if frame_count < 0:
        raise stream.error(f"Negative frame count {frame_count}", index=stream.index - 1)
    stream.expect("Frame")
    stream.expect("Time:")
    frame_time = stream.read_float()
    if frame_time <= 0.0:
        raise stream.error(f"Frame time must be positive, got {frame_time}", index=stream.index - 1)
    return frame_count, frame_time


def channel_value_count(joint, is_root, read_leaf_channels=False):
    """
    Number of values a joint takes from each frame.

    Joints with children consume every declared channel. A childless joint
    consumes nothing unless read_leaf_channels is set, except that a
    6-channel childless root still reads its 3 position values.
    """
    count = len(joint.channels)
    if joint.is_leaf and not read_leaf_channels:
        return 3 if is_root and count == 6 else 0
    return count


def read_joint_channels(stream, joint, count=None):
    """
    Consume one frame's channel values for a joint.

    Args:
        stream: TokenStream positioned on the joint's first value
        joint: SkeletonJoint whose channels are read
        count: Number of leading channels to read (default: all of them)

    Returns:
        Tuple (position, rotation). position is None unless the joint declares
        position channels; rotation is the ordered product of the declared
        per-axis rotations that were read.
    """
    axes = joint.channels if count is None else joint.channels[:count]
    values = stream.read_floats(len(axes))

    position = None
    if len(joint.channels) == 6:
        position = np.zeros(3)
        position[list(axes[:3])] = values[:3]
        axes, values = axes[3:], values[3:]

    return position, euler_to_matrix(values, axes)


def parse_motion_data(stream, skeleton_roots, frame_count, read_leaf_channels=False):
    """
    Read every frame and build the per-joint local transforms.

    Args:
        stream: TokenStream positioned on the first frame value
        skeleton_roots: Roots from parse_hierarchy
        frame_count: Number of frames announced by the header
        read_leaf_channels: Let childless joints consume their declared channels

    Returns:
        Tuple (root_trajectories, joint_transforms):
            root_trajectories: (frame_count, len(skeleton_roots), 3) array
            joint_transforms: Joint -> list of frame_count local Transforms,
                for every joint with at least one child

    Raises:
        BVHImportError: If the data is short, long or not numeric
    """
    # Per skeleton: (joint, values per frame) in pre-order
    plans = []
    for root in skeleton_roots:
        plans.append([(joint, channel_value_count(joint, joint is root, read_leaf_channels))
                      for joint in root.iter_preorder()])
    values_per_frame = sum(count for plan in plans for _, count in plan)

    expected = values_per_frame * frame_count
    if stream.remaining != expected:
        raise stream.error(
            f"Expected {expected} motion values for {frame_count} frames, found {stream.remaining}")

    trajectories = np.zeros((frame_count, len(skeleton_roots), 3))
    joint_transforms = {joint: [] for plan in plans for joint, _ in plan if not joint.is_leaf}

    for frame in range(frame_count):
        for root_index, plan in enumerate(plans):
            root = plan[0][0]
            for joint, count in plan:
                if count == 0:
                    continue
                position, rotation = read_joint_channels(stream, joint, count)

                # Non-root position channels are consumed; the static OFFSET is kept
                if joint is root and position is not None:
                    trajectories[frame, root_index] = position

                if joint.is_leaf:
                    continue
                joint_transforms[joint].append(Transform(rotation, joint.local_offset))

    if not stream.at_end():
        raise stream.error(f"{stream.remaining} unexpected tokens after the last frame")

    return trajectories, joint_transforms
