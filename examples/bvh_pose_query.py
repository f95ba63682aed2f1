#!/usr/bin/env python3
"""
Example: BVH file to world-space joint positions.

This script demonstrates how to import a BVH file and query the pose of a
skeleton at a given frame.

Usage:
    python bvh_pose_query.py --bvh_file path/to/motion.bvh --frame 10

Output:
    - Prints clip information and the skeleton hierarchy
    - Prints the world position of every joint at the requested frame
"""

import argparse
import logging
import sys

from bvh_motion import BVHImportError, ImportConfig, load_bvh_file, setup_logging


def main():
    parser = argparse.ArgumentParser(description="Query joint positions from a BVH file")

    parser.add_argument(
        "--bvh_file",
        type=str,
        required=True,
        help="Path to BVH motion file",
    )

    parser.add_argument(
        "--frame",
        type=int,
        default=0,
        help="Frame index to query (default: 0)",
    )

    parser.add_argument(
        "--skeleton",
        type=int,
        default=0,
        help="Skeleton index for files with several roots (default: 0)",
    )

    parser.add_argument(
        "--add_root_offset",
        action="store_true",
        default=False,
        help="Translate the skeleton by its root trajectory",
    )

    parser.add_argument(
        "--normalize_scale",
        type=float,
        default=None,
        help="Normalize the skeleton to this size at frame 0",
    )

    parser.add_argument(
        "--legacy_end_sites",
        action="store_true",
        default=False,
        help="Give End Sites their parent's offset, like the legacy importer",
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        default=False,
        help="Print verbose output",
    )

    args = parser.parse_args()

    setup_logging(level=logging.DEBUG if args.verbose else logging.WARNING)

    config = ImportConfig.legacy() if args.legacy_end_sites else ImportConfig()

    print(f"Loading BVH file: {args.bvh_file}")
    try:
        motion = load_bvh_file(args.bvh_file, config=config)
    except BVHImportError as e:
        print(f"Import failed: {e}")
        return 1

    print(f"Loaded {motion.frame_count} frames at {motion.sampling_rate:.1f} Hz "
          f"({motion.duration:.2f}s), {motion.skeleton_count} skeleton(s)")

    if not 0 <= args.frame < motion.frame_count:
        print(f"Frame {args.frame} out of range [0, {motion.frame_count})")
        return 1
    if not 0 <= args.skeleton < motion.skeleton_count:
        print(f"Skeleton {args.skeleton} out of range [0, {motion.skeleton_count})")
        return 1

    print("\nHierarchy:")
    motion.get_root(args.skeleton).print_joint()

    if args.normalize_scale is not None:
        scale = motion.set_normalized_scale_with_multiplier(args.normalize_scale)
        print(f"\nSkeleton scale: {scale:.6f}")

    pose = motion.query_skeletal_animation(
        args.frame,
        args.skeleton,
        args.add_root_offset,
        joint_positions_by_name=True,
        segment_positions=True,
    )

    print(f"\nJoint positions at frame {args.frame}:")
    for name, position in pose.joint_positions_by_name.items():
        print(f"  {name}: {position}")
    print(f"\n{len(pose.segment_positions)} segments")

    return 0


if __name__ == "__main__":
    sys.exit(main())
