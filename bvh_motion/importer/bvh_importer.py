"""
BVH file importer.

1) Reads the whole file and splits it into tokens.
2) Parses the HIERARCHY section into skeleton trees.
3) Reads every frame of the MOTION section into local joint transforms.
4) Returns a SkeletalMotion, or raises BVHImportError if anything is off.
   No partially populated model is ever returned.
"""

import logging
from pathlib import Path

import numpy as np

from ..config import ImportConfig, LeafChannels
from ..errors import BVHImportError
from ..skeleton.skeletal_motion import SkeletalMotion
from .hierarchy_parser import parse_hierarchy
from .motion_parser import parse_motion_data, parse_motion_header
from .tokenizer import TokenStream, tokenize


logger = logging.getLogger(__name__)


def normalize_skeleton_offsets(root):
    """
    Divide every offset of a skeleton by its longest joint offset.

    Returns:
        The normalizer used, or None if all offsets are zero
    """
    joints = list(root.iter_preorder())
    max_offset_len = max(float(np.linalg.norm(j.local_offset)) for j in joints)
    if max_offset_len == 0.0:
        return None
    for joint in joints:
        joint.apply_offset_normalization(max_offset_len)
    return max_offset_len


def parse_bvh_tokens(tokens, name="", config=None):
    """
    Build a SkeletalMotion from an already tokenized BVH file.

    Args:
        tokens: Token list from tokenize()
        name: Name given to the motion
        config: ImportConfig

    Returns:
        SkeletalMotion

    Raises:
        BVHImportError: If the tokens do not form a valid BVH file
    """
    config = config or ImportConfig()
    source = name or None

    if not tokens:
        raise BVHImportError("Empty BVH data", source=source)

    stream = TokenStream(tokens, source=source)
    roots, _ = parse_hierarchy(stream, config)

    if config.log_hierarchy and logger.isEnabledFor(logging.DEBUG):
        for root in roots:
            logger.debug(f"Loaded skeleton:\n{root.format_tree()}")

    # Offsets must be final before transforms are built from them
    normalizers = [None] * len(roots)
    if config.normalize_offsets:
        normalizers = [normalize_skeleton_offsets(root) for root in roots]

    frame_count, frame_time = parse_motion_header(stream)
    trajectories, joint_transforms = parse_motion_data(
        stream, roots, frame_count, read_leaf_channels=config.leaf_channels is LeafChannels.READ)

    for root_index, normalizer in enumerate(normalizers):
        if normalizer is not None:
            trajectories[:, root_index] /= normalizer

    motion = SkeletalMotion(name, trajectories, joint_transforms, roots, 1.0 / frame_time, frame_count)
    logger.info(
        f"Imported {name or 'BVH data'}: {len(roots)} skeleton(s), "
        f"{frame_count} frames at {motion.sampling_rate:.2f} Hz")
    return motion


def load_bvh_string(text, name="", config=None):
    """
    Import BVH data held in memory.

    Args:
        text: BVH contents as str or bytes
        name: Name given to the motion
        config: ImportConfig

    Returns:
        SkeletalMotion

    Raises:
        BVHImportError: If the data is not a valid BVH file
    """
    try:
        return parse_bvh_tokens(tokenize(text), name=name, config=config)
    except BVHImportError as e:
        logger.warning(f"There were invalid values encountered in the BVH data: {e}")
        raise


def load_bvh_file(bvh_file, config=None):
    """
    Import a BVH file.

    The motion is named after the file path.

    Args:
        bvh_file: Path to BVH file
        config: ImportConfig

    Returns:
        SkeletalMotion

    Raises:
        BVHImportError: If the file cannot be read or is not a valid BVH file
    """
    path = Path(bvh_file)
    try:
        data = path.read_bytes()
    except OSError as e:
        logger.warning(f"Could not open {path}: {e}")
        raise BVHImportError(f"Could not read file: {e}", source=str(path)) from e

    return load_bvh_string(data, name=str(bvh_file), config=config)
