"""
BVH import pipeline.

This package provides:
    - tokenizer: Whitespace tokenizer and bounds-checked token cursor
    - hierarchy_parser: Recursive-descent parser for the HIERARCHY section
    - motion_parser: Frame reader for the MOTION section
    - bvh_importer: File/string entry points
"""

from .bvh_importer import load_bvh_file, load_bvh_string, parse_bvh_tokens
from .hierarchy_parser import parse_hierarchy, parse_joint
from .motion_parser import parse_motion_data, parse_motion_header
from .tokenizer import TokenStream, tokenize

__all__ = [
    "load_bvh_file",
    "load_bvh_string",
    "parse_bvh_tokens",
    "parse_hierarchy",
    "parse_joint",
    "parse_motion_data",
    "parse_motion_header",
    "TokenStream",
    "tokenize",
]
