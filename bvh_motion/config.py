"""
Configuration classes for BVH import.

Contains the import options, the End Site offset policy and the policy for
channels declared on childless joints.
"""

from dataclasses import dataclass
from enum import Enum


class EndSiteOffset(Enum):
    """Where an End Site leaf takes its local offset from"""
    OWN = "own"        # The End Site's own OFFSET block
    PARENT = "parent"  # Legacy importer behavior: the enclosing joint's OFFSET


class LeafChannels(Enum):
    """Whether childless joints take motion values from each frame"""
    SKIP = "skip"  # Leaf joints consume no motion data (root positions excepted)
    READ = "read"  # Every declared channel consumes a value, as most exporters write it


@dataclass(frozen=True)
class ImportConfig:
    """Configuration for the import process"""
    # End Site offset source (default: read the End Site's own OFFSET)
    end_site_offset: EndSiteOffset = EndSiteOffset.OWN

    # Motion values for channels declared on childless joints (default: none)
    leaf_channels: LeafChannels = LeafChannels.SKIP

    # Maximum joint nesting depth accepted by the hierarchy parser
    max_depth: int = 256

    # Divide offsets and root trajectories by the longest joint offset of each skeleton
    normalize_offsets: bool = False

    # Dump the loaded hierarchy at DEBUG level
    log_hierarchy: bool = True

    @staticmethod
    def legacy() -> 'ImportConfig':
        """Settings reproducing the legacy importer's End Site offsets"""
        return ImportConfig(end_site_offset=EndSiteOffset.PARENT)
