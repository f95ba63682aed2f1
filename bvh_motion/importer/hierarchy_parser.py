"""
Recursive-descent parser for the HIERARCHY section of a BVH file.

Grammar:
    File      := "HIERARCHY" Root+ "MOTION" ...
    Root      := "ROOT" Name JointBody
    Joint     := "JOINT" Name JointBody
    JointBody := "{" "OFFSET" x y z "CHANNELS" n Channel{n} (Joint | EndSite)* "}"
    EndSite   := "End" "Site" "{" "OFFSET" x y z "}"

n is 3 (three rotation channels) or 6 (three position channels, then three
rotation channels).
"""

from ..config import EndSiteOffset, ImportConfig
from ..skeleton.skeleton_joint import SkeletonJoint
from ..utils.rotation_utils import channel_to_axis, is_position_channel, is_rotation_channel


VALID_CHANNEL_COUNTS = ("3", "6")


def _read_channels(stream, count):
    """Read count channel names and return their axis indices."""
    axes = []
    for i in range(count):
        token = stream.next()
        if channel_to_axis(token) < 0:
            raise stream.error(f"Unknown channel '{token}'", index=stream.index - 1)
        wants_position = count == 6 and i < 3
        if wants_position and not is_position_channel(token):
            raise stream.error(f"Expected a position channel, found '{token}'", index=stream.index - 1)
        if not wants_position and not is_rotation_channel(token):
            raise stream.error(f"Expected a rotation channel, found '{token}'", index=stream.index - 1)
        axes.append(channel_to_axis(token))
    return axes


def parse_end_site(stream, parent_name, parent_offset, config=None):
    """
    Parse an "End Site" block into a leaf joint named <parent>_end.

    With EndSiteOffset.PARENT the leaf copies the enclosing joint's offset
    instead of its own, as the legacy importer did.
    """
    config = config or ImportConfig()

    stream.expect("End")
    stream.expect("Site")
    stream.expect("{")
    stream.expect("OFFSET")
    own_offset = stream.read_floats(3)
    stream.expect("}")

    if config.end_site_offset is EndSiteOffset.PARENT:
        offset = parent_offset
    else:
        offset = own_offset

    return SkeletonJoint(f"{parent_name}_end", (), offset, is_end_site=True)


def parse_joint(stream, channel_orderings, config=None, depth=0):
    """
    Parse one ROOT or JOINT production starting at the stream position.

    Args:
        stream: TokenStream positioned on the ROOT/JOINT keyword
        channel_orderings: Joint name -> axis indices; filled in place, the
            first declaration of a name is kept
        config: ImportConfig
        depth: Nesting depth of this joint

    Returns:
        Tuple (joint, end_index) where end_index is the index of the closing
        "}" of this joint. The stream is left just past it.

    Raises:
        BVHImportError: On any grammar violation; nothing is returned then
    """
    config = config or ImportConfig()
    if depth > config.max_depth:
        raise stream.error(f"Hierarchy nested deeper than {config.max_depth} joints")

    keyword = stream.next()
    if keyword not in ("ROOT", "JOINT"):
        raise stream.error(f"Expected 'ROOT' or 'JOINT', found '{keyword}'", index=stream.index - 1)

    name = stream.next()
    stream.expect("{")
    stream.expect("OFFSET")
    offset = stream.read_floats(3)
    stream.expect("CHANNELS")

    count_token = stream.next()
    if count_token not in VALID_CHANNEL_COUNTS:
        raise stream.error(f"Invalid channel count '{count_token}' for joint {name}", index=stream.index - 1)
    axes = _read_channels(stream, int(count_token))
    channel_orderings.setdefault(name, list(axes))

    # Now to read the child joints
    children = []
    while True:
        token = stream.peek()
        if token is None:
            raise stream.error(f"Unexpected end of file inside joint {name}")
        if token == "}":
            stream.next()
            break
        if token == "JOINT":
            child, _ = parse_joint(stream, channel_orderings, config, depth + 1)
            children.append(child)
        elif token == "End":
            children.append(parse_end_site(stream, name, offset, config))
        else:
            raise stream.error(f"Unexpected token '{token}' in joint {name}")

    return SkeletonJoint(name, children, offset, channels=axes), stream.index - 1


def parse_hierarchy(stream, config=None):
    """
    Parse the HIERARCHY section up to (not including) the MOTION keyword.

    Returns:
        Tuple (skeleton_roots, channel_orderings)
    """
    config = config or ImportConfig()

    stream.expect("HIERARCHY")

    roots = []
    channel_orderings = {}
    while stream.peek() != "MOTION":
        token = stream.peek()
        if token is None:
            raise stream.error("Missing MOTION section")
        if token != "ROOT":
            raise stream.error(f"Expected 'ROOT' or 'MOTION', found '{token}'")
        root, _ = parse_joint(stream, channel_orderings, config)
        roots.append(root)

    if not roots:
        raise stream.error("No ROOT joint in HIERARCHY")

    return roots, channel_orderings
