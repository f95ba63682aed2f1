import logging

import numpy as np
import pytest
from numpy.testing import assert_allclose
from scipy.spatial.transform import Rotation as R

from bvh_motion import BVHImportError, ImportConfig, LeafChannels, SkeletalMotion, load_bvh_file, load_bvh_string


HEADER = "HIERARCHY ROOT Hips { OFFSET 0 0 0 " \
         "CHANNELS 6 Xposition Yposition Zposition Zrotation Xrotation Yrotation " \
         "End Site { OFFSET 0 1 0 } } "


def test_load_file(chain_file):
    motion = load_bvh_file(chain_file)
    assert motion.name == str(chain_file)
    assert motion.frame_count == 2
    assert motion.sampling_rate == pytest.approx(25.0)
    assert motion.frame_time == pytest.approx(0.04)
    assert motion.duration == pytest.approx(0.08)
    assert motion.skeleton_count == 1
    assert motion.get_root(0).name == "Hips"


def test_bvh_import_classmethod(chain_file):
    motion = SkeletalMotion.bvh_import(str(chain_file))
    assert motion.frame_count == 2


def test_table_lengths(chain_bvh, two_roots_bvh):
    for text in (chain_bvh, two_roots_bvh):
        motion = load_bvh_string(text)
        trajectories = motion.root_trajectories
        assert len(trajectories) == motion.frame_count
        assert all(len(entry) == motion.skeleton_count for entry in trajectories)

        transforms = motion.joint_transforms
        for root in motion.skeleton_roots:
            for joint in root.iter_preorder():
                if joint.is_leaf:
                    assert joint.name not in transforms
                else:
                    assert len(transforms[joint.name]) == motion.frame_count


def test_root_trajectory(chain_bvh):
    motion = load_bvh_string(chain_bvh)
    assert_allclose(motion.root_trajectories[0, 0], [1.0, 2.0, 3.0])
    assert_allclose(motion.root_trajectories[1, 0], [10.0, 0.0, 0.0])
    assert not motion.root_trajectories.flags.writeable


def test_root_position_follows_channel_axes():
    text = ("HIERARCHY ROOT Hips { OFFSET 0 0 0 "
            "CHANNELS 6 Zposition Xposition Yposition Zrotation Xrotation Yrotation "
            "End Site { OFFSET 0 1 0 } } "
            "MOTION Frames: 1 Frame Time: 0.1 1 2 3 0 0 0")
    motion = load_bvh_string(text)
    assert_allclose(motion.root_trajectories[0, 0], [2.0, 3.0, 1.0])


def test_rotation_uses_declared_channel_order():
    text = ("HIERARCHY ROOT Hips { OFFSET 0 0 0 "
            "CHANNELS 6 Xposition Yposition Zposition Zrotation Xrotation Yrotation "
            "JOINT Arm { OFFSET 1 0 0 CHANNELS 3 Yrotation Zrotation Xrotation "
            "End Site { OFFSET 1 0 0 } } } "
            "MOTION Frames: 1 Frame Time: 0.1 0 0 0 30 45 60 10 20 30")
    motion = load_bvh_string(text)

    hips = motion.get_local_transform_by_name("Hips", 0).rotation
    assert_allclose(hips, R.from_euler("ZXY", [30, 45, 60], degrees=True).as_matrix(), atol=1e-12)
    assert not np.allclose(hips, R.from_euler("XYZ", [45, 60, 30], degrees=True).as_matrix())

    arm = motion.get_local_transform_by_name("Arm", 0)
    assert_allclose(arm.rotation, R.from_euler("YZX", [10, 20, 30], degrees=True).as_matrix(), atol=1e-12)
    assert_allclose(arm.origin, [1.0, 0.0, 0.0])


def test_two_roots(two_roots_bvh):
    motion = load_bvh_string(two_roots_bvh)
    assert motion.skeleton_count == 2
    assert [r.name for r in motion.skeleton_roots] == ["A", "B"]
    assert motion.root_trajectories.shape == (3, 2, 3)
    assert_allclose(motion.root_trajectories[:, 0, 0], [0.0, 1.0, 2.0])
    assert_allclose(motion.root_trajectories[:, 1, 0], [5.0, 6.0, 7.0])


def test_channel_orderings(chain_bvh):
    motion = load_bvh_string(chain_bvh)
    assert motion.channel_orderings == {
        "Hips": [0, 1, 2, 2, 0, 1],
        "Spine": [2, 0, 1],
        "LeftLeg": [2, 0, 1],
    }


CHILDLESS_JOINT = HEADER.replace("End Site { OFFSET 0 1 0 }",
                                 "JOINT Tip { OFFSET 0 1 0 CHANNELS 3 Zrotation Xrotation Yrotation }")


def test_childless_joint_takes_no_motion_values():
    text = CHILDLESS_JOINT + "MOTION Frames: 2 Frame Time: 0.1 0 0 0 0 0 0 5 6 7 90 0 0"
    motion = load_bvh_string(text)
    assert "Tip" not in motion.joint_transforms
    assert len(motion.joint_transforms["Hips"]) == 2
    assert_allclose(motion.root_trajectories[1, 0], [5.0, 6.0, 7.0])

    pose = motion.query_skeletal_animation(1, 0, False, joint_positions_by_name=True)
    assert_allclose(pose.joint_positions_by_name["Tip"], [-1.0, 0.0, 0.0], atol=1e-9)


def test_childless_joint_with_extra_values_rejected():
    text = CHILDLESS_JOINT + "MOTION Frames: 1 Frame Time: 0.1 0 0 0 0 0 0 1 2 3"
    with pytest.raises(BVHImportError, match="Expected 6 motion values"):
        load_bvh_string(text)


def test_childless_joint_channels_read_when_configured():
    text = (CHILDLESS_JOINT + "MOTION Frames: 2 Frame Time: 0.1 "
            "0 0 0 0 0 0 1 2 3 "
            "5 6 7 90 0 0 4 5 6")
    motion = load_bvh_string(text, config=ImportConfig(leaf_channels=LeafChannels.READ))
    assert "Tip" not in motion.joint_transforms
    assert len(motion.joint_transforms["Hips"]) == 2
    assert_allclose(motion.root_trajectories[1, 0], [5.0, 6.0, 7.0])

    with pytest.raises(BVHImportError):
        load_bvh_string(text)


def test_childless_root_reads_only_its_position():
    text = ("HIERARCHY ROOT Hips { OFFSET 0 0 0 "
            "CHANNELS 6 Xposition Yposition Zposition Zrotation Xrotation Yrotation } "
            "MOTION Frames: 2 Frame Time: 0.1 1 2 3 4 5 6")
    motion = load_bvh_string(text)
    assert motion.joint_transforms == {}
    assert_allclose(motion.root_trajectories[:, 0], [[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]])


def test_non_root_position_channels_are_consumed():
    text = ("HIERARCHY ROOT Hips { OFFSET 0 0 0 "
            "CHANNELS 6 Xposition Yposition Zposition Zrotation Xrotation Yrotation "
            "JOINT Arm { OFFSET 1 0 0 "
            "CHANNELS 6 Xposition Yposition Zposition Zrotation Xrotation Yrotation "
            "End Site { OFFSET 1 0 0 } } } "
            "MOTION Frames: 1 Frame Time: 0.1 0 0 0 0 0 0 9 9 9 90 0 0")
    motion = load_bvh_string(text)
    arm = motion.get_local_transform_by_name("Arm", 0)
    assert_allclose(arm.origin, [1.0, 0.0, 0.0])
    assert_allclose(arm.rotation @ [1.0, 0.0, 0.0], [0.0, 1.0, 0.0], atol=1e-12)


def test_frames_zero():
    motion = load_bvh_string(HEADER + "MOTION Frames: 0 Frame Time: 0.1")
    assert motion.frame_count == 0
    assert motion.root_trajectories.shape == (0, 1, 3)


def test_normalize_offsets(chain_bvh):
    motion = load_bvh_string(chain_bvh, config=ImportConfig(normalize_offsets=True))
    joints, _ = motion.query_skeleton()
    assert_allclose(joints["Spine"].local_offset, [0.0, 1.0, 0.0])
    assert_allclose(joints["LeftLeg_end"].local_offset, [0.0, -0.8, 0.0])
    assert_allclose(motion.root_trajectories[0, 0], [0.2, 0.4, 0.6])
    assert_allclose(motion.get_local_transform_by_name("Spine", 0).origin, [0.0, 1.0, 0.0])


def test_non_ascii_separator_in_file(tmp_path, chain_bvh):
    path = tmp_path / "utf8.bvh"
    path.write_bytes(chain_bvh.replace("Frame Time:", "Frame\u00a0Time:").encode("utf-8"))
    motion = load_bvh_file(path)
    assert motion.frame_count == 2


@pytest.mark.parametrize("text", [
    "",
    "   \n\t",
    "HIERARCHY ROOT Hips } MOTION Frames: 0 Frame Time: 0.1",
    HEADER.replace("CHANNELS 6", "CHANNELS 4") + "MOTION Frames: 0 Frame Time: 0.1",
    HEADER + "MOTION Frames: 3 Frame Time: 0.1 0 0 0 0 0 0 0 0 0 0 0 0",
    HEADER + "MOTION Frames: 1 Frame Time: 0.1 0 0 0 0 0 0 7",
    HEADER + "MOTION Frames: 1 Frame Time: 0.1 0 0 0 0 0 0 End",
    HEADER + "MOTION Frames: 1 Frame Time: 0.1 0 0 0 0 x 0",
    HEADER + "MOTION Frames: 1 Frame Time: 0.1 0 0 0 0 1_0 0",
    HEADER + "MOTION Frame: 1 Frame Time: 0.1 0 0 0 0 0 0",
    HEADER + "MOTION Frames: 1 Frame Time 0.1 0 0 0 0 0 0",
    HEADER + "MOTION Frames: one Frame Time: 0.1 0 0 0 0 0 0",
    HEADER + "MOTION Frames: -1 Frame Time: 0.1",
    HEADER + "MOTION Frames: 1 Frame Time: 0 0 0 0 0 0 0",
    HEADER + "MOTION Frames: 1",
    HEADER,
    HEADER + "JUNK MOTION Frames: 0 Frame Time: 0.1",
])
def test_malformed_input_rejected(text):
    with pytest.raises(BVHImportError):
        load_bvh_string(text)


def test_missing_frame_rejected(chain_bvh):
    text = chain_bvh.replace("Frames: 2", "Frames: 3")
    with pytest.raises(BVHImportError, match="Expected 36 motion values"):
        load_bvh_string(text)


def test_trailing_tokens_rejected(chain_bvh):
    with pytest.raises(BVHImportError):
        load_bvh_string(chain_bvh + "0\n")


def test_unreadable_file(tmp_path):
    missing = tmp_path / "missing.bvh"
    with pytest.raises(BVHImportError) as info:
        load_bvh_file(missing)
    assert isinstance(info.value.__cause__, OSError)
    assert info.value.source == str(missing)


def test_failure_is_logged(caplog):
    with caplog.at_level(logging.WARNING, logger="bvh_motion"):
        with pytest.raises(BVHImportError):
            load_bvh_string("HIERARCHY ROOT Hips }", name="broken.bvh")
    assert "broken.bvh" in caplog.text


def test_hierarchy_logged_at_debug(caplog, chain_bvh):
    with caplog.at_level(logging.DEBUG, logger="bvh_motion"):
        load_bvh_string(chain_bvh)
    assert "_Spine" in caplog.text
    assert "__Spine_end" in caplog.text
