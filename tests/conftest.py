import pytest


CHAIN_BVH = """HIERARCHY
ROOT Hips
{
  OFFSET 0.0 0.0 0.0
  CHANNELS 6 Xposition Yposition Zposition Zrotation Xrotation Yrotation
  JOINT Spine
  {
    OFFSET 0.0 5.0 0.0
    CHANNELS 3 Zrotation Xrotation Yrotation
    End Site
    {
      OFFSET 0.0 3.0 0.0
    }
  }
  JOINT LeftLeg
  {
    OFFSET 2.0 0.0 0.0
    CHANNELS 3 Zrotation Xrotation Yrotation
    End Site
    {
      OFFSET 0.0 -4.0 0.0
    }
  }
}
MOTION
Frames: 2
Frame Time: 0.04
1 2 3 0 0 0 0 0 0 0 0 0
10 0 0 90 0 0 0 0 0 0 0 0
"""

SINGLE_END_SITE_BVH = """HIERARCHY
ROOT Hips
{
  OFFSET 0 0 0
  CHANNELS 6 Xposition Yposition Zposition Zrotation Xrotation Yrotation
  End Site
  {
    OFFSET 0 10 0
  }
}
MOTION
Frames: 1
Frame Time: 0.0333333
0 0 0 90 0 0
"""

TWO_ROOTS_BVH = """HIERARCHY
ROOT A
{
  OFFSET 0 0 0
  CHANNELS 6 Xposition Yposition Zposition Zrotation Xrotation Yrotation
  End Site
  {
    OFFSET 1 0 0
  }
}
ROOT B
{
  OFFSET 0 0 0
  CHANNELS 6 Xposition Yposition Zposition Zrotation Xrotation Yrotation
  End Site
  {
    OFFSET 0 0 1
  }
}
MOTION
Frames: 3
Frame Time: 0.5
0 0 0 0 0 0 5 0 0 0 0 0
1 0 0 0 0 0 6 0 0 0 0 0
2 0 0 0 0 0 7 0 0 0 0 0
"""


@pytest.fixture
def chain_bvh():
    return CHAIN_BVH


@pytest.fixture
def single_end_site_bvh():
    return SINGLE_END_SITE_BVH


@pytest.fixture
def two_roots_bvh():
    return TWO_ROOTS_BVH


@pytest.fixture
def chain_file(tmp_path):
    path = tmp_path / "chain.bvh"
    path.write_text(CHAIN_BVH)
    return path
