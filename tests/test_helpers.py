from types import SimpleNamespace

import pytest

from conftest import jp
from helpers import (determine_side, landmarks_to_joints, mean_ignore_none, midpoint,
                     select_joints, usable)


def test_left_side_with_higher_confidence():
    joints = {
        "left_ear": jp(0.3, 0.9, 0.9),
        "left_shoulder": jp(0.3, 0.6, 0.9),
        "right_ear": jp(0.7, 0.9, 0.3),
        "right_shoulder": jp(0.7, 0.6, 0.3),
    }
    assert determine_side(joints) == "left"


def test_right_side_with_higher_confidence():
    joints = {
        "left_ear": jp(0.3, 0.9, 0.2),
        "left_shoulder": jp(0.3, 0.6, 0.2),
        "right_ear": jp(0.7, 0.9, 0.8),
        "right_shoulder": jp(0.7, 0.6, 0.8),
    }
    assert determine_side(joints) == "right"


def test_tie_goes_left():
    assert determine_side({}) == "left"
    assert determine_side({"left_ear": jp(0, 0, 0.5), "right_ear": jp(0, 0, 0.5)}) == "left"


def test_missing_joints_count_as_zero():
    assert determine_side({"right_shoulder": jp(0.7, 0.6, 0.1)}) == "right"


def test_select_joints_filters_by_confidence():
    joints = {
        "left_ear": jp(0.3, 0.9, 0.5),
        "left_shoulder": jp(0.3, 0.6, 0.5),
        "neck": jp(0.5, 0.65, 0.1),
        "nose": jp(0.5, 0.85, 0.8),
    }
    sel = select_joints(joints)
    assert sel.side == "left"
    assert sel.ear is joints["left_ear"]
    assert sel.shoulder is joints["left_shoulder"]
    assert sel.neck is None
    assert sel.nose is joints["nose"]
    assert sel.head is joints["nose"]
    assert sel.right_shoulder is None
    assert not sel.both_shoulders


def test_select_joints_uses_chosen_side():
    joints = {
        "left_ear": jp(0.3, 0.9, 0.2),
        "right_ear": jp(0.7, 0.9, 0.9),
        "right_shoulder": jp(0.7, 0.6, 0.9),
    }
    sel = select_joints(joints)
    assert sel.side == "right"
    assert sel.ear is joints["right_ear"]
    assert sel.head is joints["right_ear"]


def test_select_joints_never_fails_on_empty():
    sel = select_joints({})
    assert sel.side == "left"
    assert sel.head is None


def test_usable_floor_is_inclusive():
    assert usable({"neck": jp(0, 0, 0.3)}, "neck") is not None
    assert usable({"neck": jp(0, 0, 0.29)}, "neck") is None


def _lm(x, y, visibility):
    return SimpleNamespace(x=x, y=y, z=0.0, visibility=visibility)


def test_landmarks_to_joints_flips_y_and_synthesizes_neck():
    lms = [_lm(0.5, 0.5, 0.0) for _ in range(33)]
    lms[0] = _lm(0.5, 0.2, 0.95)     # nose
    lms[11] = _lm(0.4, 0.4, 0.9)     # left shoulder
    lms[12] = _lm(0.6, 0.44, 0.7)    # right shoulder

    joints = landmarks_to_joints(lms)

    assert joints["nose"].y == pytest.approx(0.8)
    assert joints["neck"].x == pytest.approx(0.5)
    assert joints["neck"].y == pytest.approx(0.58)
    assert joints["neck"].confidence == pytest.approx(0.7)
    # zero-visibility landmarks are dropped
    assert "left_hip" not in joints
    assert "root" not in joints


def test_midpoint_takes_weaker_confidence():
    m = midpoint(jp(0.0, 0.0, 0.9), jp(1.0, 1.0, 0.4))
    assert (m.x, m.y, m.confidence) == (0.5, 0.5, 0.4)


def test_mean_ignore_none():
    assert mean_ignore_none([1.0, None, 3.0]) == pytest.approx(2.0)
    assert mean_ignore_none([None]) is None


def test_landmarks_to_joints_synthesizes_root_from_hips():
    lms = [_lm(0.5, 0.5, 0.0) for _ in range(33)]
    lms[23] = _lm(0.4, 0.9, 0.8)     # left hip
    lms[24] = _lm(0.6, 0.9, 0.6)     # right hip

    joints = landmarks_to_joints(lms)

    assert joints["root"].x == pytest.approx(0.5)
    assert joints["root"].y == pytest.approx(0.1)
    assert joints["root"].confidence == pytest.approx(0.6)
