# helpers.py
import numpy as np

from config import DETECT_MIN_CONFIDENCE, USABLE_CONFIDENCE
from models import JointPoint, SelectedJoints

# BlazePose landmark index for each joint name we track
LANDMARK_INDEX = {
    "nose": 0,
    "left_eye": 2,
    "right_eye": 5,
    "left_ear": 7,
    "right_ear": 8,
    "left_shoulder": 11,
    "right_shoulder": 12,
    "left_elbow": 13,
    "right_elbow": 14,
    "left_wrist": 15,
    "right_wrist": 16,
    "left_hip": 23,
    "right_hip": 24,
}

UPPER_BODY = ["nose", "neck", "left_ear", "right_ear", "left_shoulder", "right_shoulder"]

SIDE_KEYS = {
    "left": ("left_ear", "left_shoulder"),
    "right": ("right_ear", "right_shoulder"),
}


def get_joint(lm):
    """Convert a MediaPipe landmark to a JointPoint (flips y so origin is bottom-left)"""
    return JointPoint(x=float(lm.x), y=float(1.0 - lm.y), confidence=float(lm.visibility))


def midpoint(a, b):
    """Joint halfway between a and b, trusted as much as the weaker of the two"""
    return JointPoint(
        x=(a.x + b.x) / 2.0,
        y=(a.y + b.y) / 2.0,
        confidence=min(a.confidence, b.confidence),
    )


def landmarks_to_joints(lms, min_conf=DETECT_MIN_CONFIDENCE):
    """Build a JointSet from a MediaPipe landmark list, dropping weak joints"""
    raw = {name: get_joint(lms[idx]) for name, idx in LANDMARK_INDEX.items() if idx < len(lms)}

    # BlazePose has no neck/root landmark; synthesize them (root only shows up in diagnose)
    if "left_shoulder" in raw and "right_shoulder" in raw:
        raw["neck"] = midpoint(raw["left_shoulder"], raw["right_shoulder"])
    if "left_hip" in raw and "right_hip" in raw:
        raw["root"] = midpoint(raw["left_hip"], raw["right_hip"])

    return {name: j for name, j in raw.items() if j.confidence >= min_conf}


def usable(joints, key, min_conf=USABLE_CONFIDENCE):
    """Joint under key if present and confident enough, else None"""
    j = joints.get(key)
    if j is None or j.confidence < min_conf:
        return None
    return j


def side_confidence(joints, side):
    return sum(joints[k].confidence for k in SIDE_KEYS[side] if k in joints)


def determine_side(joints):
    """Body side facing the camera; ties go left"""
    if side_confidence(joints, "left") >= side_confidence(joints, "right"):
        return "left"
    return "right"


def select_joints(joints):
    side = determine_side(joints)
    ear_key, shoulder_key = SIDE_KEYS[side]
    return SelectedJoints(
        side=side,
        ear=usable(joints, ear_key),
        shoulder=usable(joints, shoulder_key),
        neck=usable(joints, "neck"),
        nose=usable(joints, "nose"),
        left_shoulder=usable(joints, "left_shoulder"),
        right_shoulder=usable(joints, "right_shoulder"),
    )


def mean_ignore_none(vals):
    """Mean of list ignoring None values"""
    vals = [v for v in vals if v is not None]
    return float(np.mean(vals)) if vals else None
