# angles.py
import math

from config import MIN_SHOULDER_WIDTH, MIN_VERTICAL_DIST
from models import FORWARD_OFFSET, HEAD_SHOULDER_RATIO, NECK_ANGLE, SHOULDER_DROP


def neck_inclination(neck, head):
    """
    Angle of the neck->head vector from vertical, in degrees.
    0° = head directly above neck, increases as the head drifts forward.
    """
    dx = head.x - neck.x
    dy = head.y - neck.y
    return math.degrees(math.atan2(abs(dx), dy))


def head_shoulder_ratio(head, shoulder, left_shoulder=None, right_shoulder=None):
    """
    Vertical head-over-shoulder gap, scaled by shoulder width when both
    shoulders are known. Larger = more upright.
    """
    vertical_gap = head.y - shoulder.y
    if left_shoulder is not None and right_shoulder is not None:
        width = abs(left_shoulder.x - right_shoulder.x)
        if width > MIN_SHOULDER_WIDTH:
            return vertical_gap / width
    return vertical_gap


def ear_shoulder_forward_offset(ear, shoulder, side):
    """
    Horizontal ear offset from the shoulder per unit of vertical distance.
    Positive = head pushed forward, whichever side faces the camera.
    """
    dx = ear.x - shoulder.x
    vertical_dist = max(abs(ear.y - shoulder.y), MIN_VERTICAL_DIST)
    if side == "right":
        dx = -dx
    return dx / vertical_dist


def shoulder_drop(left_shoulder, right_shoulder):
    """Height difference between the two shoulders (always >= 0)."""
    return abs(left_shoulder.y - right_shoulder.y)


# Each measure reads a SelectedJoints and returns None if its joints are missing

def measure_neck_angle(sel):
    if sel.neck is None or sel.head is None:
        return None
    return neck_inclination(sel.neck, sel.head)


def measure_head_shoulder_ratio(sel):
    if sel.head is None or sel.shoulder is None:
        return None
    return head_shoulder_ratio(sel.head, sel.shoulder, sel.left_shoulder, sel.right_shoulder)


def measure_forward_offset(sel):
    if sel.ear is None or sel.shoulder is None:
        return None
    return ear_shoulder_forward_offset(sel.ear, sel.shoulder, sel.side)


def measure_shoulder_drop(sel):
    if not sel.both_shoulders:
        return None
    return shoulder_drop(sel.left_shoulder, sel.right_shoulder)


MEASURES = {
    NECK_ANGLE: measure_neck_angle,
    HEAD_SHOULDER_RATIO: measure_head_shoulder_ratio,
    FORWARD_OFFSET: measure_forward_offset,
    SHOULDER_DROP: measure_shoulder_drop,
}


def compute_metrics(sel):
    """Every metric computable from sel, in canonical order"""
    out = {}
    for name, measure in MEASURES.items():
        value = measure(sel)
        if value is not None:
            out[name] = value
    return out
