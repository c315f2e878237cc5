from datetime import datetime, timezone

import pytest

from config import Config
from models import CalibrationData, JointPoint


def jp(x, y, c=0.9):
    return JointPoint(x=x, y=y, confidence=c)


@pytest.fixture
def config():
    return Config()


@pytest.fixture
def upright_joints():
    return {
        "left_ear": jp(0.5, 0.85, 0.9),
        "left_shoulder": jp(0.5, 0.6, 0.9),
        "right_shoulder": jp(0.7, 0.6, 0.5),
        "neck": jp(0.5, 0.65, 0.8),
        "nose": jp(0.5, 0.85, 0.9),
    }


@pytest.fixture
def three_metric_calibration():
    def make(neck=5.0, ratio=0.5, forward=0.1):
        return CalibrationData(
            timestamp=datetime(2026, 1, 1, tzinfo=timezone.utc),
            side="left",
            baseline_neck_angle=neck,
            baseline_head_shoulder_ratio=ratio,
            baseline_forward_offset=forward,
            baseline_shoulder_drop=None,
            available_metrics=["neckAngle", "headShoulderRatio", "forwardOffset"],
        )
    return make
