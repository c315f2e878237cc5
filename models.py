# models.py
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional

NECK_ANGLE = "neckAngle"
HEAD_SHOULDER_RATIO = "headShoulderRatio"
FORWARD_OFFSET = "forwardOffset"
SHOULDER_DROP = "shoulderDrop"

METRIC_NAMES = (NECK_ANGLE, HEAD_SHOULDER_RATIO, FORWARD_OFFSET, SHOULDER_DROP)


@dataclass(frozen=True)
class JointPoint:
    """One detected joint, normalized coordinates with origin bottom-left."""
    x: float
    y: float
    confidence: float

    def to_dict(self):
        return {"x": self.x, "y": self.y, "confidence": self.confidence}


JointSet = Dict[str, JointPoint]


@dataclass(frozen=True)
class SelectedJoints:
    """Usable joints for the better-visible body side. Unusable joints are None."""
    side: str
    ear: Optional[JointPoint] = None
    shoulder: Optional[JointPoint] = None
    neck: Optional[JointPoint] = None
    nose: Optional[JointPoint] = None
    left_shoulder: Optional[JointPoint] = None
    right_shoulder: Optional[JointPoint] = None

    @property
    def head(self) -> Optional[JointPoint]:
        # nose is the steadier landmark; ear is the fallback
        return self.nose if self.nose is not None else self.ear

    @property
    def both_shoulders(self) -> bool:
        return self.left_shoulder is not None and self.right_shoulder is not None


@dataclass
class CalibrationData:
    """Baseline captured while the user sits upright."""
    timestamp: datetime
    side: str
    baseline_neck_angle: float
    baseline_head_shoulder_ratio: float
    baseline_forward_offset: float
    baseline_shoulder_drop: Optional[float]
    available_metrics: List[str] = field(default_factory=list)

    def baseline(self, name) -> Optional[float]:
        return {
            NECK_ANGLE: self.baseline_neck_angle,
            HEAD_SHOULDER_RATIO: self.baseline_head_shoulder_ratio,
            FORWARD_OFFSET: self.baseline_forward_offset,
            SHOULDER_DROP: self.baseline_shoulder_drop,
        }.get(name)

    def to_dict(self):
        return {
            "timestamp": self.timestamp.isoformat(),
            "side": self.side,
            "baselineNeckAngle": self.baseline_neck_angle,
            "baselineHeadShoulderRatio": self.baseline_head_shoulder_ratio,
            "baselineForwardOffset": self.baseline_forward_offset,
            "baselineShoulderDrop": self.baseline_shoulder_drop,
            "availableMetrics": list(self.available_metrics),
        }

    @classmethod
    def from_dict(cls, data):
        timestamp = datetime.fromisoformat(data["timestamp"].replace("Z", "+00:00"))
        if timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=timezone.utc)
        drop = data.get("baselineShoulderDrop")
        return cls(
            timestamp=timestamp,
            side=data["side"],
            baseline_neck_angle=float(data["baselineNeckAngle"]),
            baseline_head_shoulder_ratio=float(data["baselineHeadShoulderRatio"]),
            baseline_forward_offset=float(data["baselineForwardOffset"]),
            baseline_shoulder_drop=float(drop) if drop is not None else None,
            available_metrics=list(data["availableMetrics"]),
        )


@dataclass
class PostureAssessment:
    """Result of comparing one frame against the baseline."""
    is_good_posture: bool
    composite_score: float
    deviations: Dict[str, float]
    metrics_used: List[str]
    details: str
    skipped: bool = False

    def deviation(self, name) -> Optional[float]:
        return self.deviations.get(name)

    @property
    def neck_angle_deviation(self):
        return self.deviation(NECK_ANGLE)

    @property
    def head_drop_deviation(self):
        return self.deviation(HEAD_SHOULDER_RATIO)

    @property
    def forward_offset_deviation(self):
        return self.deviation(FORWARD_OFFSET)

    @property
    def shoulder_drop_deviation(self):
        return self.deviation(SHOULDER_DROP)
