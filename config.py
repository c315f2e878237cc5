# config.py
import json
import logging
import os
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Optional

from errors import ConfigError
from models import FORWARD_OFFSET, HEAD_SHOULDER_RATIO, NECK_ANGLE, SHOULDER_DROP

logger = logging.getLogger(__name__)

# Monitoring loop
INTERVAL_SEC = 60
BAD_STREAK_THRESHOLD = 3
COOLDOWN_SEC = 300
ALERT_SOUND = "Purr"

# Per-metric deviation tolerances
THRESHOLDS = {
    "neck_angle_deg": 12.0,
    "head_drop_ratio": 0.15,
    "forward_offset": 0.10,
    "shoulder_drop": 0.03,
}
HEAD_DROP_FALLBACK = 0.04        # head drop tolerance when shoulder width is unknown

# Classification
COMPOSITE_BAD = 1.0
EXTREME_METRIC = 1.5
WARN_SCORE = 0.7
METRIC_WEIGHTS = {
    NECK_ANGLE: 0.35,
    HEAD_SHOULDER_RATIO: 0.30,
    FORWARD_OFFSET: 0.25,
    SHOULDER_DROP: 0.10,
}
MIN_METRICS = 2

# Joints
USABLE_CONFIDENCE = 0.3
DETECT_MIN_CONFIDENCE = 0.1
MIN_SHOULDER_WIDTH = 0.01
MIN_VERTICAL_DIST = 0.01

# Calibration workflow
CALIBRATION_SAMPLES = 3
CALIBRATION_ATTEMPTS = 3
CALIBRATION_PAUSE_SEC = 2.0
CALIBRATION_RETRY_SEC = 1.0
CALIBRATION_LEAD_IN_SEC = 3

ALERT_TITLE = "Straighten Up!"
ALERT_MESSAGE = "You've been slouching. Sit up straight!"

HOME_ENV = "STRAIGHTEN_UP_HOME"

# on-disk key -> Config field
_FILE_KEYS = {
    "interval": "interval",
    "threshold": "threshold",
    "cooldown": "cooldown",
    "neckAngleThreshold": "neck_angle_threshold",
    "headDropThreshold": "head_drop_threshold",
    "forwardOffsetThreshold": "forward_offset_threshold",
    "shoulderDropThreshold": "shoulder_drop_threshold",
    "compositeThreshold": "composite_threshold",
    "extremeMetricThreshold": "extreme_metric_threshold",
    "sound": "sound",
    "deviceID": "device_id",
    "verbose": "verbose",
}


def config_dir():
    override = os.environ.get(HOME_ENV)
    if override:
        return Path(override)
    return Path.home() / ".config" / "straighten_up"


def config_file():
    return config_dir() / "config.json"


def calibration_file():
    return config_dir() / "calibration.json"


def logs_dir():
    return config_dir() / "logs"


@dataclass(frozen=True)
class Config:
    """Settings for one monitoring session. Read-only once built."""

    interval: int = INTERVAL_SEC
    threshold: int = BAD_STREAK_THRESHOLD
    cooldown: int = COOLDOWN_SEC
    neck_angle_threshold: float = THRESHOLDS["neck_angle_deg"]
    head_drop_threshold: float = THRESHOLDS["head_drop_ratio"]
    forward_offset_threshold: float = THRESHOLDS["forward_offset"]
    shoulder_drop_threshold: float = THRESHOLDS["shoulder_drop"]
    composite_threshold: float = COMPOSITE_BAD
    extreme_metric_threshold: float = EXTREME_METRIC
    sound: str = ALERT_SOUND
    device_id: Optional[str] = None
    verbose: bool = False

    def __post_init__(self):
        if self.interval < 1:
            raise ConfigError("interval must be at least 1 second")
        if self.threshold < 1:
            raise ConfigError("threshold must be at least 1")
        if self.cooldown < 0:
            raise ConfigError("cooldown cannot be negative")
        for name in ("neck_angle_threshold", "head_drop_threshold",
                     "forward_offset_threshold", "shoulder_drop_threshold",
                     "composite_threshold", "extreme_metric_threshold"):
            if getattr(self, name) <= 0:
                raise ConfigError(f"{name} must be positive")

    def with_overrides(self, **overrides):
        """Copy with every non-None override applied."""
        known = {f.name for f in fields(self)}
        unknown = set(overrides) - known
        if unknown:
            raise ConfigError(f"unknown config field(s): {', '.join(sorted(unknown))}")
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})

    def to_dict(self):
        values = asdict(self)
        return {key: values[name] for key, name in _FILE_KEYS.items()}

    @classmethod
    def from_dict(cls, data):
        if not isinstance(data, dict):
            raise ConfigError(f"invalid config: expected an object, got {type(data).__name__}")
        # missing keys keep their defaults; legacy keys are ignored
        kwargs = {name: data[key] for key, name in _FILE_KEYS.items() if key in data}
        try:
            return cls(**kwargs)
        except TypeError as e:
            raise ConfigError(f"invalid config: {e}") from e


def load_config(path=None):
    path = Path(path) if path else config_file()
    if not path.exists():
        return Config()
    try:
        with path.open("r", encoding="utf-8") as f:
            return Config.from_dict(json.load(f))
    except (OSError, ValueError, ConfigError) as e:
        logger.warning(f"Ignoring unreadable config {path}: {e}")
        return Config()


def save_config(config, path=None):
    path = Path(path) if path else config_file()
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(config.to_dict(), f, indent=2, sort_keys=True)
    return path
