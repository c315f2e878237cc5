# storage.py
import json
import logging
from pathlib import Path

from config import calibration_file, logs_dir
from errors import NotCalibrated
from models import CalibrationData

logger = logging.getLogger(__name__)


def write_json(path, data):
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, sort_keys=True)
    return path


def save_calibration(calibration, path=None):
    return write_json(path or calibration_file(), calibration.to_dict())


def load_calibration(path=None):
    """Stored calibration, or None when missing or unreadable"""
    path = Path(path) if path else calibration_file()
    if not path.exists():
        return None
    try:
        with path.open("r", encoding="utf-8") as f:
            return CalibrationData.from_dict(json.load(f))
    except (OSError, ValueError, KeyError, TypeError) as e:
        logger.warning(f"Ignoring unreadable calibration {path}: {e}")
        return None


def require_calibration(path=None):
    calibration = load_calibration(path)
    if calibration is None:
        raise NotCalibrated()
    return calibration


def save_report(report, stamp):
    return write_json(logs_dir() / f"diagnose_{stamp}.json", report)
