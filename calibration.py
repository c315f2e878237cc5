# calibration.py
# One frame gives a snapshot of whichever metrics were computable;
# several snapshots are averaged into the stored baseline.
import logging
from datetime import datetime, timezone

from angles import compute_metrics
from config import MIN_METRICS
from errors import CalibrationFailed, InsufficientJoints
from helpers import mean_ignore_none, select_joints
from models import (FORWARD_OFFSET, HEAD_SHOULDER_RATIO, METRIC_NAMES, NECK_ANGLE,
                    SHOULDER_DROP, CalibrationData)

logger = logging.getLogger(__name__)


def _now(now):
    return now if now is not None else datetime.now(timezone.utc)


def calibrate(joints, now=None):
    """
    Baseline from one frame of joints.

    Raises InsufficientJoints when fewer than two metrics can be computed.
    Metrics that were not computed hold 0.0 (None for shoulder drop); only
    names listed in available_metrics are meaningful.
    """
    sel = select_joints(joints)
    values = compute_metrics(sel)

    if len(values) < MIN_METRICS:
        raise InsufficientJoints(len(values), joints.keys())

    return CalibrationData(
        timestamp=_now(now),
        side=sel.side,
        baseline_neck_angle=values.get(NECK_ANGLE, 0.0),
        baseline_head_shoulder_ratio=values.get(HEAD_SHOULDER_RATIO, 0.0),
        baseline_forward_offset=values.get(FORWARD_OFFSET, 0.0),
        baseline_shoulder_drop=values.get(SHOULDER_DROP),
        available_metrics=list(values),
    )


def aggregate_calibrations(snapshots, now=None):
    """
    Average successful single-frame calibrations into one baseline.

    Each metric is averaged only over the snapshots that computed it.
    available_metrics is the union across snapshots, side comes from the
    most recent snapshot.
    """
    snapshots = list(snapshots)
    if not snapshots:
        raise CalibrationFailed(0)

    seen = set()
    for snap in snapshots:
        seen.update(snap.available_metrics)
    metrics = [name for name in METRIC_NAMES if name in seen]

    if len(metrics) < MIN_METRICS:
        raise CalibrationFailed(len(snapshots), metrics)

    def average(name):
        return mean_ignore_none(
            [s.baseline(name) for s in snapshots if name in s.available_metrics]
        )

    result = CalibrationData(
        timestamp=_now(now),
        side=snapshots[-1].side,
        baseline_neck_angle=average(NECK_ANGLE) or 0.0,
        baseline_head_shoulder_ratio=average(HEAD_SHOULDER_RATIO) or 0.0,
        baseline_forward_offset=average(FORWARD_OFFSET) or 0.0,
        baseline_shoulder_drop=average(SHOULDER_DROP),
        available_metrics=metrics,
    )
    logger.debug(f"Aggregated {len(snapshots)} snapshot(s): side={result.side} metrics={metrics}")
    return result
