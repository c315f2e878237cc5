# classifier.py
from dataclasses import dataclass
from typing import Callable

from angles import MEASURES
from config import HEAD_DROP_FALLBACK, METRIC_WEIGHTS, MIN_METRICS, WARN_SCORE
from helpers import select_joints
from models import (FORWARD_OFFSET, HEAD_SHOULDER_RATIO, NECK_ANGLE, SHOULDER_DROP,
                    PostureAssessment)


def absolute(current, baseline):
    return abs(current - baseline)


def shrinking(current, baseline):
    """Only a drop below baseline counts"""
    return max(0.0, baseline - current)


def growing(current, baseline):
    """Only a rise above baseline counts"""
    return max(0.0, current - baseline)


def head_drop_threshold(sel, config):
    # the scale-invariant ratio is only available with both shoulders
    return config.head_drop_threshold if sel.both_shoulders else HEAD_DROP_FALLBACK


@dataclass(frozen=True)
class MetricSpec:
    name: str
    weight: float
    deviation: Callable
    threshold: Callable

    def measure(self, sel):
        return MEASURES[self.name](sel)


METRICS = [
    MetricSpec(NECK_ANGLE, METRIC_WEIGHTS[NECK_ANGLE], absolute,
               lambda sel, config: config.neck_angle_threshold),
    MetricSpec(HEAD_SHOULDER_RATIO, METRIC_WEIGHTS[HEAD_SHOULDER_RATIO], shrinking,
               head_drop_threshold),
    MetricSpec(FORWARD_OFFSET, METRIC_WEIGHTS[FORWARD_OFFSET], growing,
               lambda sel, config: config.forward_offset_threshold),
    MetricSpec(SHOULDER_DROP, METRIC_WEIGHTS[SHOULDER_DROP], absolute,
               lambda sel, config: config.shoulder_drop_threshold),
]


@dataclass
class MetricResult:
    name: str
    weight: float
    deviation: float
    threshold: float

    @property
    def score(self):
        return self.deviation / self.threshold

    @property
    def marker(self):
        if self.score >= 1.0:
            return "!"
        if self.score >= WARN_SCORE:
            return "~"
        return "ok"


def evaluate_metrics(sel, calibration, config):
    """Per-metric deviations for every calibrated metric still visible in sel"""
    results = []
    for spec in METRICS:
        if spec.name not in calibration.available_metrics:
            continue
        baseline = calibration.baseline(spec.name)
        current = spec.measure(sel)
        if baseline is None or current is None:
            continue
        results.append(MetricResult(
            name=spec.name,
            weight=spec.weight,
            deviation=spec.deviation(current, baseline),
            threshold=spec.threshold(sel, config),
        ))
    return results


def composite_score(results):
    """Weighted mean of metric scores, weights renormalized over results"""
    total = sum(r.weight for r in results)
    if total <= 0:
        return 0.0
    return sum((r.weight / total) * r.score for r in results)


def describe(results, score, is_good):
    parts = [f"{r.name}: {r.deviation:.2f}/{r.threshold:.2f} [{r.marker}]" for r in results]
    details = f"Score: {score:.2f} | " + " | ".join(parts)
    if not is_good:
        triggered = [r.name for r in results if r.score >= 1.0]
        if triggered:
            details += f" [BAD: {', '.join(triggered)}]"
    return details


def assess(joints, calibration, config):
    """
    Compare one frame of joints against the calibrated baseline.

    Never raises. With fewer than two evaluable metrics the frame is skipped:
    reported as good with score 0 and skipped=True so alerting ignores it.
    """
    sel = select_joints(joints)
    results = evaluate_metrics(sel, calibration, config)

    if len(results) < MIN_METRICS:
        return PostureAssessment(
            is_good_posture=True,
            composite_score=0.0,
            deviations={},
            metrics_used=[r.name for r in results],
            details=f"Insufficient metrics ({len(results)}) - skipping frame",
            skipped=True,
        )

    score = composite_score(results)
    extreme = any(r.score > config.extreme_metric_threshold for r in results)
    is_good = score < config.composite_threshold and not extreme

    return PostureAssessment(
        is_good_posture=is_good,
        composite_score=score,
        deviations={r.name: r.deviation for r in results},
        metrics_used=[r.name for r in results],
        details=describe(results, score, is_good),
    )
