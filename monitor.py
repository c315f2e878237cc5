# monitor.py
import logging
import time

from alerts import AlertStateMachine
from calibration import aggregate_calibrations, calibrate
from classifier import assess
from config import (CALIBRATION_ATTEMPTS, CALIBRATION_PAUSE_SEC, CALIBRATION_RETRY_SEC,
                    CALIBRATION_SAMPLES)

logger = logging.getLogger(__name__)


def collect_calibration(grab_joints, samples=CALIBRATION_SAMPLES, attempts=CALIBRATION_ATTEMPTS,
                        pause=CALIBRATION_PAUSE_SEC, retry_pause=CALIBRATION_RETRY_SEC,
                        sleep=time.sleep, on_snapshot=None):
    """
    Take `samples` single-frame calibrations, retrying each up to `attempts`
    times, and average the successes. Raises CalibrationFailed.
    """
    snapshots = []
    for i in range(1, samples + 1):
        for attempt in range(1, attempts + 1):
            try:
                snap = calibrate(grab_joints())
            except Exception as e:
                logger.info(f"Snapshot {i}/{samples} attempt {attempt}/{attempts} failed: {e}")
                if attempt < attempts:
                    sleep(retry_pause)
                continue
            snapshots.append(snap)
            if on_snapshot is not None:
                on_snapshot(i, snap)
            break
        if i < samples:
            sleep(pause)

    return aggregate_calibrations(snapshots)


def monitor_tick(machine, grab_joints, calibration, config, now):
    """One tick: detect, assess, feed the alert machine. Returns the assessment or None."""
    try:
        joints = grab_joints()
    except Exception as e:
        # any per-frame failure skips the tick; the alert state is left as is
        logger.debug(f"Skipped: {e}")
        return None

    assessment = assess(joints, calibration, config)
    logger.debug(assessment.details)
    machine.update(assessment, now)
    return assessment


def run_monitor(config, calibration, grab_joints, notifier=None, sleep=time.sleep,
                clock=time.time, max_ticks=None):
    """
    Monitor until interrupted (or for max_ticks ticks). Returns the final AlertState.
    """
    machine = AlertStateMachine(config, sink=notifier)
    ticks = 0
    try:
        while max_ticks is None or ticks < max_ticks:
            monitor_tick(machine, grab_joints, calibration, config, clock())
            ticks += 1
            if max_ticks is not None and ticks >= max_ticks:
                break
            sleep(config.interval)
    except KeyboardInterrupt:
        logger.info("Received interrupt signal. Shutting down...")
    return machine.state
