# main.py
import argparse
import logging
import sys
import time
from datetime import datetime

from calibration import calibrate as calibrate_frame
from config import (CALIBRATION_LEAD_IN_SEC, CALIBRATION_SAMPLES, USABLE_CONFIDENCE,
                    calibration_file, config_file, load_config, logs_dir)
from errors import CalibrationFailed, NotCalibrated, StraightenUpError
from helpers import UPPER_BODY
from monitor import collect_calibration, run_monitor
from notifier import Notifier
from storage import load_calibration, require_calibration, save_calibration, save_report

logger = logging.getLogger("straighten_up")

COMMANDS = ["monitor", "calibrate", "diagnose", "status", "help"]


def setup_logging(verbose=False):
    handlers = [logging.StreamHandler()]
    file_error = None
    try:
        logs_dir().mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(logs_dir() / "straighten_up.log"))
    except OSError as e:
        file_error = e
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers,
        force=True,
    )
    if file_error is not None:
        logger.warning(f"Logging to console only: {file_error}")
    return logger


def create_argument_parser():
    parser = argparse.ArgumentParser(
        prog="straighten-up",
        description="Webcam posture monitor that nudges you when you slouch.",
    )
    parser.add_argument("command", nargs="?", default="monitor", choices=COMMANDS,
                        help="monitor (default), calibrate, diagnose, status or help")
    parser.add_argument("--interval", type=int, help="check interval in seconds (default: 60)")
    parser.add_argument("--threshold", type=int,
                        help="consecutive bad readings before alert (default: 3)")
    parser.add_argument("--cooldown", type=int, help="min seconds between alerts (default: 300)")
    parser.add_argument("--device", dest="device_id", help="camera device index")
    parser.add_argument("--sound", help='alert sound name (default: "Purr")')
    parser.add_argument("--verbose", action="store_true", default=None,
                        help="enable detailed logging")
    return parser


def pose_source(config):
    """grab_joints() callable for the configured camera, plus the detector to close"""
    # OpenCV and MediaPipe load only for commands that use the camera
    from capture import capture_frame
    from detector import PoseDetector

    detector = PoseDetector()

    def grab_joints():
        return detector.detect(capture_frame(config.device_id))

    return grab_joints, detector


def print_baseline(cal, indent="  "):
    print(f"{indent}Side: {cal.side}")
    print(f"{indent}Metrics: {', '.join(cal.available_metrics)}")
    print(f"{indent}Baseline neck angle: {cal.baseline_neck_angle:.1f}°")
    print(f"{indent}Baseline head-shoulder ratio: {cal.baseline_head_shoulder_ratio:.3f}")
    print(f"{indent}Baseline forward offset: {cal.baseline_forward_offset:.3f}")
    if cal.baseline_shoulder_drop is not None:
        print(f"{indent}Baseline shoulder drop: {cal.baseline_shoulder_drop:.3f}")


def show_status(config):
    print("StraightenUp Status\n")
    print("Configuration:")
    print(f"  Config file: {config_file()}")
    print(f"  Interval: {config.interval}s")
    print(f"  Threshold: {config.threshold} consecutive readings")
    print(f"  Cooldown: {config.cooldown}s")
    print(f"  Neck angle threshold: {config.neck_angle_threshold}°")
    print(f"  Head drop threshold: {config.head_drop_threshold}")
    print(f"  Forward offset threshold: {config.forward_offset_threshold}")
    print(f"  Shoulder drop threshold: {config.shoulder_drop_threshold}")
    print(f"  Composite threshold: {config.composite_threshold}")
    print(f"  Extreme metric threshold: {config.extreme_metric_threshold}")
    print(f"  Sound: {config.sound}")
    print(f"  Device: {config.device_id or 'default'}")
    print(f"  Verbose: {config.verbose}")
    print()

    cal = load_calibration()
    if cal is None:
        print("Calibration: Not calibrated")
        print("  Run 'straighten-up calibrate' to set your baseline posture.")
        return 0

    print("Calibration:")
    print(f"  File: {calibration_file()}")
    print(f"  Date: {cal.timestamp.astimezone():%Y-%m-%d %H:%M:%S}")
    print_baseline(cal)
    return 0


def run_calibrate(grab_joints, sleep=time.sleep):
    print("Posture Calibration")
    print("====================\n")
    print("Sit in your best upright posture with your side facing the camera.")
    print(f"We'll take {CALIBRATION_SAMPLES} snapshots and average them.\n")
    print(f"Starting in {CALIBRATION_LEAD_IN_SEC} seconds...")
    sleep(CALIBRATION_LEAD_IN_SEC)

    def on_snapshot(i, snap):
        print(f"  Captured snapshot {i}/{CALIBRATION_SAMPLES}")
        logger.debug(
            f"Neck angle: {snap.baseline_neck_angle:.1f}°, "
            f"Head ratio: {snap.baseline_head_shoulder_ratio:.3f}, "
            f"Forward: {snap.baseline_forward_offset:.3f}, "
            f"Side: {snap.side}, Metrics: {', '.join(snap.available_metrics)}"
        )

    try:
        cal = collect_calibration(grab_joints, sleep=sleep, on_snapshot=on_snapshot)
    except CalibrationFailed as e:
        print(f"\nCalibration failed: {e}")
        print("Run 'straighten-up diagnose' to check what the camera can see.")
        return 1

    path = save_calibration(cal)
    print("\nCalibration saved!")
    print_baseline(cal)
    print(f"  Saved to: {path}\n")
    print("You can now run 'straighten-up monitor' to start monitoring.")
    return 0


def run_diagnose(frame, detector):
    print("Camera Diagnostics")
    print("==================\n")
    stamp = datetime.now().strftime("%Y-%m-%dT%H-%M-%S")
    result = detector.diagnose(frame)

    print(f"Image: {result.image_width}x{result.image_height}")
    print(f"Pose detected: {result.pose_detected}\n")

    report = {
        "timestamp": stamp,
        "imageWidth": result.image_width,
        "imageHeight": result.image_height,
        "poseDetected": result.pose_detected,
    }

    if result.pose_detected:
        print("All joints:")
        report["joints"] = []
        for name, j in sorted(result.all_joints, key=lambda item: item[1].confidence, reverse=True):
            is_usable = j.confidence >= USABLE_CONFIDENCE
            print(f"  {name:<16} x={j.x:.3f} y={j.y:.3f} conf={j.confidence:.3f}"
                  f"{'  usable' if is_usable else ''}")
            report["joints"].append(dict(j.to_dict(), name=name, usable=is_usable))

        print(f"\nUsable joints (conf >= {USABLE_CONFIDENCE}): "
              f"{sum(1 for j in result.joints.values() if j.confidence >= USABLE_CONFIDENCE)}")
        upper = [k for k in UPPER_BODY
                 if k in result.joints and result.joints[k].confidence >= USABLE_CONFIDENCE]
        print(f"Usable upper-body: {', '.join(upper)}")

        try:
            cal = calibrate_frame(result.joints)
        except StraightenUpError as e:
            print(f"\nCalibration would fail: {e}")
            report["calibrationWouldSucceed"] = False
            report["calibrationError"] = str(e)
        else:
            print("\nCalibration would succeed:")
            print_baseline(cal)
            report["calibrationWouldSucceed"] = True
            report["calibrationSide"] = cal.side
            report["calibrationMetrics"] = cal.available_metrics
    else:
        print("No pose detected. Tips:")
        print("  - Ensure adequate lighting")
        print("  - Position yourself so head and shoulders are visible")
        print("  - Try moving closer to or further from the camera")

    path = save_report(report, stamp)
    print(f"\nSaved report: {path}")
    return 0


def run_monitoring(config, grab_joints, notifier, **loop_kwargs):
    try:
        cal = require_calibration()
    except NotCalibrated as e:
        print(f"Error: {e}")
        return 1

    print("Starting posture monitoring...")
    print(f"  Interval: {config.interval}s")
    print(f"  Alert threshold: {config.threshold} consecutive bad readings")
    print(f"  Cooldown: {config.cooldown}s between alerts")
    print(f"  Calibrated side: {cal.side}")
    print(f"  Metrics: {', '.join(cal.available_metrics)}")
    print("  Press Ctrl+C to stop.\n")

    run_monitor(config, cal, grab_joints, notifier=notifier, **loop_kwargs)
    print("\nMonitoring stopped.")
    return 0


def main(argv=None):
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if args.command == "help":
        parser.print_help()
        return 0

    try:
        config = load_config().with_overrides(
            interval=args.interval,
            threshold=args.threshold,
            cooldown=args.cooldown,
            device_id=args.device_id,
            sound=args.sound,
            verbose=args.verbose,
        )
    except StraightenUpError as e:
        print(f"Error: {e}")
        return 2

    setup_logging(config.verbose)

    if args.command == "status":
        return show_status(config)

    if args.command == "monitor":
        # fail before touching the camera
        if load_calibration() is None:
            print(f"Error: {NotCalibrated()}")
            return 1

    grab_joints, detector = pose_source(config)
    try:
        if args.command == "calibrate":
            return run_calibrate(grab_joints)
        if args.command == "diagnose":
            from capture import capture_frame
            print("Capturing frame...")
            try:
                frame = capture_frame(config.device_id)
            except StraightenUpError as e:
                print(f"Error: {e}")
                return 1
            return run_diagnose(frame, detector)

        return run_monitoring(config, grab_joints, Notifier())
    finally:
        detector.close()


if __name__ == "__main__":
    sys.exit(main())
