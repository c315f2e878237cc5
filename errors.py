# errors.py


class StraightenUpError(Exception):
    """Base class for everything the posture pipeline raises."""


class InsufficientJoints(StraightenUpError):
    def __init__(self, metric_count, present_joints):
        self.metric_count = metric_count
        self.present_joints = sorted(present_joints)
        available = ", ".join(self.present_joints) or "none"
        super().__init__(
            f"Need at least 2 computable metrics, got {metric_count}. "
            f"Available joints: {available}"
        )


class NotCalibrated(StraightenUpError):
    def __init__(self, message="Not calibrated. Run 'straighten-up calibrate' first."):
        super().__init__(message)


class CalibrationFailed(StraightenUpError):
    def __init__(self, snapshot_count, metrics=()):
        self.snapshot_count = snapshot_count
        self.metrics = sorted(metrics)
        if snapshot_count == 0:
            message = "Could not capture any valid poses"
        else:
            message = (
                f"Only {len(self.metrics)} metric(s) computable "
                f"({', '.join(self.metrics)}). Need at least 2."
            )
        super().__init__(message)


class NoPoseDetected(StraightenUpError):
    def __init__(self, message="No pose detected in frame"):
        super().__init__(message)


class CameraError(StraightenUpError):
    pass


class ConfigError(StraightenUpError):
    pass
