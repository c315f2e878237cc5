# capture.py
import logging
import platform

import cv2

from errors import CameraError

logger = logging.getLogger(__name__)


def get_platform_backends():
    s = platform.system()
    if s == "Darwin":
        return [cv2.CAP_AVFOUNDATION, cv2.CAP_ANY]
    if s == "Windows":
        return [cv2.CAP_DSHOW, cv2.CAP_MSMF, cv2.CAP_ANY]
    return [cv2.CAP_V4L2, cv2.CAP_ANY]


def open_camera(index):
    for backend in get_platform_backends():
        cap = cv2.VideoCapture(index, backend)
        if cap.isOpened():
            return cap
        cap.release()
    raise CameraError(f"Camera {index} not accessible")


def capture_frame(device_id=None, warmup_frames=5):
    """Grab one BGR frame, letting auto-exposure settle first"""
    try:
        index = int(device_id) if device_id is not None else 0
    except ValueError:
        raise CameraError(f"Invalid camera device id: {device_id!r}")

    cap = open_camera(index)
    try:
        frame = None
        for _ in range(max(1, warmup_frames)):
            ret, grabbed = cap.read()
            if ret:
                frame = grabbed
        if frame is None:
            raise CameraError("Failed to grab frame")
        logger.debug(f"Captured frame {frame.shape[1]}x{frame.shape[0]} from camera {index}")
        return frame
    finally:
        cap.release()
