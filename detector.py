# detector.py
import logging
from dataclasses import dataclass, field
from typing import Dict, List

import cv2
import mediapipe as mp

from errors import NoPoseDetected
from helpers import landmarks_to_joints

logger = logging.getLogger(__name__)

mp_pose = mp.solutions.pose


@dataclass
class DiagnosticResult:
    image_width: int
    image_height: int
    pose_detected: bool
    joints: Dict = field(default_factory=dict)
    all_joints: List = field(default_factory=list)   # (name, JointPoint), unfiltered


class PoseDetector:
    """JointSet provider backed by MediaPipe Pose on single still frames."""

    def __init__(self, min_detection_confidence=0.5, model_complexity=1):
        self.pose = mp_pose.Pose(
            static_image_mode=True,
            min_detection_confidence=min_detection_confidence,
            model_complexity=model_complexity,
        )

    def close(self):
        self.pose.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def _landmarks(self, frame):
        rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        results = self.pose.process(rgb)
        if not results.pose_landmarks:
            return None
        return results.pose_landmarks.landmark

    def detect(self, frame):
        lms = self._landmarks(frame)
        if lms is None:
            raise NoPoseDetected()
        joints = landmarks_to_joints(lms)
        logger.debug(f"Detected {len(joints)} joints")
        return joints

    def diagnose(self, frame):
        h, w = frame.shape[:2]
        try:
            lms = self._landmarks(frame)
        except Exception as e:
            logger.warning(f"Pose detection failed: {e}")
            lms = None
        if lms is None:
            return DiagnosticResult(image_width=w, image_height=h, pose_detected=False)

        all_joints = list(landmarks_to_joints(lms, min_conf=0.0).items())
        return DiagnosticResult(
            image_width=w,
            image_height=h,
            pose_detected=True,
            joints=landmarks_to_joints(lms),
            all_joints=all_joints,
        )
