# alerts.py
import logging
from dataclasses import dataclass
from typing import Optional

from config import ALERT_MESSAGE, ALERT_TITLE

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AlertEvent:
    title: str
    message: str
    sound: str
    time: float


@dataclass
class AlertState:
    consecutive_bad: int = 0
    last_alert_time: Optional[float] = None
    alerting: bool = False

    @property
    def name(self):
        return "Alerting" if self.alerting else "Quiet"


class AlertStateMachine:
    """
    Debounces per-frame verdicts into alerts.

    One instance per monitoring session. Time is passed in by the caller,
    so nothing here sleeps or reads the clock.
    """

    def __init__(self, config, sink=None, state=None):
        self.config = config
        self.sink = sink
        self.state = state if state is not None else AlertState()

    def reset(self):
        self.state = AlertState()

    def cooldown_elapsed(self, now):
        last = self.state.last_alert_time
        return last is None or (now - last) >= self.config.cooldown

    def update(self, assessment, now):
        """
        Feed one assessment. Returns the AlertEvent fired on this tick, if any.
        """
        st = self.state

        if assessment.skipped:
            return None

        if assessment.is_good_posture:
            if st.consecutive_bad > 0:
                logger.debug("Posture improved, resetting bad streak")
            st.consecutive_bad = 0
            if st.alerting:
                st.alerting = False
                st.last_alert_time = None
                logger.debug("Alert cooldown reset")
            return None

        st.consecutive_bad += 1
        logger.debug(f"Bad posture count: {st.consecutive_bad}/{self.config.threshold}")

        if st.alerting or st.consecutive_bad < self.config.threshold:
            return None
        if not self.cooldown_elapsed(now):
            return None

        event = AlertEvent(
            title=ALERT_TITLE,
            message=ALERT_MESSAGE,
            sound=self.config.sound,
            time=now,
        )
        st.last_alert_time = now
        st.alerting = True
        logger.debug("Alert sent")
        if self.sink is not None:
            self.sink(event)
        return event
