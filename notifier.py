# notifier.py
import logging
import platform
import shutil
import subprocess

logger = logging.getLogger(__name__)

SOUNDS_DIR = "/System/Library/Sounds"


def escape_applescript(text):
    return text.replace("\\", "\\\\").replace('"', '\\"')


class Notifier:
    """Delivers alert events as desktop notifications with platform fallback."""

    def __init__(self, system=None):
        self.system = system or platform.system()

    def __call__(self, event):
        self.send(event)

    def send(self, event):
        try:
            if self.system == "Darwin":
                self._send_macos(event)
            elif self.system == "Linux" and shutil.which("notify-send"):
                subprocess.run(["notify-send", event.title, event.message], check=False)
                self._bell()
            else:
                self._bell()
        except OSError as e:
            logger.warning(f"Notification failed: {e}")
            self._bell()

    def _send_macos(self, event):
        script = (
            f'display notification "{escape_applescript(event.message)}" '
            f'with title "{escape_applescript(event.title)}"'
        )
        subprocess.run(["osascript", "-e", script], check=False)
        # fire and forget
        subprocess.Popen(["afplay", f"{SOUNDS_DIR}/{event.sound}.aiff"])

    @staticmethod
    def _bell():
        print("\a", end="", flush=True)
