import pytest

import notifier
from alerts import AlertEvent
from notifier import Notifier, escape_applescript

EVENT = AlertEvent("Straighten Up!", 'Say "cheese"', "Purr", 0.0)


@pytest.fixture
def calls(monkeypatch):
    recorded = []
    monkeypatch.setattr(notifier.subprocess, "run",
                        lambda cmd, check=False: recorded.append(("run", cmd)))
    monkeypatch.setattr(notifier.subprocess, "Popen", lambda cmd: recorded.append(("popen", cmd)))
    return recorded


def test_escape_applescript():
    assert escape_applescript('a "b" \\c') == 'a \\"b\\" \\\\c'


def test_macos_notification_and_sound(calls):
    Notifier(system="Darwin")(EVENT)
    (kind, run), (_, popen) = calls
    assert run[:2] == ["osascript", "-e"]
    assert 'with title "Straighten Up!"' in run[2]
    assert 'Say \\"cheese\\"' in run[2]
    assert popen == ["afplay", "/System/Library/Sounds/Purr.aiff"]


def test_linux_uses_notify_send(calls, monkeypatch, capsys):
    monkeypatch.setattr(notifier.shutil, "which", lambda name: "/usr/bin/notify-send")
    Notifier(system="Linux").send(EVENT)
    assert calls == [("run", ["notify-send", "Straighten Up!", 'Say "cheese"'])]
    assert capsys.readouterr().out == "\a"


def test_linux_without_notify_send_rings_bell(calls, monkeypatch, capsys):
    monkeypatch.setattr(notifier.shutil, "which", lambda name: None)
    Notifier(system="Linux").send(EVENT)
    assert calls == []
    assert capsys.readouterr().out == "\a"


def test_other_platform_rings_bell(calls, capsys):
    Notifier(system="Windows").send(EVENT)
    assert calls == []
    assert capsys.readouterr().out == "\a"


def test_missing_binary_falls_back_to_bell(monkeypatch, capsys):
    def missing(cmd, check=False):
        raise FileNotFoundError(cmd[0])

    monkeypatch.setattr(notifier.subprocess, "run", missing)
    Notifier(system="Darwin").send(EVENT)
    assert capsys.readouterr().out == "\a"
