import os
import sys

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

import config
import logutil


def test_log_line_carries_tick_and_scope(capsys, monkeypatch):
    monkeypatch.setenv("NO_COLOR", "1")
    logutil.set_tick(7)
    try:
        logutil.log("WORLD", "hello")
    finally:
        logutil.set_tick(None)
    out = capsys.readouterr().out.strip()
    assert out.startswith("[INFO t7 pid")
    assert out.endswith("WORLD] hello")


def test_scope_switches_gate_info_but_not_errors(capsys, monkeypatch):
    monkeypatch.setenv("NO_COLOR", "1")
    monkeypatch.setattr(config, "LOG_SIMULATION", False)
    logutil.log("SIM", "quiet")
    assert capsys.readouterr().out == ""
    logutil.log("SIM", "loud", "ERROR")
    assert "ERROR" in capsys.readouterr().out


def test_errors_are_red_when_color_enabled(capsys, monkeypatch):
    monkeypatch.delenv("NO_COLOR", raising=False)
    monkeypatch.setattr(config, "LOG_COLOR", True)
    logutil.log("MESH", "bad", "ERROR")
    assert capsys.readouterr().out.startswith("\x1b[31m")
