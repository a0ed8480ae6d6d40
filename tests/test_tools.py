from __future__ import annotations

import logging
import os
from types import SimpleNamespace

import psutil

from auto_refreshrate import tools
from auto_refreshrate.tools import ConditionalFormatter, create_log_dir, is_running


def _record(level: int) -> logging.LogRecord:
    return logging.LogRecord("auto_refreshrate", level, "/src/controller.py", 42, "hello", None, None)


def test_conditional_formatter_adds_location_for_errors() -> None:
    formatter = ConditionalFormatter()

    assert "[controller.py:42]" in formatter.format(_record(logging.ERROR))
    info = formatter.format(_record(logging.INFO))
    assert "[controller]" in info
    assert ":42" not in info


def test_create_log_dir(tmp_path) -> None:
    log_dir = tmp_path / "state" / "auto-refreshrate"
    assert create_log_dir(str(log_dir)) is True
    assert log_dir.is_dir()


def _proc(pid: int, *cmdline: str) -> SimpleNamespace:
    return SimpleNamespace(info={"pid": pid, "cmdline": list(cmdline)})


def test_is_running_matches_other_instances(monkeypatch) -> None:
    procs = [
        _proc(os.getpid(), "/usr/bin/auto-refreshrate", "--daemon"),
        _proc(10, "/usr/bin/python3", "/usr/bin/auto-refreshrate", "--tray"),
        _proc(11, "bash", "-c", "auto-refreshrate --daemon"),
    ]
    monkeypatch.setattr(tools.psutil, "process_iter", lambda attrs: iter(procs))

    assert is_running("auto-refreshrate", "--tray") is True
    assert is_running("auto-refreshrate", "--daemon") is False


def test_is_running_skips_vanished_processes(monkeypatch) -> None:
    class Vanished:
        @property
        def info(self):
            raise psutil.NoSuchProcess(123)

    monkeypatch.setattr(tools.psutil, "process_iter", lambda attrs: iter([Vanished()]))
    assert is_running("auto-refreshrate", "--daemon") is False
