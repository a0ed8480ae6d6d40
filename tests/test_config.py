from __future__ import annotations

from pathlib import Path

import pytest

from auto_refreshrate.config.config import _Config, find_config_file
from auto_refreshrate.globals import APPLY_TIMEOUT, LOW_REFRESH_RATE, MAX_RETRIES, POLL_INTERVAL, POWER_SUPPLY_DIR
from auto_refreshrate.types import ApplyMethod


def _load(tmp_path: Path, content: str) -> _Config:
    path = tmp_path / "auto-refreshrate.conf"
    path.write_text(content)
    conf = _Config()
    conf.set_path(str(path))
    return conf


def test_defaults_without_config_file(tmp_path: Path) -> None:
    conf = _Config()
    conf.set_path(str(tmp_path / "missing.conf"))

    assert conf.has_config() is False
    assert conf.poll_interval == POLL_INTERVAL
    assert conf.apply_timeout == APPLY_TIMEOUT
    assert conf.apply_method == ApplyMethod.TEMPORARY
    assert conf.connector is None
    assert conf.low_refresh_rate == LOW_REFRESH_RATE
    assert conf.supply_dir == POWER_SUPPLY_DIR
    assert conf.online_file is None


def test_values_are_read_from_file(tmp_path: Path) -> None:
    conf = _load(
        tmp_path,
        "[general]\n"
        "poll_interval = 5\n"
        "apply_method = persistent   # keep across reboots\n"
        "[display]\n"
        "connector = eDP-2\n"
        "low_refresh_rate = 48\n"
        "[power]\n"
        "online_file = /sys/class/power_supply/ACAD/online\n",
    )

    assert conf.has_config() is True
    assert conf.poll_interval == 5.0
    assert conf.apply_method == ApplyMethod.PERSISTENT
    assert conf.connector == "eDP-2"
    assert conf.low_refresh_rate == 48.0
    assert conf.online_file == "/sys/class/power_supply/ACAD/online"
    assert conf.status_file is None


def test_invalid_values_fall_back_to_defaults(tmp_path: Path) -> None:
    conf = _load(
        tmp_path,
        "[general]\n"
        "poll_interval = fast\n"
        "apply_timeout = -3\n"
        "apply_method = sometimes\n"
        "[display]\n"
        "low_refresh_rate =\n",
    )

    assert conf.poll_interval == POLL_INTERVAL
    assert conf.apply_timeout == APPLY_TIMEOUT
    assert conf.apply_method == ApplyMethod.TEMPORARY
    assert conf.low_refresh_rate == LOW_REFRESH_RATE


def test_update_config_drops_removed_options(tmp_path: Path) -> None:
    conf = _load(tmp_path, "[display]\nconnector = HDMI-1\n")
    assert conf.connector == "HDMI-1"

    Path(conf.path).write_text("[display]\n")
    conf.update_config()
    assert conf.connector is None


def test_unparsable_file_keeps_previous_settings(tmp_path: Path) -> None:
    conf = _load(tmp_path, "[display]\nconnector = HDMI-1\n")

    Path(conf.path).write_text("connector = no section header\n")
    conf.update_config()
    assert conf.connector == "HDMI-1"


def test_find_config_file_prefers_command_line(tmp_path: Path) -> None:
    path = tmp_path / "custom.conf"
    path.write_text("")
    assert find_config_file(str(path)) == str(path)


def test_find_config_file_rejects_missing_command_line_file(tmp_path: Path) -> None:
    with pytest.raises(SystemExit):
        find_config_file(str(tmp_path / "nope.conf"))


def test_max_retries(tmp_path: Path) -> None:
    assert _load(tmp_path, "").max_retries == MAX_RETRIES
    assert _load(tmp_path, "[general]\nmax_retries = 0\n").max_retries == 0
    assert _load(tmp_path, "[general]\nmax_retries = -2\n").max_retries == MAX_RETRIES
