from __future__ import annotations

import logging
from pathlib import Path

from auto_refreshrate.modules.system_info import PowerSupply
from auto_refreshrate.types import PowerStates


def _write(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)


def _laptop(root: Path, online: str | None, status: str | None) -> None:
    _write(root / "AC" / "type", "Mains\n")
    _write(root / "BAT0" / "type", "Battery\n")
    if online is not None:
        _write(root / "AC" / "online", online + "\n")
    if status is not None:
        _write(root / "BAT0" / "status", status + "\n")


def test_discharging_on_battery(tmp_path: Path) -> None:
    _laptop(tmp_path, online="0", status="Discharging")
    assert PowerSupply(tmp_path).poll() == PowerStates.BATTERY


def test_online_adapter_means_ac(tmp_path: Path) -> None:
    _laptop(tmp_path, online="1", status="Discharging")
    assert PowerSupply(tmp_path).poll() == PowerStates.AC


def test_charging_battery_means_ac_without_online_file(tmp_path: Path) -> None:
    _laptop(tmp_path, online=None, status="Charging")
    assert PowerSupply(tmp_path).poll() == PowerStates.AC


def test_full_battery_means_ac(tmp_path: Path) -> None:
    _laptop(tmp_path, online="0", status="Full")
    assert PowerSupply(tmp_path).poll() == PowerStates.AC


def test_full_requires_every_battery(tmp_path: Path) -> None:
    _laptop(tmp_path, online="0", status="Full")
    _write(tmp_path / "BAT1" / "type", "Battery\n")
    _write(tmp_path / "BAT1" / "status", "Discharging\n")
    assert PowerSupply(tmp_path).poll() == PowerStates.BATTERY


def test_not_charging_counts_as_battery(tmp_path: Path) -> None:
    _laptop(tmp_path, online=None, status="Not charging")
    assert PowerSupply(tmp_path).poll() == PowerStates.BATTERY


def test_unreadable_signals_fall_back_to_battery(tmp_path: Path, caplog) -> None:
    _laptop(tmp_path, online=None, status=None)
    supply = PowerSupply(tmp_path)

    assert supply.read_state() == PowerStates.UNKNOWN
    with caplog.at_level(logging.WARNING):
        assert supply.poll() == PowerStates.BATTERY
        assert supply.poll() == PowerStates.BATTERY
    # warned once, not on every poll
    assert len([r for r in caplog.records if "assuming battery" in r.getMessage()]) == 1


def test_missing_supply_dir_falls_back_to_battery(tmp_path: Path) -> None:
    supply = PowerSupply(tmp_path / "does-not-exist")
    assert supply.read_state() == PowerStates.UNKNOWN
    assert supply.poll() == PowerStates.BATTERY


def test_garbage_online_value_is_ignored(tmp_path: Path) -> None:
    _laptop(tmp_path, online="maybe", status=None)
    assert PowerSupply(tmp_path).read_state() == PowerStates.UNKNOWN


def test_discovery_prefers_type_over_name(tmp_path: Path) -> None:
    _write(tmp_path / "ACAD" / "type", "Mains\n")
    _write(tmp_path / "ACAD" / "online", "1\n")
    _write(tmp_path / "hidpp_battery_0" / "type", "Battery\n")
    _write(tmp_path / "hidpp_battery_0" / "status", "Discharging\n")
    _write(tmp_path / "ucsi-source-psy-USBC000:001" / "type", "USB\n")
    _write(tmp_path / "ucsi-source-psy-USBC000:001" / "online", "0\n")

    supply = PowerSupply(tmp_path)
    assert supply.online_files() == [tmp_path / "ACAD" / "online"]
    assert supply.status_files() == [tmp_path / "hidpp_battery_0" / "status"]


def test_discovery_falls_back_to_names_without_type_files(tmp_path: Path) -> None:
    _write(tmp_path / "ADP1" / "online", "0\n")
    _write(tmp_path / "BAT1" / "status", "Discharging\n")

    supply = PowerSupply(tmp_path)
    assert supply.online_files() == [tmp_path / "ADP1" / "online"]
    assert supply.status_files() == [tmp_path / "BAT1" / "status"]
    assert supply.poll() == PowerStates.BATTERY


def test_explicit_files_skip_discovery(tmp_path: Path) -> None:
    _laptop(tmp_path, online="0", status="Discharging")
    _write(tmp_path / "custom" / "online", "1\n")

    supply = PowerSupply(tmp_path, online_file=tmp_path / "custom" / "online")
    assert supply.online_files() == [tmp_path / "custom" / "online"]
    assert supply.poll() == PowerStates.AC


def test_power_info_reports_raw_signals(tmp_path: Path) -> None:
    _laptop(tmp_path, online="0", status="Discharging")
    info = PowerSupply(tmp_path).power_info()

    assert info.ac_online is False
    assert info.battery_statuses == ["Discharging"]
    assert info.state == PowerStates.BATTERY
    assert repr(info) == "battery (Discharging)"
