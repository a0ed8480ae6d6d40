from dataclasses import dataclass, field
import logging
from pathlib import Path
from typing import List, Optional

from auto_refreshrate.globals import (
    BATTERY_CHARGING_STATUS,
    BATTERY_FULL_STATUS,
    POWER_SUPPLY_DIR,
)
from auto_refreshrate.types import PowerStates


@dataclass
class PowerInfo:
    ac_online: bool | None
    battery_statuses: List[str] = field(default_factory=list)
    state: PowerStates = PowerStates.UNKNOWN

    def __repr__(self) -> str:
        if self.state == PowerStates.UNKNOWN:
            return "unknown"
        statuses = ", ".join(self.battery_statuses) or "no battery"
        return f"{'AC power' if self.state == PowerStates.AC else 'battery'} ({statuses})"


def read_file(path: Path) -> str | None:
    try:
        with open(path, "r") as f:
            return f.read().strip()
    except OSError:
        return None


class PowerSupply:
    """
    Reads the AC/battery state from the kernel power_supply class.

    Two independent signals are combined: the "online" flag of the AC adapter
    and the "status" of the batteries. Either one is enough to decide; only
    when both are unreadable does the reader fall back to assuming battery.
    """

    def __init__(
        self,
        supply_dir: str | Path = POWER_SUPPLY_DIR,
        online_file: str | Path | None = None,
        status_file: str | Path | None = None,
    ) -> None:
        self.supply_dir = Path(supply_dir)
        self.online_file = Path(online_file) if online_file else None
        self.status_file = Path(status_file) if status_file else None
        self._warned_unknown = False

    def _supplies(self, supply_type: str, name_prefixes: tuple[str, ...]) -> List[Path]:
        try:
            children = sorted(p for p in self.supply_dir.iterdir() if p.is_dir())
        except OSError:
            return []

        typed = [p for p in children if (read_file(p / "type") or "").lower() == supply_type]
        if typed:
            return typed
        # some drivers do not expose a type file
        return [p for p in children if p.name.upper().startswith(name_prefixes)]

    def online_files(self) -> List[Path]:
        if self.online_file is not None:
            return [self.online_file]
        return [p / "online" for p in self._supplies("mains", ("AC", "ADP"))]

    def status_files(self) -> List[Path]:
        if self.status_file is not None:
            return [self.status_file]
        return [p / "status" for p in self._supplies("battery", ("BAT",))]

    def read_online(self) -> Optional[bool]:
        values = [read_file(f) for f in self.online_files()]
        values = [v for v in values if v in ("0", "1")]
        if not values:
            return None
        return "1" in values

    def read_battery_statuses(self) -> List[str]:
        return [v for v in (read_file(f) for f in self.status_files()) if v]

    def power_info(self) -> PowerInfo:
        ac_online: bool | None = None
        statuses: List[str] = []
        try:
            ac_online = self.read_online()
        except Exception as e:
            logging.debug("failed to read AC online state: %s", e)
        try:
            statuses = self.read_battery_statuses()
        except Exception as e:
            logging.debug("failed to read battery status: %s", e)

        if ac_online is None and not statuses:
            return PowerInfo(ac_online=None, battery_statuses=[], state=PowerStates.UNKNOWN)

        lowered = [s.lower() for s in statuses]
        on_ac = (
            ac_online is True
            or BATTERY_CHARGING_STATUS in lowered
            or (bool(lowered) and all(s == BATTERY_FULL_STATUS for s in lowered))
        )
        return PowerInfo(
            ac_online=ac_online,
            battery_statuses=statuses,
            state=PowerStates.AC if on_ac else PowerStates.BATTERY,
        )

    def read_state(self) -> PowerStates:
        """Raw power state, UNKNOWN when no signal could be read."""
        return self.power_info().state

    def poll(self) -> PowerStates:
        """
        Current power state, never UNKNOWN.

        :return: PowerStates.AC or PowerStates.BATTERY; BATTERY is assumed
                 when neither signal is readable, favouring power savings
        """
        state: PowerStates = self.read_state()
        if state == PowerStates.UNKNOWN:
            if not self._warned_unknown:
                logging.warning(
                    "power source unknown (no readable online/status files under %s), assuming battery",
                    self.supply_dir,
                )
                self._warned_unknown = True
            return PowerStates.BATTERY
        self._warned_unknown = False
        return state
