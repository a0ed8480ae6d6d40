import logging
from typing import List, Protocol, runtime_checkable

from auto_refreshrate.types import PowerStates, StatusIcon


@runtime_checkable
class StatusSink(Protocol):
    """
    Receives status updates from the mode controller.

    Implemented by the tray indicator and by the headless daemon, which only
    logs. Implementations must not block; they are called on the main loop.
    """

    def set_status(self, text: str, icon: StatusIcon) -> None: ...

    def set_available_rates(self, rates: List[int]) -> None: ...

    def set_power_state(self, state: PowerStates) -> None: ...


class LogStatusSink:
    """Status sink for --daemon and --set: every update goes to the log."""

    def __init__(self) -> None:
        self.status: str = "Initializing..."
        self.icon: StatusIcon = StatusIcon.DEFAULT
        self.power_state: PowerStates = PowerStates.UNKNOWN

    def set_status(self, text: str, icon: StatusIcon) -> None:
        self.status, self.icon = text, icon
        log = logging.error if icon == StatusIcon.ERROR else logging.info
        log("Status: %s", text)

    def set_available_rates(self, rates: List[int]) -> None:
        logging.info("Available rates: %sHz", ", ".join(str(r) for r in rates))

    def set_power_state(self, state: PowerStates) -> None:
        if state != self.power_state:
            logging.info("Power: %s", "Battery" if state == PowerStates.BATTERY else "AC Power")
        self.power_state = state
