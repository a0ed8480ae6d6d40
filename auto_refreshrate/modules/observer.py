from typing import Callable, List, Optional
import logging

from gi.repository import GLib

from auto_refreshrate.config.config import config
from auto_refreshrate.modules.system_info import PowerSupply
from auto_refreshrate.types import PowerStates


class EventObserver:
    """
    Polls the power source on the GLib main loop and notifies registered
    listeners when it changes.

    The first poll runs after a short initial delay so that start-up does
    not compete with the rest of the desktop session; after that the source
    is polled every poll interval. Listeners run on the main loop, between
    polls, never concurrently with each other.
    """

    def __init__(
        self,
        source: Optional[PowerSupply] = None,
        interval: Optional[float] = None,
        initial_delay: Optional[float] = None,
    ) -> None:
        self.source: PowerSupply = source or PowerSupply(
            supply_dir=config.supply_dir,
            online_file=config.online_file,
            status_file=config.status_file,
        )
        self.interval: float = interval if interval is not None else config.poll_interval
        self.initial_delay: float = initial_delay if initial_delay is not None else config.initial_delay
        self.__listeners: List[Callable[[PowerStates], None]] = []
        self.__old_state: Optional[PowerStates] = None
        self.__source_id: Optional[int] = None

    @property
    def running(self) -> bool:
        return self.__source_id is not None

    def listen(self, callback: Callable[[PowerStates], None]) -> bool:
        """
        Register a callback for power source changes.

        :param callback: called with the new PowerStates value
        :return: True if registration was successful
        """
        self.__listeners.append(callback)
        return True

    def unlisten(self, callback: Callable[[PowerStates], None]) -> bool:
        if callback in self.__listeners:
            self.__listeners.remove(callback)
            return True
        return False

    def invalidate(self) -> None:
        """
        Forget the last notified state so the next poll notifies again,
        even if the power source did not change.
        """
        self.__old_state = None

    def observe(self) -> None:
        """Poll the source once and notify listeners if the state changed."""
        try:
            state: PowerStates = self.source.poll()
        except Exception as e:
            logging.error("Error in AC power observation: %s", e)
            return
        if state == self.__old_state:
            return
        logging.debug("power source changed: %s -> %s", self.__old_state, state)
        self.__old_state = state
        self.__notify_listeners(state)

    def __notify_listeners(self, state: PowerStates) -> None:
        for cb in list(self.__listeners):
            try:
                cb(state)
            except Exception as e:
                logging.error("Error in event listener callback: %s %s", getattr(cb, "__name__", cb), e)

    def __first_tick(self) -> bool:
        self.observe()
        if self.__source_id is not None:
            self.__source_id = GLib.timeout_add(int(self.interval * 1000), self.__tick)
        return GLib.SOURCE_REMOVE

    def __tick(self) -> bool:
        self.observe()
        return GLib.SOURCE_CONTINUE

    def start(self) -> None:
        """Schedule the first poll after the initial delay, then poll periodically."""
        if self.running:
            return
        self.__old_state = None
        self.__source_id = GLib.timeout_add(int(self.initial_delay * 1000), self.__first_tick)
        logging.debug(
            "power observer started (first poll in %ss, then every %ss)", self.initial_delay, self.interval
        )

    def stop(self) -> None:
        """Cancel the pending poll, if any."""
        if self.__source_id is not None:
            GLib.source_remove(self.__source_id)
            self.__source_id = None
