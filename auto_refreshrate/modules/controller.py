from dataclasses import dataclass
import logging
from typing import Optional

from auto_refreshrate.config.config import config
from auto_refreshrate.display.state import DisplayMode, DisplayState, Monitor
from auto_refreshrate.modules.selector import available_rates, select_mode
from auto_refreshrate.modules.status import StatusSink
from auto_refreshrate.types import (
    ApplyResult,
    ErrorKind,
    PowerStates,
    StatusIcon,
    Tier,
    tier_for_power_state,
)


@dataclass
class ControllerState:
    current_tier: Optional[Tier] = None  # None until the first successful apply
    operation_in_progress: bool = False
    last_applied_mode: Optional[DisplayMode] = None


class ModeController:
    """
    Switches the display between its high and low refresh rate tier.

    Reacts to power source changes reported by the observer and to manual
    requests from the front-end. At most one mode change is in flight at any
    time: requests arriving while one is running are dropped, not queued.
    A mode change is a chain of asynchronous steps (connect, fetch the current
    state, pick a mode, apply it) that all complete on the main loop; the
    controller's state is only touched from there.
    """

    def __init__(self, display, sink: StatusSink, observer=None) -> None:
        """
        :param display: the display configuration client (see display.service.DisplayConfig)
        :param sink: receives status updates
        :param observer: power source observer driving automatic switching, optional
        """
        self.display = display
        self.sink = sink
        self.observer = observer
        self.state = ControllerState()
        self._pending_tier: Optional[Tier] = None
        self._pending_automatic = False
        self._stopped = True
        # identifies the running cycle; completions of older cycles are stale
        self._cycle = 0
        # automatic retries since the last success or power source change
        self._retries = 0
        self._last_power_state: Optional[PowerStates] = None

    @property
    def busy(self) -> bool:
        return self.state.operation_in_progress

    # ==================== lifecycle ====================

    def start(self) -> None:
        """Begin automatic switching; the first power poll happens after the observer's initial delay."""
        if not self._stopped:
            return
        self._stopped = False
        self._last_power_state = None
        if self.observer is not None:
            self.observer.listen(self.handle_power_source)
            self.observer.start()
        logging.info("mode controller started")

    def stop(self) -> None:
        """
        Stop automatic switching.

        A mode change already in flight is abandoned: the controller goes
        back to idle and the completion, when it arrives, is ignored.
        """
        if self._stopped:
            return
        self._stopped = True
        self._cycle += 1
        self._idle()
        if self.observer is not None:
            self.observer.stop()
            self.observer.unlisten(self.handle_power_source)
        self.display.disconnect()
        logging.info("mode controller stopped")

    # ==================== triggers ====================

    def handle_power_source(self, value: PowerStates) -> None:
        """
        Handle a change of power source reported by the observer.

        Switches to the low tier on battery and to the high tier otherwise,
        unless the display already is in that tier.
        """
        logging.debug("power source received event: %s", value)
        if self._stopped or not isinstance(value, PowerStates):
            return

        self.sink.set_power_state(value)
        if value != self._last_power_state:
            self._last_power_state = value
            self._retries = 0
        tier: Tier = tier_for_power_state(value)

        if self.busy:
            # have the observer report the state again once we are idle
            logging.debug("mode change in progress, deferring power event %s", value)
            if self.observer is not None:
                self.observer.invalidate()
            return

        if tier == self.state.current_tier:
            return

        if value == PowerStates.BATTERY:
            logging.info("AC disconnected, switching to low refresh rate")
        else:
            logging.info("AC connected, switching to high refresh rate")
        self._begin(tier, automatic=True)

    def request_tier(self, tier: Tier) -> bool:
        """
        Manual request for a tier, e.g. from the tray menu.

        :return: True if a mode change was started, False if it was dropped
                 because another one is still in progress or the controller
                 is stopped
        """
        if self._stopped:
            logging.warning("mode controller is not running, ignoring request for %s tier", tier.value)
            return False
        if self.busy:
            logging.info("mode change in progress, ignoring request for %s tier", tier.value)
            return False
        logging.info("manual request for %s tier", tier.value)
        self._retries = 0
        self._begin(tier, automatic=False)
        return True

    # ==================== mode change cycle ====================

    def _begin(self, tier: Tier, automatic: bool) -> None:
        self._cycle += 1
        cycle = self._cycle
        self.state.operation_in_progress = True
        self._pending_tier = tier
        self._pending_automatic = automatic
        self._step(cycle, self._connect)

    def _step(self, cycle: int, step, *args) -> None:
        """
        Run one step of the cycle started as ``cycle``.

        Completions of an abandoned cycle are ignored. An unexpected error
        ends the cycle so the controller never stays busy.
        """
        if self._stopped or cycle != self._cycle:
            logging.debug("ignoring stale completion (%s)", step.__name__)
            return
        try:
            step(cycle, *args)
        except Exception as e:
            logging.exception("mode change step %s failed", step.__name__)
            if self.busy and cycle == self._cycle:
                self._finish_failed(ErrorKind.INTERNAL, f"{type(e).__name__}: {e}")

    def _connect(self, cycle: int) -> None:
        self.sink.set_status(f"Switching to {self._pending_tier.label}...", StatusIcon.DEFAULT)
        if self.display.connected:
            self._fetch_state(cycle)
            return
        self.display.connect(lambda error: self._step(cycle, self._on_connected, error))

    def _on_connected(self, cycle: int, error: Optional[str]) -> None:
        if error is not None:
            logging.error("display configuration service unavailable: %s", error)
            self._finish_failed(ErrorKind.NO_DISPLAY_SERVICE, error)
            return
        self._fetch_state(cycle)

    def _fetch_state(self, cycle: int) -> None:
        # the serial token must come from a state fetched right before applying
        self.display.get_current_state(lambda state, error: self._step(cycle, self._on_state, state, error))

    def _on_state(self, cycle: int, display_state: Optional[DisplayState], error: Optional[str]) -> None:
        if display_state is None:
            self._finish_failed(ErrorKind.FETCH_FAILED, error or "no display state")
            return

        tier = self._pending_tier
        monitor: Optional[Monitor] = display_state.target_monitor(config.connector)
        if monitor is None:
            self._finish_failed(ErrorKind.NO_MONITORS, f"no monitor found (connector={config.connector})")
            return
        if display_state.logical_monitor(monitor.connector) is None:
            self._finish_failed(ErrorKind.NO_MONITORS, f"{monitor.connector} is disabled")
            return

        self.sink.set_available_rates(available_rates(monitor.modes))
        target = select_mode(
            monitor.modes,
            tier,
            low_rate=config.low_refresh_rate,
            tolerance=config.refresh_rate_tolerance,
        )
        if target is None:
            self._finish_failed(ErrorKind.NO_MODES, f"{monitor.connector} reports no modes")
            return

        if target.is_current:
            logging.info("%s already at %s, nothing to apply", monitor.connector, target)
            self._finish_ok(tier, target)
            return

        logging.info("switching %s to %s (%s tier)", monitor.connector, target, tier.value)
        self.display.apply(
            monitor, target, display_state,
            lambda result: self._step(cycle, self._on_applied, tier, target, result),
        )

    def _on_applied(self, cycle: int, tier: Tier, mode: DisplayMode, result: ApplyResult) -> None:
        if result.success:
            self._finish_ok(tier, mode)
        else:
            self._finish_failed(result.kind or ErrorKind.APPLY_REJECTED, result.error or "unknown error")

    def _finish_ok(self, tier: Tier, mode: DisplayMode) -> None:
        self.state.current_tier = tier
        self.state.last_applied_mode = mode
        self._retries = 0
        self._idle()
        icon = StatusIcon.HIGH if tier == Tier.HIGH else StatusIcon.LOW
        self.sink.set_status(f"{tier.label} ({round(mode.refresh_rate)}Hz)", icon)
        logging.info("applied %s refresh rate: %sHz", tier.value, round(mode.refresh_rate))

    def _finish_failed(self, kind: ErrorKind, error: str) -> None:
        automatic = self._pending_automatic
        self._idle()
        logging.error("mode change failed (%s): %s", kind.value, error)
        self.sink.set_status(kind.status_text, StatusIcon.ERROR)
        if not (automatic and kind.retryable and self.observer is not None):
            return
        if self._retries >= config.max_retries:
            logging.warning("giving up after %d retries, waiting for the power source to change", self._retries)
            return
        # current_tier is unchanged, so the next poll tries again
        self._retries += 1
        self.observer.invalidate()

    def _idle(self) -> None:
        self.state.operation_in_progress = False
        self._pending_tier = None
        self._pending_automatic = False
