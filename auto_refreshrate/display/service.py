#!/usr/bin/env python3
"""
Asynchronous client for org.gnome.Mutter.DisplayConfig.

Every call returns immediately; its outcome is delivered later, on the GLib
main loop, to the callback the caller passed in. Each call completes exactly
once: a watchdog timer synthesizes a failure if the bus never answers, and
replies arriving after that are dropped.

Calls go straight through the bus connection with fixed signatures, so the
service is never introspected and no request waits on it synchronously.
"""

import logging
from typing import Callable, Optional

from dasbus.client.handler import GLibClient
from dasbus.typing import get_native, get_variant, get_variant_type
from gi.repository import Gio, GLib

from auto_refreshrate.config.config import config
from auto_refreshrate.types import ApplyMethod, ApplyResult, ErrorKind

from .constants import (
    APPLY_MONITORS_CONFIG_ARGS,
    DBUS_DAEMON_INTERFACE,
    DBUS_DAEMON_NAME,
    DBUS_DAEMON_PATH,
    DBUS_INTERFACE_NAME,
    DBUS_OBJECT_PATH,
    DBUS_SERVICE_NAME,
    GET_CURRENT_STATE_REPLY,
    NAME_HAS_OWNER_ARGS,
    NAME_HAS_OWNER_REPLY,
    WATCHDOG_GRACE_MS,
)
from .state import (
    DisplayMode,
    DisplayState,
    DisplayStateError,
    Monitor,
    build_logical_monitors,
    parse_current_state,
)

# Set up logging
log = logging.getLogger(__name__)

ConnectCallback = Callable[[Optional[str]], None]
StateCallback = Callable[[Optional[DisplayState], Optional[str]], None]
ApplyCallback = Callable[[ApplyResult], None]


def _is_timeout(error: Exception) -> bool:
    return isinstance(error, GLib.Error) and error.matches(Gio.io_error_quark(), Gio.IOErrorEnum.TIMED_OUT)


class PendingCall:
    """
    One outstanding D-Bus call.

    Guarantees a single completion: whichever of the reply or the watchdog
    comes first wins, the other is ignored.
    """

    def __init__(self, name: str, timeout_ms: int, on_done: Callable, *timeout_result) -> None:
        self.name = name
        self._on_done = on_done
        self._timeout_result = timeout_result
        self._done = False
        self._watchdog: Optional[int] = GLib.timeout_add(timeout_ms + WATCHDOG_GRACE_MS, self._expired)

    @property
    def done(self) -> bool:
        return self._done

    def complete(self, *result) -> None:
        if self._done:
            log.debug("Ignoring late completion of %s", self.name)
            return
        self._done = True
        if self._watchdog is not None:
            GLib.source_remove(self._watchdog)
            self._watchdog = None
        try:
            self._on_done(*result)
        except Exception:
            log.exception("Completion handler of %s failed", self.name)

    def complete_later(self, *result) -> None:
        """Complete from the next main loop iteration instead of the current stack."""
        def _idle():
            self.complete(*result)
            return GLib.SOURCE_REMOVE
        GLib.idle_add(_idle)

    def _expired(self) -> bool:
        self._watchdog = None
        if not self._done:
            log.warning("%s did not complete in time", self.name)
            self.complete(*self._timeout_result)
        return GLib.SOURCE_REMOVE


class DisplayConfig:
    """
    Display configuration service as seen by the mode controller.

    connect() must have succeeded before the other calls; until then they
    fail through their callback.
    """

    def __init__(
        self,
        connection: Optional[Gio.DBusConnection] = None,
        client=GLibClient,
        timeout: Optional[float] = None,
        method: Optional[ApplyMethod] = None,
    ):
        """
        Args:
            connection: bus connection to use, the session bus by default
            client: low-level call helper, dasbus' GLibClient by default
            timeout: seconds to wait for each call, taken from the config when None
            method: ApplyMonitorsConfig method, taken from the config when None
        """
        self._connection = connection
        self._client = client
        self._timeout = timeout
        self._method = method
        self._service_ready = False

    @property
    def connected(self) -> bool:
        return self._connection is not None and self._service_ready

    @property
    def timeout_ms(self) -> int:
        timeout = self._timeout if self._timeout is not None else config.apply_timeout
        return int(timeout * 1000)

    @property
    def method(self) -> ApplyMethod:
        return self._method if self._method is not None else config.apply_method

    def _call(self, method_name: str, parameters, reply_type: Optional[str], callback, timeout_ms: int,
              service_name: str = DBUS_SERVICE_NAME, object_path: str = DBUS_OBJECT_PATH,
              interface_name: str = DBUS_INTERFACE_NAME) -> None:
        self._client.async_call(
            connection=self._connection,
            service_name=service_name,
            object_path=object_path,
            interface_name=interface_name,
            method_name=method_name,
            parameters=parameters,
            reply_type=get_variant_type(reply_type) if reply_type else None,
            callback=callback,
            timeout=timeout_ms,
        )

    # ==================== connection ====================

    def connect(self, callback: ConnectCallback) -> PendingCall:
        """
        Open the session bus and check that the display service is running.

        The callback receives None on success or an error message, including
        when the bus does not answer in time.
        """
        timeout_ms = self.timeout_ms

        def _done(error: Optional[str]) -> None:
            self._service_ready = error is None
            if error is None:
                log.info("Connected to %s", DBUS_SERVICE_NAME)
            callback(error)

        pending = PendingCall("Connect", timeout_ms, _done, f"no reply from the session bus within {timeout_ms} ms")
        if self.connected:
            pending.complete_later(None)
            return pending

        def _on_owner(call):
            try:
                (has_owner,) = get_native(call())
            except Exception as e:
                log.error("NameHasOwner failed: %s", e)
                pending.complete(str(e))
                return
            pending.complete(None if has_owner else f"{DBUS_SERVICE_NAME} is not running")

        def _check_owner():
            try:
                self._call(
                    "NameHasOwner", get_variant(NAME_HAS_OWNER_ARGS, (DBUS_SERVICE_NAME,)), NAME_HAS_OWNER_REPLY,
                    _on_owner, timeout_ms,
                    service_name=DBUS_DAEMON_NAME, object_path=DBUS_DAEMON_PATH, interface_name=DBUS_DAEMON_INTERFACE,
                )
            except Exception as e:
                log.error("Unable to call NameHasOwner: %s", e)
                pending.complete_later(str(e))

        def _on_bus(_source, result):
            try:
                self._connection = Gio.bus_get_finish(result)
            except GLib.Error as e:
                log.error("Unable to connect to the session bus: %s", e.message)
                pending.complete(e.message)
                return
            _check_owner()

        if self._connection is not None:
            _check_owner()
        else:
            Gio.bus_get(Gio.BusType.SESSION, None, _on_bus)
        return pending

    def disconnect(self) -> None:
        # the session connection is shared with the rest of the process, only drop it
        self._connection = None
        self._service_ready = False

    # ==================== GetCurrentState ====================

    def get_current_state(self, callback: StateCallback) -> PendingCall:
        """
        Fetch the current monitor configuration.

        The callback receives (state, None) on success or (None, error) on
        failure, including timeouts and malformed replies.
        """
        timeout_ms = self.timeout_ms
        pending = PendingCall(
            "GetCurrentState", timeout_ms, callback, None, f"no reply within {timeout_ms} ms"
        )

        def _on_reply(call):
            try:
                state = parse_current_state(get_native(call()))
            except DisplayStateError as e:
                log.error("Malformed GetCurrentState reply: %s", e)
                pending.complete(None, str(e))
                return
            except Exception as e:
                log.error("GetCurrentState failed: %s", e)
                pending.complete(None, str(e))
                return
            pending.complete(state, None)

        if not self.connected:
            pending.complete_later(None, "not connected to the display configuration service")
            return pending
        try:
            self._call("GetCurrentState", None, GET_CURRENT_STATE_REPLY, _on_reply, timeout_ms)
        except Exception as e:
            log.error("Unable to call GetCurrentState: %s", e)
            pending.complete_later(None, str(e))
        return pending

    # ==================== ApplyMonitorsConfig ====================

    def apply(
        self, monitor: Monitor, mode: DisplayMode, state: DisplayState, callback: ApplyCallback
    ) -> PendingCall:
        """
        Switch ``monitor`` to ``mode``.

        ``state`` must be the freshest GetCurrentState result: its serial
        is sent along and the service rejects the request if the
        configuration changed since.
        """
        timeout_ms = self.timeout_ms
        pending = PendingCall(
            "ApplyMonitorsConfig",
            timeout_ms,
            callback,
            ApplyResult.failed(ErrorKind.TIMEOUT, f"no reply within {timeout_ms} ms"),
        )

        def _on_reply(call):
            try:
                call()
            except Exception as e:
                kind = ErrorKind.TIMEOUT if _is_timeout(e) else ErrorKind.APPLY_REJECTED
                log.error("ApplyMonitorsConfig failed: %s", e)
                pending.complete(ApplyResult.failed(kind, str(e)))
                return
            pending.complete(ApplyResult.ok())

        if not self.connected:
            pending.complete_later(
                ApplyResult.failed(ErrorKind.APPLY_REJECTED, "not connected to the display configuration service")
            )
            return pending
        try:
            layout = build_logical_monitors(state, monitor.connector, mode)
            log.debug("Applying %s on %s with serial %s: %s", mode, monitor.connector, state.serial, layout)
            parameters = get_variant(APPLY_MONITORS_CONFIG_ARGS, (state.serial, self.method.value, layout, {}))
            self._call("ApplyMonitorsConfig", parameters, None, _on_reply, timeout_ms)
        except Exception as e:
            log.error("Unable to call ApplyMonitorsConfig: %s", e)
            pending.complete_later(ApplyResult.failed(ErrorKind.APPLY_REJECTED, str(e)))
        return pending
