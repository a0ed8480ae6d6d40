#!/usr/bin/env python3
"""
Display configuration support for auto-refreshrate.

This package talks to GNOME Mutter's org.gnome.Mutter.DisplayConfig D-Bus
interface: it reads the monitors and their modes, and applies a new mode
to one of them. The asynchronous client lives in
auto_refreshrate.display.service and needs dasbus and PyGObject; the typed
state model below is plain Python.
"""

from .state import (
    DisplayMode,
    DisplayState,
    DisplayStateError,
    LogicalMonitor,
    Monitor,
    build_logical_monitors,
    parse_current_state,
)
from .constants import (
    DBUS_SERVICE_NAME,
    DBUS_OBJECT_PATH,
    DBUS_INTERFACE_NAME,
)

__all__ = [
    # State model
    "DisplayMode",
    "DisplayState",
    "DisplayStateError",
    "LogicalMonitor",
    "Monitor",
    "build_logical_monitors",
    "parse_current_state",
    # Constants
    "DBUS_SERVICE_NAME",
    "DBUS_OBJECT_PATH",
    "DBUS_INTERFACE_NAME",
]
