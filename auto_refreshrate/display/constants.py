#!/usr/bin/env python3
"""
D-Bus constants for the GNOME Mutter display configuration service.
"""

# D-Bus service identification
DBUS_SERVICE_NAME = "org.gnome.Mutter.DisplayConfig"
DBUS_OBJECT_PATH = "/org/gnome/Mutter/DisplayConfig"
DBUS_INTERFACE_NAME = "org.gnome.Mutter.DisplayConfig"

# Properties of a mode in the GetCurrentState reply
MODE_IS_CURRENT = "is-current"
MODE_IS_PREFERRED = "is-preferred"

# Properties of a monitor in the GetCurrentState reply
MONITOR_DISPLAY_NAME = "display-name"
MONITOR_IS_BUILTIN = "is-builtin"

# Extra time the watchdog waits on top of the D-Bus call timeout before it
# synthesizes a failure itself (milliseconds)
WATCHDOG_GRACE_MS = 1000

# Message bus daemon, asked whether the display service is running
DBUS_DAEMON_NAME = "org.freedesktop.DBus"
DBUS_DAEMON_PATH = "/org/freedesktop/DBus"
DBUS_DAEMON_INTERFACE = "org.freedesktop.DBus"

# Signatures of the calls made; used instead of introspecting the service
GET_CURRENT_STATE_REPLY = "(ua((ssss)a(siiddada{sv})a{sv})a(iiduba(ssss)a{sv})a{sv})"
APPLY_MONITORS_CONFIG_ARGS = "(uua(iiduba(ssa{sv}))a{sv})"
NAME_HAS_OWNER_ARGS = "(s)"
NAME_HAS_OWNER_REPLY = "(b)"
