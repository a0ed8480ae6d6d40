#!/usr/bin/env python3
"""
Typed view of org.gnome.Mutter.DisplayConfig state.

Once unpacked, GetCurrentState replies are nested tuples, lists and dicts.
This module validates them once, at the boundary, and turns them into
frozen dataclasses; it also builds the logical monitor layout that
ApplyMonitorsConfig expects. Nothing here performs any I/O.
"""

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .constants import (
    MODE_IS_CURRENT,
    MODE_IS_PREFERRED,
    MONITOR_DISPLAY_NAME,
    MONITOR_IS_BUILTIN,
)


class DisplayStateError(ValueError):
    """Raised when a GetCurrentState reply does not have the expected shape."""


@dataclass(frozen=True)
class DisplayMode:
    id: str
    width: int
    height: int
    refresh_rate: float
    is_current: bool = False
    is_preferred: bool = False
    preferred_scale: float = 1.0
    supported_scales: Tuple[float, ...] = ()

    @property
    def resolution(self) -> Tuple[int, int]:
        return self.width, self.height

    def supports_scale(self, scale: float) -> bool:
        if not self.supported_scales:
            return True
        return any(math.isclose(scale, s, abs_tol=1e-3) for s in self.supported_scales)

    def __str__(self) -> str:
        return f"{self.width}x{self.height}@{self.refresh_rate:.2f}Hz"


@dataclass(frozen=True)
class Monitor:
    connector: str
    vendor: str
    product: str
    serial: str
    modes: Tuple[DisplayMode, ...]
    display_name: str = ""
    is_builtin: bool = False

    @property
    def current_mode(self) -> Optional[DisplayMode]:
        return next((m for m in self.modes if m.is_current), None)


@dataclass(frozen=True)
class LogicalMonitor:
    x: int
    y: int
    scale: float
    transform: int
    primary: bool
    connectors: Tuple[str, ...]


@dataclass(frozen=True)
class DisplayState:
    serial: int
    monitors: Tuple[Monitor, ...]
    logical_monitors: Tuple[LogicalMonitor, ...]
    properties: Dict[str, Any] = field(default_factory=dict)

    def monitor(self, connector: str) -> Optional[Monitor]:
        return next((m for m in self.monitors if m.connector == connector), None)

    def logical_monitor(self, connector: str) -> Optional[LogicalMonitor]:
        """Logical monitor showing ``connector``, None while the monitor is disabled."""
        return next((lm for lm in self.logical_monitors if connector in lm.connectors), None)

    def target_monitor(self, connector: Optional[str] = None) -> Optional[Monitor]:
        """
        Monitor whose refresh rate is managed.

        A configured connector wins; otherwise the built-in panel, otherwise
        the first monitor reported by the service.
        """
        if connector:
            return self.monitor(connector)
        builtin = next((m for m in self.monitors if m.is_builtin), None)
        if builtin is not None:
            return builtin
        return self.monitors[0] if self.monitors else None


def _expect(value: Any, length: int, what: str) -> Sequence[Any]:
    if not isinstance(value, (tuple, list)) or len(value) < length:
        raise DisplayStateError(f"malformed {what}: {value!r}")
    return value


def _parse_mode(raw: Any) -> DisplayMode:
    mode_id, width, height, refresh_rate, preferred_scale, scales, props = _expect(raw, 7, "mode")[:7]
    props = props if isinstance(props, dict) else {}
    try:
        return DisplayMode(
            id=str(mode_id),
            width=int(width),
            height=int(height),
            refresh_rate=float(refresh_rate),
            is_current=bool(props.get(MODE_IS_CURRENT, False)),
            is_preferred=bool(props.get(MODE_IS_PREFERRED, False)),
            preferred_scale=float(preferred_scale),
            supported_scales=tuple(float(s) for s in scales),
        )
    except (TypeError, ValueError, AttributeError) as e:
        raise DisplayStateError(f"malformed mode {raw!r}: {e}") from e


def _parse_monitor(raw: Any) -> Monitor:
    spec, modes, props = _expect(raw, 3, "monitor")[:3]
    connector, vendor, product, serial = _expect(spec, 4, "monitor spec")[:4]
    props = props if isinstance(props, dict) else {}
    return Monitor(
        connector=str(connector),
        vendor=str(vendor),
        product=str(product),
        serial=str(serial),
        modes=tuple(_parse_mode(m) for m in _expect(modes, 0, "modes")),
        display_name=str(props.get(MONITOR_DISPLAY_NAME, "")),
        is_builtin=bool(props.get(MONITOR_IS_BUILTIN, False)),
    )


def _parse_logical_monitor(raw: Any) -> LogicalMonitor:
    x, y, scale, transform, primary, specs = _expect(raw, 6, "logical monitor")[:6]
    try:
        return LogicalMonitor(
            x=int(x),
            y=int(y),
            scale=float(scale),
            transform=int(transform),
            primary=bool(primary),
            connectors=tuple(
                str(_expect(s, 1, "logical monitor spec")[0]) for s in _expect(specs, 0, "monitor specs")
            ),
        )
    except (TypeError, ValueError) as e:
        raise DisplayStateError(f"malformed logical monitor {raw!r}: {e}") from e


def parse_current_state(reply: Any) -> DisplayState:
    """
    Parse a GetCurrentState reply.

    :param reply: (serial, monitors, logical_monitors, properties) as native
                  Python values
    :raises DisplayStateError: if the reply is malformed
    """
    serial, monitors, logical_monitors, properties = _expect(reply, 4, "state")[:4]
    try:
        serial = int(serial)
    except (TypeError, ValueError) as e:
        raise DisplayStateError(f"malformed serial {serial!r}") from e

    return DisplayState(
        serial=serial,
        monitors=tuple(_parse_monitor(m) for m in _expect(monitors, 0, "monitors")),
        logical_monitors=tuple(
            _parse_logical_monitor(lm) for lm in _expect(logical_monitors, 0, "logical monitors")
        ),
        properties=dict(properties) if isinstance(properties, dict) else {},
    )


def build_logical_monitors(state: DisplayState, connector: str, mode: DisplayMode) -> List[tuple]:
    """
    Logical monitor layout for ApplyMonitorsConfig that switches ``connector``
    to ``mode`` and leaves everything else as it is.

    Each entry is (x, y, scale, transform, primary, [(connector, mode_id, {})]).

    :raises DisplayStateError: if a monitor in the layout has no current mode
        or ``connector`` is not part of any logical monitor
    """
    if state.logical_monitor(connector) is None:
        raise DisplayStateError(f"monitor {connector} is not enabled")
    layout: List[tuple] = []
    for lm in state.logical_monitors:
        scale = lm.scale
        assigned = []
        for name in lm.connectors:
            if name == connector:
                mode_id = mode.id
                if not mode.supports_scale(scale):
                    scale = mode.preferred_scale
            else:
                monitor = state.monitor(name)
                current = monitor.current_mode if monitor is not None else None
                if current is None:
                    raise DisplayStateError(f"monitor {name} has no current mode")
                mode_id = current.id
            assigned.append((name, mode_id, {}))
        layout.append((lm.x, lm.y, scale, lm.transform, lm.primary, assigned))
    return layout
