from __future__ import annotations

import logging

from auto_refreshrate.modules.status import LogStatusSink, StatusSink
from auto_refreshrate.types import ErrorKind, PowerStates, StatusIcon, Tier, tier_for_power_state


def test_log_sink_implements_status_sink() -> None:
    assert isinstance(LogStatusSink(), StatusSink)


def test_log_sink_records_and_logs(caplog) -> None:
    sink = LogStatusSink()
    with caplog.at_level(logging.INFO):
        sink.set_status("Lo (60Hz)", StatusIcon.LOW)
        sink.set_available_rates([60, 120])
        sink.set_power_state(PowerStates.BATTERY)
        sink.set_power_state(PowerStates.BATTERY)
        sink.set_status("Apply Error", StatusIcon.ERROR)

    assert sink.status == "Apply Error"
    assert sink.icon == StatusIcon.ERROR
    assert sink.power_state == PowerStates.BATTERY

    messages = [(r.levelno, r.getMessage()) for r in caplog.records]
    assert (logging.INFO, "Status: Lo (60Hz)") in messages
    assert (logging.INFO, "Available rates: 60, 120Hz") in messages
    assert messages.count((logging.INFO, "Power: Battery")) == 1
    assert (logging.ERROR, "Status: Apply Error") in messages


def test_tier_follows_power_state() -> None:
    assert tier_for_power_state(PowerStates.BATTERY) == Tier.LOW
    assert tier_for_power_state(PowerStates.AC) == Tier.HIGH
    assert tier_for_power_state(PowerStates.UNKNOWN) == Tier.HIGH


def test_error_kinds_map_to_status_text() -> None:
    assert ErrorKind.TIMEOUT.status_text == ErrorKind.APPLY_REJECTED.status_text == "Apply Error"
    assert ErrorKind.NO_MODES.status_text == "No Modes"
    assert ErrorKind.FETCH_FAILED.retryable is True
    assert ErrorKind.NO_MODES.retryable is False
    assert ErrorKind.NO_DISPLAY_SERVICE.retryable is False
