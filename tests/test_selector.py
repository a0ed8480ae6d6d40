from __future__ import annotations

from auto_refreshrate.display.state import DisplayMode
from auto_refreshrate.modules.selector import available_rates, select_mode
from auto_refreshrate.types import Tier


def _mode(mode_id: str, rate: float, width: int = 1920, height: int = 1080, current: bool = False) -> DisplayMode:
    return DisplayMode(id=mode_id, width=width, height=height, refresh_rate=rate, is_current=current)


def test_high_picks_fastest_mode_at_current_resolution() -> None:
    modes = [
        _mode("a", 60.0, current=True),
        _mode("b", 120.0),
        _mode("c", 165.0, width=2560, height=1440),
    ]
    assert select_mode(modes, Tier.HIGH).id == "b"


def test_high_without_current_mode_picks_global_maximum() -> None:
    modes = [_mode("a", 60.0), _mode("b", 120.0), _mode("c", 165.0, width=2560, height=1440)]
    assert select_mode(modes, Tier.HIGH).id == "c"


def test_low_picks_mode_near_sixty() -> None:
    modes = [_mode("a", 59.95), _mode("b", 120.0), _mode("c", 48.0)]
    assert select_mode(modes, Tier.LOW).id == "a"


def test_low_prefers_exact_sixty_over_ntsc_rate() -> None:
    modes = [_mode("a", 144.0), _mode("b", 59.94), _mode("c", 60.0)]
    assert select_mode(modes, Tier.LOW).id == "c"


def test_high_scenario_from_sixty() -> None:
    modes = [_mode("a", 60.0, current=True), _mode("b", 120.0)]
    assert select_mode(modes, Tier.HIGH).id == "b"


def test_low_falls_back_to_slowest_mode() -> None:
    modes = [_mode("a", 75.0), _mode("b", 144.0), _mode("c", 90.0)]
    assert select_mode(modes, Tier.LOW).id == "a"


def test_low_tolerance_is_strict() -> None:
    modes = [_mode("a", 59.0), _mode("b", 120.0)]
    # exactly 1 Hz away is not "near" 60, so the slowest mode wins anyway
    assert select_mode(modes, Tier.LOW).id == "a"
    assert select_mode([_mode("b", 120.0), _mode("d", 61.0), _mode("e", 50.0)], Tier.LOW).id == "e"


def test_low_target_and_tolerance_are_configurable() -> None:
    modes = [_mode("a", 48.0), _mode("b", 60.0), _mode("c", 90.0)]
    assert select_mode(modes, Tier.LOW, low_rate=90.0).id == "c"
    assert select_mode(modes, Tier.LOW, low_rate=50.0, tolerance=3.0).id == "a"


def test_single_mode_is_chosen_for_both_tiers() -> None:
    modes = [_mode("only", 60.0, current=True)]
    assert select_mode(modes, Tier.HIGH).id == "only"
    assert select_mode(modes, Tier.LOW).id == "only"


def test_empty_mode_list_returns_none() -> None:
    assert select_mode([], Tier.HIGH) is None
    assert select_mode([], Tier.LOW) is None


def test_equal_rates_keep_reported_order() -> None:
    modes = [_mode("first", 120.0, current=True), _mode("second", 120.0), _mode("slow", 60.0)]
    assert select_mode(modes, Tier.HIGH).id == "first"

    modes = [_mode("x", 60.0), _mode("y", 60.0), _mode("fast", 144.0)]
    assert select_mode(modes, Tier.LOW).id == "x"


def test_selection_does_not_reorder_input() -> None:
    modes = [_mode("b", 120.0), _mode("a", 60.0, current=True)]
    before = list(modes)
    select_mode(modes, Tier.HIGH)
    select_mode(modes, Tier.LOW)
    assert modes == before


def test_available_rates_are_distinct_and_rounded() -> None:
    modes = [_mode("a", 59.95), _mode("b", 120.0), _mode("c", 60.0, width=1280, height=720), _mode("d", 119.98)]
    assert available_rates(modes) == [60, 120]
    assert available_rates([]) == []
