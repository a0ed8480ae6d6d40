from typing import List, Optional, Sequence

from auto_refreshrate.display.state import DisplayMode
from auto_refreshrate.globals import LOW_REFRESH_RATE, REFRESH_RATE_TOLERANCE
from auto_refreshrate.types import Tier


def select_mode(
    modes: Sequence[DisplayMode],
    tier: Tier,
    low_rate: float = LOW_REFRESH_RATE,
    tolerance: float = REFRESH_RATE_TOLERANCE,
) -> Optional[DisplayMode]:
    """
    Resolves a tier to one concrete display mode.

    HIGH picks the fastest mode at the current resolution (or the fastest
    overall when no mode is marked current). LOW picks the mode closest to
    ``low_rate`` among those less than ``tolerance`` Hz away, falling back to
    the slowest mode.

    Candidates are ordered by refresh rate with a stable sort, so modes with
    the same rate keep the order the hardware reported them in and the first
    of them wins.

    :param modes: modes of a single monitor as reported by the display service
    :param tier: the wanted tier
    :return: the chosen mode, or None when ``modes`` is empty
    """
    if not modes:
        return None

    ordered: List[DisplayMode] = sorted(modes, key=lambda m: m.refresh_rate)

    if tier == Tier.HIGH:
        current = next((m for m in ordered if m.is_current), None)
        if current is not None:
            ordered = [m for m in ordered if m.resolution == current.resolution]
        best = ordered[-1].refresh_rate
        return next(m for m in ordered if m.refresh_rate == best)

    near_low = [m for m in ordered if abs(m.refresh_rate - low_rate) < tolerance]
    if not near_low:
        return ordered[0]
    return min(near_low, key=lambda m: abs(m.refresh_rate - low_rate))


def available_rates(modes: Sequence[DisplayMode]) -> List[int]:
    """Distinct refresh rates of ``modes``, rounded and ascending."""
    return sorted({round(m.refresh_rate) for m in modes})
