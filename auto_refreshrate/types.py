from dataclasses import dataclass
from enum import Enum


class PowerStates(Enum):
    AC = "ac"
    BATTERY = "battery"
    UNKNOWN = "unknown"


class Tier(Enum):
    HIGH = "high"
    LOW = "low"

    @property
    def label(self) -> str:
        return "Hi" if self is Tier.HIGH else "Lo"


class StatusIcon(Enum):
    DEFAULT = "display-symbolic"
    HIGH = "view-fullscreen-symbolic"
    LOW = "view-restore-symbolic"
    ERROR = "dialog-error-symbolic"


class ApplyMethod(Enum):
    VERIFY = 0
    TEMPORARY = 1
    PERSISTENT = 2


class ErrorKind(Enum):
    NO_DISPLAY_SERVICE = "no_display_service"
    FETCH_FAILED = "fetch_failed"
    NO_MONITORS = "no_monitors"
    NO_MODES = "no_modes"
    APPLY_REJECTED = "apply_rejected"
    TIMEOUT = "timeout"
    INTERNAL = "internal"

    @property
    def status_text(self) -> str:
        return _STATUS_TEXT[self]

    @property
    def retryable(self) -> bool:
        """Whether the next power poll should retry the failed cycle."""
        return self in (ErrorKind.FETCH_FAILED, ErrorKind.APPLY_REJECTED, ErrorKind.TIMEOUT)


# timeouts are reported the same way as a rejected configuration
_STATUS_TEXT = {
    ErrorKind.NO_DISPLAY_SERVICE: "No Display Service",
    ErrorKind.FETCH_FAILED: "D-Bus Error",
    ErrorKind.NO_MONITORS: "No Monitors",
    ErrorKind.NO_MODES: "No Modes",
    ErrorKind.APPLY_REJECTED: "Apply Error",
    ErrorKind.TIMEOUT: "Apply Error",
    ErrorKind.INTERNAL: "Internal Error",
}


@dataclass(frozen=True)
class ApplyResult:
    success: bool
    error: str | None = None
    kind: ErrorKind | None = None

    @classmethod
    def ok(cls) -> "ApplyResult":
        return cls(success=True)

    @classmethod
    def failed(cls, kind: ErrorKind, error: str) -> "ApplyResult":
        return cls(success=False, error=error, kind=kind)


def tier_for_power_state(state: PowerStates) -> Tier:
    return Tier.LOW if state == PowerStates.BATTERY else Tier.HIGH
