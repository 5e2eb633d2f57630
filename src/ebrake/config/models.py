from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping


class ThresholdPolicy(str, Enum):
    WINDOW_FULL = "window_full"
    TOLERANCE_SEEN = "tolerance_seen"


class ActionKind(str, Enum):
    ABORT = "abort"
    PANIC = "panic"
    LOG = "log"


@dataclass(frozen=True, slots=True)
class BreakerConfig:
    window_size: int = 25
    tolerance: int = 3
    policy: ThresholdPolicy = ThresholdPolicy.WINDOW_FULL
    action: ActionKind = ActionKind.ABORT

    def to_metadata(self) -> Mapping[str, Any]:
        return {
            "window_size": self.window_size,
            "tolerance": self.tolerance,
            "policy": self.policy.value,
            "action": self.action.value,
        }


@dataclass(frozen=True, slots=True)
class HealthCheckConfig:
    url: str
    method: str = "GET"
    timeout_sec: float = 10.0
    interval_sec: float = 5.0
    headers: Mapping[str, str] = field(default_factory=dict)

    def to_metadata(self) -> Mapping[str, Any]:
        return {
            "url": self.url,
            "method": self.method,
            "timeout_sec": self.timeout_sec,
            "interval_sec": self.interval_sec,
            "headers": sorted(self.headers),
        }
