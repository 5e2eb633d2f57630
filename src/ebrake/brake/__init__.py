from __future__ import annotations

from ebrake.brake.actions import (
    Abort,
    BrakeTripped,
    LogOnly,
    Panic,
    TriggerAction,
    TriggerEvent,
    action_for,
)
from ebrake.brake.breaker import EBrake
from ebrake.brake.client import check_health
from ebrake.brake.watcher import spawn_watch, watch

__all__ = [
    "Abort",
    "BrakeTripped",
    "EBrake",
    "LogOnly",
    "Panic",
    "TriggerAction",
    "TriggerEvent",
    "action_for",
    "check_health",
    "spawn_watch",
    "watch",
]
