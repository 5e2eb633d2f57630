from __future__ import annotations

from ebrake.config.models import ActionKind, BreakerConfig, HealthCheckConfig, ThresholdPolicy

__all__ = [
    "ActionKind",
    "BreakerConfig",
    "HealthCheckConfig",
    "ThresholdPolicy",
]
