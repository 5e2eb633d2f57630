from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Mapping, NoReturn, Protocol

from ebrake.config import ActionKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TriggerEvent:
    window_size: int
    tolerance: int
    failures: int
    successes: int
    samples: int

    def to_metadata(self) -> Mapping[str, Any]:
        return {
            "window_size": self.window_size,
            "tolerance": self.tolerance,
            "failures": self.failures,
            "successes": self.successes,
            "samples": self.samples,
        }


class BrakeTripped(RuntimeError):
    """Raised by :class:`Panic` when the failure tolerance is exceeded."""

    def __init__(self, event: TriggerEvent) -> None:
        super().__init__(
            f"emergency brake tripped: {event.failures} failures in "
            f"{event.samples} samples exceeds tolerance {event.tolerance}"
        )
        self.event = event


class TriggerAction(Protocol):
    def __call__(self, event: TriggerEvent) -> None:
        ...


@dataclass(frozen=True, slots=True)
class Abort:
    def __call__(self, event: TriggerEvent) -> NoReturn:
        logging.shutdown()
        os.abort()


@dataclass(frozen=True, slots=True)
class Panic:
    def __call__(self, event: TriggerEvent) -> NoReturn:
        raise BrakeTripped(event)


@dataclass(frozen=True, slots=True)
class LogOnly:
    def __call__(self, event: TriggerEvent) -> None:
        logger.warning(
            "emergency brake tripped, continuing: %d failures in %d samples (tolerance %d)",
            event.failures,
            event.samples,
            event.tolerance,
            extra=dict(event.to_metadata()),
        )


def action_for(kind: ActionKind) -> TriggerAction:
    if kind is ActionKind.ABORT:
        return Abort()
    if kind is ActionKind.PANIC:
        return Panic()
    if kind is ActionKind.LOG:
        return LogOnly()
    msg = f"Unsupported action kind: {kind}"
    raise ValueError(msg)
