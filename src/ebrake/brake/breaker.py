from __future__ import annotations

import logging
from collections import deque

from ebrake.brake.actions import Abort, Panic, TriggerAction, TriggerEvent
from ebrake.config import BreakerConfig, ThresholdPolicy

logger = logging.getLogger(__name__)


class EBrake:
    """Fixed-capacity window of success/failure samples.

    The brake trips once more than ``tolerance`` of the samples currently in
    the window are failures. Nothing is latched: every check looks at the
    window as it is now, so a brake wired to a non-fatal action keeps
    reporting a trip until enough successes push the failures back out.

    Not thread-safe. Callers sharing one brake across threads must hold
    their own lock around every call.
    """

    __slots__ = ("_window", "_window_size", "_tolerance", "_policy", "_failures", "_successes")

    def __init__(
        self,
        window_size: int = 0,
        tolerance: int = 0,
        policy: ThresholdPolicy = ThresholdPolicy.WINDOW_FULL,
    ) -> None:
        if window_size < 0:
            msg = f"window_size must be non-negative, got {window_size}"
            raise ValueError(msg)
        if tolerance < 0:
            msg = f"tolerance must be non-negative, got {tolerance}"
            raise ValueError(msg)
        self._window: deque[bool] = deque()
        self._window_size = window_size
        self._tolerance = tolerance
        self._policy = ThresholdPolicy(policy)
        self._failures = 0
        self._successes = 0

    @classmethod
    def from_config(cls, config: BreakerConfig) -> EBrake:
        return cls(config.window_size, config.tolerance, config.policy)

    @property
    def window_size(self) -> int:
        return self._window_size

    @property
    def tolerance(self) -> int:
        return self._tolerance

    @property
    def policy(self) -> ThresholdPolicy:
        return self._policy

    @property
    def failures(self) -> int:
        return self._failures

    @property
    def successes(self) -> int:
        return self._successes

    @property
    def window(self) -> tuple[bool, ...]:
        return tuple(self._window)

    def __len__(self) -> int:
        return len(self._window)

    def __repr__(self) -> str:
        return (
            f"EBrake(window_size={self._window_size}, tolerance={self._tolerance}, "
            f"policy={self._policy.value}, failures={self._failures}, "
            f"successes={self._successes})"
        )

    def add_sample(self, outcome: bool) -> None:
        outcome = bool(outcome)
        if self._window_size == 0:
            return
        evicted: bool | None = None
        if len(self._window) == self._window_size:
            evicted = self._window.popleft()
        self._window.append(outcome)
        self._swap(outcome, evicted)

    def _swap(self, added: bool, evicted: bool | None) -> None:
        # Net change of (added) minus (evicted), applied to both counters at once.
        delta_success = int(added) - (int(evicted) if evicted is not None else 0)
        delta_failure = int(not added) - (int(not evicted) if evicted is not None else 0)
        self._successes, self._failures = (
            self._successes + delta_success,
            self._failures + delta_failure,
        )

    def _enough_samples(self) -> bool:
        if self._policy is ThresholdPolicy.TOLERANCE_SEEN:
            return len(self._window) >= self._tolerance
        return self._window_size > 0 and len(self._window) == self._window_size

    def should_trigger(self) -> bool:
        if not self._enough_samples():
            return False
        return self._failures > self._tolerance

    def snapshot(self) -> TriggerEvent:
        return TriggerEvent(
            window_size=self._window_size,
            tolerance=self._tolerance,
            failures=self._failures,
            successes=self._successes,
            samples=len(self._window),
        )

    def trigger(self, action: TriggerAction) -> bool:
        """Fire ``action`` if the brake should trigger.

        Returns ``False`` without side effects when the tolerance holds. When
        it is exceeded the trip is logged and ``action`` is called; ``True``
        is returned only if the action itself returns.
        """
        if not self.should_trigger():
            return False
        event = self.snapshot()
        logger.critical(
            "emergency brake triggered: %d failures in %d samples (tolerance %d)",
            event.failures,
            event.samples,
            event.tolerance,
            extra=dict(event.to_metadata()),
        )
        action(event)
        return True

    def trigger_on_sample(self, outcome: bool, action: TriggerAction) -> bool:
        self.add_sample(outcome)
        return self.trigger(action)

    def trigger_abort(self) -> bool:
        return self.trigger(Abort())

    def trigger_panic(self) -> bool:
        return self.trigger(Panic())

    def trigger_on_sample_abort(self, outcome: bool) -> bool:
        return self.trigger_on_sample(outcome, Abort())

    def trigger_on_sample_panic(self, outcome: bool) -> bool:
        return self.trigger_on_sample(outcome, Panic())
