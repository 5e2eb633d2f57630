from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from ebrake.brake import BrakeTripped, EBrake, action_for, watch
from ebrake.config import ActionKind, BreakerConfig, HealthCheckConfig, ThresholdPolicy

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Emergency brake: stop when too many recent health checks fail"
    )
    parser.add_argument("--target", required=True, help="URL to poll")
    parser.add_argument("--method", default="GET")
    parser.add_argument("--interval", type=float, default=5.0, help="Seconds between checks")
    parser.add_argument("--timeout", type=float, default=10.0, help="Per-request timeout in seconds")

    parser.add_argument("--window-size", type=int, default=25)
    parser.add_argument("--tolerance", type=int, default=3)
    parser.add_argument(
        "--policy",
        choices=[p.value for p in ThresholdPolicy],
        default=ThresholdPolicy.WINDOW_FULL.value,
    )
    parser.add_argument(
        "--action",
        choices=[a.value for a in ActionKind],
        default=ActionKind.ABORT.value,
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default="INFO",
    )
    return parser


def _non_negative(parser: argparse.ArgumentParser, name: str, value: int) -> int:
    if value < 0:
        parser.error(f"{name} must be non-negative")
    return value


def _positive(parser: argparse.ArgumentParser, name: str, value: float) -> float:
    if value <= 0:
        parser.error(f"{name} must be positive")
    return value


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=args.log_level,
        format=LOG_FORMAT,
        stream=sys.stderr,
    )

    breaker_config = BreakerConfig(
        window_size=_non_negative(parser, "--window-size", args.window_size),
        tolerance=_non_negative(parser, "--tolerance", args.tolerance),
        policy=ThresholdPolicy(args.policy),
        action=ActionKind(args.action),
    )
    target = HealthCheckConfig(
        url=args.target,
        method=args.method,
        timeout_sec=_positive(parser, "--timeout", args.timeout),
        interval_sec=_positive(parser, "--interval", args.interval),
    )
    brake = EBrake.from_config(breaker_config)
    try:
        asyncio.run(watch(brake, target, action_for(breaker_config.action)))
    except BrakeTripped as exc:
        print(f"Stopped: {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())
