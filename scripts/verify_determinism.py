#!/usr/bin/env python3
"""Double-run determinism gate for the tick engine.

Builds two engines with the same seed and a virtual clock, drives both
through the same number of ticks, then compares SHA256 digests of their
full state.

Exit code 0 = deterministic; 1 = mismatch.

Usage:
    python scripts/verify_determinism.py --seed 20251214 --ticks 500
"""

from __future__ import annotations

import argparse
import sys

from agentboard.sim import ManualClock, SimConfig, TickEngine


def run_engine(seed: int, ticks: int, time_range: str) -> str:
    """Run one fresh engine and return its state digest."""
    engine = TickEngine(
        SimConfig(seed=seed),
        clock=ManualClock(start_ms=0, step_ms=2000),
        time_range=time_range,
    )
    for _ in range(ticks):
        engine.tick()
    return engine.store.digest()


def main() -> int:
    parser = argparse.ArgumentParser(description="Verify tick engine determinism")
    parser.add_argument("--seed", type=int, default=20251214)
    parser.add_argument("--ticks", type=int, default=500)
    parser.add_argument("--range", dest="time_range", default="medium")
    args = parser.parse_args()

    digest1 = run_engine(args.seed, args.ticks, args.time_range)
    print(f"  Run 1 digest: {digest1}")
    digest2 = run_engine(args.seed, args.ticks, args.time_range)
    print(f"  Run 2 digest: {digest2}")

    if digest1 != digest2:
        print("DETERMINISM CHECK FAILED: digests differ between runs")
        return 1
    print(f"PASS: both runs match after {args.ticks} ticks (digest={digest1[:16]}...)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
