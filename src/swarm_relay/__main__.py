"""
Headless driver: steps the swarm on a fixed frame clock.

Usage:
  python -m swarm_relay --ticks 600 --seed 1 --log-dir runs --every 10
"""
from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from swarm_relay.api import SimController
from swarm_relay.config import DEFAULT_CONFIG
from swarm_relay.errors import ConfigError
from swarm_relay.io.logging import RunLogger


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="swarm_relay", description="Run the beacon relay swarm without a renderer.")
    ap.add_argument("--ticks", type=int, default=600, help="number of frames to simulate")
    ap.add_argument("--dt", type=float, default=1.0 / 60.0, help="seconds per frame")
    ap.add_argument("--seed", type=int, default=None)
    ap.add_argument("--cols", type=int, default=DEFAULT_CONFIG.grid_cols)
    ap.add_argument("--rows", type=int, default=DEFAULT_CONFIG.grid_rows)
    ap.add_argument("--speed-min", type=float, default=DEFAULT_CONFIG.speed_min)
    ap.add_argument("--speed-max", type=float, default=DEFAULT_CONFIG.speed_max)
    ap.add_argument("--relay-radius", type=float, default=DEFAULT_CONFIG.relay_radius)
    ap.add_argument("--cooldown", type=float, default=DEFAULT_CONFIG.trigger_cooldown)
    ap.add_argument("--log-dir", default=None, help="write frames.csv under this directory")
    ap.add_argument("--run-id", default=None)
    ap.add_argument("--every", type=int, default=1, help="log every Nth frame")
    return ap


def _frame(sim: SimController) -> dict:
    view = sim.get_view()
    return {"t": view["t"], "tick": view["tick"], "stats": view["stats"]}


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        cfg = DEFAULT_CONFIG.with_overrides(
            grid_cols=args.cols, grid_rows=args.rows,
            speed_min=args.speed_min, speed_max=args.speed_max,
            relay_radius=args.relay_radius, trigger_cooldown=args.cooldown,
            seed=args.seed,
        )
    except ConfigError as e:
        print(f"[sim] config error: {e}", file=sys.stderr)
        return 2

    sim = SimController(cfg)
    every = max(1, args.every)
    print(f"[sim] {len(sim.agents)} agents, {args.ticks} ticks @ dt={args.dt:.4f}s, seed={sim.seed}")

    logger = RunLogger(args.log_dir, run_id=args.run_id, meta={"config": cfg.snapshot()}) if args.log_dir else None
    if logger:
        logger.start()
        print(f"[sim] logging to {logger.csv_path}")
    try:
        for _ in range(args.ticks):
            sim.step(args.dt)
            if logger and sim.tick_count % every == 0:
                logger.log(_frame(sim))
    finally:
        if logger:
            lost = logger.stop()
            print(f"[sim] wrote {logger.rows_written} frames to {logger.csv_path}")
            if lost:
                print(f"[sim] warning: {lost} frames were not written", file=sys.stderr)

    s = sim.stats()
    print(f"[sim] done t={sim.time:.2f}s arrivals={s['arrivals']} "
          f"destinations={s['destinations']} lit={s['lit_rings']}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
