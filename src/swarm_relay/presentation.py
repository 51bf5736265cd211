"""Presentation adapters: where per-tick agent output goes.

The core never draws anything. Each tick the relay engine hands every ring
color to the adapter, and the controller hands over the post-motion pose.
``NullPresenter`` drops both; ``FrameRecorder`` keeps them in memory and
returns them as a pandas table.
"""
from __future__ import annotations
from typing import Dict, List, Optional, Protocol, Tuple

import pandas as pd

from swarm_relay.config import RGBA


class Presenter(Protocol):
    def update_ring(self, tick: int, agent_id: int, rgba: RGBA) -> None: ...

    def update_agent(self, tick: int, agent_id: int, x: float, y: float, heading: float) -> None: ...


class NullPresenter:
    """Drops every update."""
    def update_ring(self, tick: int, agent_id: int, rgba: RGBA) -> None:
        return None

    def update_agent(self, tick: int, agent_id: int, x: float, y: float, heading: float) -> None:
        return None


class FrameRecorder:
    """Collects per-agent output; ``to_frame()`` returns one row per (tick, agent).

    ``max_ticks`` bounds memory on long runs by keeping only the newest ticks.
    """
    COLUMNS = ["tick", "agent_id", "x", "y", "heading", "r", "g", "b", "a"]

    def __init__(self, max_ticks: Optional[int] = None):
        self.max_ticks = max_ticks
        self._rings: Dict[Tuple[int, int], RGBA] = {}
        self._poses: Dict[Tuple[int, int], Tuple[float, float, float]] = {}
        self._ticks: List[int] = []

    def _note_tick(self, tick: int) -> None:
        if self._ticks and self._ticks[-1] == tick:
            return
        self._ticks.append(tick)
        if self.max_ticks is not None and len(self._ticks) > self.max_ticks:
            dropped = set(self._ticks[:-self.max_ticks])
            self._ticks = self._ticks[-self.max_ticks:]
            self._rings = {k: v for k, v in self._rings.items() if k[0] not in dropped}
            self._poses = {k: v for k, v in self._poses.items() if k[0] not in dropped}

    def update_ring(self, tick: int, agent_id: int, rgba: RGBA) -> None:
        self._note_tick(tick)
        self._rings[(tick, agent_id)] = tuple(rgba)

    def update_agent(self, tick: int, agent_id: int, x: float, y: float, heading: float) -> None:
        self._note_tick(tick)
        self._poses[(tick, agent_id)] = (x, y, heading)

    @property
    def ticks(self) -> List[int]:
        return list(self._ticks)

    def to_frame(self) -> pd.DataFrame:
        nan = float("nan")
        rows = []
        for key in sorted(set(self._rings) | set(self._poses)):
            x, y, h = self._poses.get(key, (nan, nan, nan))
            r, g, b, a = self._rings.get(key, (nan, nan, nan, nan))
            rows.append((key[0], key[1], x, y, h, r, g, b, a))
        return pd.DataFrame(rows, columns=self.COLUMNS)

    def lit_per_tick(self) -> pd.Series:
        """Number of agents whose ring is visible (alpha > 0), per tick."""
        df = self.to_frame()
        if df.empty:
            return pd.Series(dtype="int64", name="lit")
        return (df["a"] > 0).groupby(df["tick"]).sum().astype("int64").rename("lit")
