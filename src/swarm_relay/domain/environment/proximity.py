from __future__ import annotations
from typing import Dict, Iterable, List, Optional, Tuple
import math

# (agent_id, x, y)
PositionRow = Tuple[int, float, float]


class ProximityIndex:
    """Radius queries over a frozen set of agent positions.

    Built once per tick from a snapshot taken before anything moves, so every
    query in that tick sees the same positions no matter what gets mutated
    in between. With ``cell_size`` set, positions are bucketed on a uniform
    grid and only neighbouring cells are scanned; otherwise queries are a
    plain scan. Both give identical answers.
    """
    def __init__(self, rows: Iterable[PositionRow], cell_size: Optional[float] = None):
        self._rows: List[PositionRow] = sorted((int(i), float(x), float(y)) for i, x, y in rows)
        self._pos: Dict[int, Tuple[float, float]] = {i: (x, y) for i, x, y in self._rows}
        if cell_size is not None and not cell_size > 0:
            raise ValueError(f"cell_size must be > 0, got {cell_size!r}")
        self.cell_size = float(cell_size) if cell_size is not None else None
        self._cells: Dict[Tuple[int, int], List[PositionRow]] = {}
        if self.cell_size:
            for row in self._rows:
                self._cells.setdefault(self._cell(row[1], row[2]), []).append(row)

    def __len__(self) -> int:
        return len(self._rows)

    def __contains__(self, agent_id: int) -> bool:
        return agent_id in self._pos

    def position(self, agent_id: int) -> Tuple[float, float]:
        return self._pos[agent_id]

    def _cell(self, x: float, y: float) -> Tuple[int, int]:
        cs = self.cell_size
        return (math.floor(x / cs), math.floor(y / cs))

    def _candidates(self, x: float, y: float, radius_sq: float) -> Iterable[PositionRow]:
        if not self.cell_size:
            return self._rows
        reach = int(math.ceil(math.sqrt(max(0.0, radius_sq)) / self.cell_size))
        cx, cy = self._cell(x, y)
        out: List[PositionRow] = []
        for gx in range(cx - reach, cx + reach + 1):
            for gy in range(cy - reach, cy + reach + 1):
                out.extend(self._cells.get((gx, gy), ()))
        out.sort()
        return out

    def within(self, x: float, y: float, radius_sq: float, exclude: Optional[int] = None) -> List[int]:
        """Ids of agents with squared distance <= radius_sq from (x, y), ascending."""
        hits: List[int] = []
        for i, px, py in self._candidates(x, y, radius_sq):
            if i == exclude:
                continue
            dx = px - x; dy = py - y
            if dx*dx + dy*dy <= radius_sq:
                hits.append(i)
        return hits

    def neighbours(self, agent_id: int, radius_sq: float) -> List[int]:
        x, y = self._pos[agent_id]
        return self.within(x, y, radius_sq, exclude=agent_id)
