"""Signal relay subsystem.

Agents that touch a beacon, or hear a fresher counter from a neighbour,
rebroadcast what they know; the relay engine runs that protocol once per tick.
"""
from __future__ import annotations

from .events import BroadcastEvent, RelayRecord
from .relay import RelayEngine, TickReport

__all__ = ["BroadcastEvent", "RelayRecord", "RelayEngine", "TickReport"]
