# Copyright (c) 2025
# MIT License
# -----------------------------------------------------------------------------
# arrivals.py
# -----------------------------------------------------------------------------
# Purpose:
#   Exogenous traffic: request sources with uniform inter-arrival times.
#
# Design notes:
#   - Sources are inexhaustible. Only the first arrival of each source is
#     scheduled here; every handled arrival schedules its own successor
#     (see Network.on_arrival).
#   - All sources draw from the run's single random stream, so the draw
#     order (and hence the run) is fixed by the seed.
#
# Usage:
#   sources = make_sources(cfg, rng)
#   schedule_first_arrivals(env, sources)
# -----------------------------------------------------------------------------

from __future__ import annotations
import random
from typing import List, Sequence
from .queues import Event, ARRIVAL

class Source:
    """Request source with inter-arrival time ~ U[min_interval, max_interval]."""
    def __init__(self, source_id: int, min_interval: float, max_interval: float, rng: random.Random):
        self.source_id = source_id
        self.min_interval = min_interval
        self.max_interval = max_interval
        self.rng = rng

    def next_interval(self) -> float:
        return self.rng.uniform(self.min_interval, self.max_interval)

    def __repr__(self):
        return f"Source(S{self.source_id + 1}, U[{self.min_interval}, {self.max_interval}])"


def make_sources(cfg: dict, rng: random.Random) -> List[Source]:
    return [
        Source(i, float(spec["min_interval"]), float(spec["max_interval"]), rng)
        for i, spec in enumerate(cfg["sources"])
    ]


def schedule_first_arrivals(env, sources: Sequence[Source]):
    # One draw per source, in source order, before the loop starts
    for src in sources:
        env.schedule(Event(env.t + src.next_interval(), ARRIVAL, src.source_id))
