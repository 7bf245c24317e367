# Copyright (c) 2025
# MIT License
# -----------------------------------------------------------------------------
# queues.py
# -----------------------------------------------------------------------------
# Purpose:
#   Minimal discrete-event primitives: Event, Calendar (the future event
#   list) and Env, which owns the virtual clock and drives the event loop.
#
# Design notes:
#   - The calendar is a binary heap keyed on (time, push sequence); events
#     scheduled for the same instant pop in the order they were pushed.
#   - Event handling is delegated to env.router (qnsim.network.Network).
#
# Usage:
#   from qnsim.queues import Env, Event, Calendar, ARRIVAL, DEPARTURE
# -----------------------------------------------------------------------------

from __future__ import annotations
import heapq, itertools, logging
from typing import List, Optional

from .entities import Request

log = logging.getLogger(__name__)

ARRIVAL = "arrival"
DEPARTURE = "departure"

# Loop termination reasons returned by Env.run_until
DRAINED = "drained"
TIME_LIMIT = "time_limit"
SERVED_LIMIT = "served_limit"


class InvariantError(RuntimeError):
    """Internal-logic violation; the run state can no longer be trusted."""


class Event:
    """Entry of the future event list.

    entity_id is the source id for arrivals and the device id for
    departures; departures also carry the request being completed.
    """
    __slots__ = ("t", "kind", "entity_id", "request", "seq")
    def __init__(self, t: float, kind: str, entity_id: int, request: Optional[Request] = None):
        self.t = t; self.kind = kind; self.entity_id = entity_id; self.request = request
        self.seq = -1   # assigned by Calendar.push
    def __lt__(self, other: "Event"):
        return (self.t, self.seq) < (other.t, other.seq)
    def __repr__(self):
        return f"Event(t={self.t:.4f}, kind={self.kind}, entity_id={self.entity_id})"


class Calendar:
    """Min-time priority queue of pending events."""
    def __init__(self):
        self._heap: List[Event] = []
        self._counter = itertools.count()

    def push(self, ev: Event):
        ev.seq = next(self._counter)
        heapq.heappush(self._heap, ev)

    def pop_min(self) -> Event:
        if not self._heap:
            errmsg = "pop from an empty event calendar"
            log.error(errmsg)
            raise InvariantError(errmsg)
        return heapq.heappop(self._heap)

    def peek(self) -> Optional[Event]:
        return self._heap[0] if self._heap else None

    def is_empty(self) -> bool:
        return not self._heap

    def __len__(self):
        return len(self._heap)


class Env:
    """Simulation environment holding the clock, calendar and a router hook.

    Attributes
    ----------
    t : float
        Virtual clock, advanced only when an event is popped.
    FEL : Calendar
        Future event list.
    router : object
        Object with on_arrival(env, source_id) and
        on_departure(env, device_id, request), plus a `served` count.
    """
    def __init__(self, router):
        self.t: float = 0.0
        self.FEL = Calendar()
        self.router = router
        self.events_processed = 0

    def schedule(self, ev: Event):
        if ev.t < self.t:
            errmsg = f"event {ev!r} scheduled in the past (now={self.t:.4f})"
            log.error(errmsg)
            raise InvariantError(errmsg)
        self.FEL.push(ev)

    def step(self):
        """Pop the earliest event, advance the clock and dispatch it."""
        ev = self.FEL.pop_min()
        self.t = ev.t
        self.events_processed += 1
        if ev.kind == ARRIVAL:
            self.router.on_arrival(self, ev.entity_id)
        elif ev.kind == DEPARTURE:
            self.router.on_departure(self, ev.entity_id, ev.request)
        else:
            errmsg = f"unknown event kind {ev.kind!r}"
            log.error(errmsg)
            raise InvariantError(errmsg)

    def stop_reason(self, T_end: float, max_served: int) -> Optional[str]:
        if self.FEL.is_empty():
            return DRAINED
        if self.t >= T_end:
            return TIME_LIMIT
        if self.router.served >= max_served:
            return SERVED_LIMIT
        return None

    def run_until(self, T_end: float, max_served: int) -> str:
        reason = self.stop_reason(T_end, max_served)
        while reason is None:
            self.step()
            reason = self.stop_reason(T_end, max_served)
        log.info("run stopped at t=%.4f after %d events: %s",
                 self.t, self.events_processed, reason)
        return reason
