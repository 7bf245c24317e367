# Copyright (c) 2025
# MIT License
# -----------------------------------------------------------------------------
# buffer.py
# -----------------------------------------------------------------------------
# Purpose:
#   Bounded waiting area shared by all sources, with a packet service
#   discipline for dequeue and a source-priority rejection policy.
#
# Design notes:
#   - Members are kept in arrival order; every selection is a linear scan,
#     which is fine for the small, bounded buffers this model uses.
#   - Lower source id = higher priority. Dequeue prefers the lowest id,
#     rejection evicts the highest id.
#   - The buffer does not enforce capacity on add(); the caller checks
#     is_full() and evicts first.
#
# Usage:
#   buf = Buffer(max_size=3)
#   nxt = buf.select_next(); buf.remove(nxt)
# -----------------------------------------------------------------------------

from __future__ import annotations
import logging
from typing import Iterator, List, Optional

from .entities import Request
from .queues import InvariantError

log = logging.getLogger(__name__)

class Buffer:
    """Finite buffer with packet dequeue and priority-based eviction.

    Parameters
    ----------
    max_size : int
        Capacity of the buffer.

    Attributes
    ----------
    current_serving_source : int | None
        Source whose "packet" is being drained, or None when no packet is
        in progress. Updated only by select_next().
    """
    def __init__(self, max_size: int):
        self.max_size = max_size
        self.queue: List[Request] = []
        self.current_serving_source: Optional[int] = None

    @property
    def size(self) -> int:
        return len(self.queue)

    def __len__(self):
        return len(self.queue)

    def __iter__(self) -> Iterator[Request]:
        return iter(self.queue)

    def __contains__(self, request) -> bool:
        return any(r is request for r in self.queue)

    def is_full(self) -> bool:
        return len(self.queue) >= self.max_size

    def is_empty(self) -> bool:
        return not self.queue

    def add(self, request: Request):
        self.queue.append(request)

    def select_next(self) -> Optional[Request]:
        """Pick the next request to serve without removing it.

        Keeps draining the current source's packet in arrival order; when
        that source has nothing left, switches to the lowest source id
        present (earliest arrival among its requests).
        """
        if not self.queue:
            self.current_serving_source = None
            return None

        if self.current_serving_source is not None:
            for req in self.queue:
                if req.source_id == self.current_serving_source:
                    return req

        # Strict comparison keeps the earliest arrival among equal ids
        best = None
        for req in self.queue:
            if best is None or req.source_id < best.source_id:
                best = req
        self.current_serving_source = best.source_id
        return best

    def select_victim(self) -> Optional[Request]:
        """Request to evict when full: highest source id, earliest arrival."""
        worst = None
        for req in self.queue:
            if worst is None or req.source_id > worst.source_id:
                worst = req
        return worst

    def remove(self, request: Request):
        for idx, req in enumerate(self.queue):
            if req is request:
                del self.queue[idx]
                return
        errmsg = f"request {request.label()} is not in the buffer"
        log.error(errmsg)
        raise InvariantError(errmsg)

    def occupancy_by_source(self) -> dict:
        counts: dict = {}
        for req in self.queue:
            counts[req.source_id] = counts.get(req.source_id, 0) + 1
        return counts
