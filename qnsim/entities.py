# Copyright (c) 2025
# MIT License
# -----------------------------------------------------------------------------
# entities.py
# -----------------------------------------------------------------------------
# Purpose:
#   Entity definitions for the buffered queueing network: Request.
#   A Request carries its identity and lifecycle timestamps from arrival,
#   through the buffer and a device, to departure or rejection.
#
# Design notes:
#   - Requests compare by identity (eq=False): two requests with the same
#     fields are still different entities for buffer removal.
#   - At any instant a Request is held by exactly one of: a calendar Event,
#     the Buffer, or a Device slot.
#
# Usage:
#   from qnsim.entities import Request
# -----------------------------------------------------------------------------

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

@dataclass(eq=False)
class Request:
    source_id: int
    seq: int                                     # 1-based, per source
    arrival_time: float
    start_service_time: Optional[float] = None   # set when a device picks it up
    finish_service_time: Optional[float] = None  # set on departure

    @property
    def waiting_time(self) -> Optional[float]:
        """Time spent in the buffer before service started."""
        if self.start_service_time is None:
            return None
        return self.start_service_time - self.arrival_time

    @property
    def total_time(self) -> Optional[float]:
        """Sojourn time: arrival to departure."""
        if self.finish_service_time is None:
            return None
        return self.finish_service_time - self.arrival_time

    @property
    def service_time(self) -> Optional[float]:
        if self.start_service_time is None or self.finish_service_time is None:
            return None
        return self.finish_service_time - self.start_service_time

    def label(self) -> str:
        # S1.4 = fourth request of the first source
        return f"S{self.source_id + 1}.{self.seq}"
