# Copyright (c) 2025
# MIT License
# -----------------------------------------------------------------------------
# metrics.py
# -----------------------------------------------------------------------------
# Purpose:
#   Aggregate counters for the run: per-source generated/rejected/served
#   counts and time sums, per-device busy time, and global totals.
#
# Design notes:
#   - Side-effect methods (note_*) are called only from the Network's
#     arrival/departure handlers.
#   - summary() never mutates state and returns a JSON-serialisable dict,
#     so reporting twice in a row gives identical output.
#
# Usage:
#   M = Metrics(num_sources, num_devices); M.summary(now, buffer)
# -----------------------------------------------------------------------------

from __future__ import annotations
from typing import Any, Dict, List, Optional

from .entities import Request

class Metrics:
    def __init__(self, num_sources: int, num_devices: int):
        self.num_sources = num_sources
        self.num_devices = num_devices
        self.generated = 0
        self.served = 0
        self.rejected = 0
        self.source_generated: List[int] = [0] * num_sources
        self.source_rejected: List[int] = [0] * num_sources
        self.source_served: List[int] = [0] * num_sources
        self.source_total_time: List[float] = [0.0] * num_sources     # finish - arrival
        self.source_waiting_time: List[float] = [0.0] * num_sources   # start - arrival
        self.device_busy_time: List[float] = [0.0] * num_devices
        self.device_served: List[int] = [0] * num_devices

    def note_arrival(self, source_id: int) -> int:
        """Count a generated request and return its per-source sequence number."""
        self.generated += 1
        self.source_generated[source_id] += 1
        return self.source_generated[source_id]

    def note_rejection(self, request: Request):
        self.rejected += 1
        self.source_rejected[request.source_id] += 1

    def note_departure(self, device_id: int, request: Request):
        self.served += 1
        sid = request.source_id
        self.source_served[sid] += 1
        self.source_total_time[sid] += request.total_time
        self.source_waiting_time[sid] += request.waiting_time
        self.device_busy_time[device_id] += request.service_time
        self.device_served[device_id] += 1

    @staticmethod
    def _ratio(num: float, den: float) -> float:
        return num / den if den > 0 else 0.0

    def summary(self, now: float, buffer, in_service: int = 0,
                stop_reason: Optional[str] = None, seed: Optional[int] = None) -> Dict[str, Any]:
        sources = []
        for i in range(self.num_sources):
            served = self.source_served[i]
            sources.append({
                "source": i,
                "requests": self.source_generated[i],
                "rejected": self.source_rejected[i],
                "served": served,
                "rejection_probability": self._ratio(self.source_rejected[i], self.source_generated[i]),
                "avg_total_time": self._ratio(self.source_total_time[i], served),
                "avg_waiting_time": self._ratio(self.source_waiting_time[i], served),
            })
        devices = []
        for j in range(self.num_devices):
            devices.append({
                "device": j,
                "served": self.device_served[j],
                "busy_time": self.device_busy_time[j],
                "utilization": self._ratio(self.device_busy_time[j], now),
            })
        return {
            "elapsed_time": now,
            "generated": self.generated,
            "served": self.served,
            "rejected": self.rejected,
            "in_service": in_service,
            "sources": sources,
            "devices": devices,
            "current_serving_source": buffer.current_serving_source,
            "buffer_size": len(buffer),
            "buffer_capacity": buffer.max_size,
            "buffer_by_source": dict(sorted(buffer.occupancy_by_source().items())),
            "stop_reason": stop_reason,
            "seed": seed,
        }
