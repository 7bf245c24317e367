# Copyright (c) 2025
# MIT License
# -----------------------------------------------------------------------------
# network.py
# -----------------------------------------------------------------------------
# Purpose:
#   Router for the buffered network. Handles arrivals (device, buffer or
#   eviction) and departures (statistics, then refill a device from the
#   buffer), and owns all mutable state of one run.
#
# Design notes:
#   - Requests move between calendar events, the buffer and device slots;
#     each handler hands a request over to exactly one new holder.
#   - A full buffer never refuses the newcomer: the lowest-priority waiting
#     request is evicted and the arriving one takes its place.
#
# Usage:
#   router = Network(sources, devices, buffer, metrics)
#   env = Env(router)
# -----------------------------------------------------------------------------

from __future__ import annotations
import logging
from typing import List, Sequence

from .arrivals import Source
from .buffer import Buffer
from .entities import Request
from .metrics import Metrics
from .queues import Event, InvariantError, ARRIVAL, DEPARTURE
from .stations import Device, DeviceSelector

log = logging.getLogger(__name__)

class Network:
    def __init__(self, sources: Sequence[Source], devices: Sequence[Device], buffer: Buffer, metrics: Metrics):
        self.sources: List[Source] = list(sources)
        self.devices: List[Device] = list(devices)
        self.selector = DeviceSelector(len(self.devices))
        self.buffer = buffer
        self.M = metrics

    @property
    def served(self) -> int:
        return self.M.served

    def in_service(self) -> int:
        return sum(1 for d in self.devices if not d.is_free())

    def in_flight(self) -> int:
        """Requests generated but neither served nor rejected yet."""
        return len(self.buffer) + self.in_service()

    def _dispatch(self, env, device: Device, request: Request):
        st = device.service_time()
        device.start_service(request, env.t)
        env.schedule(Event(env.t + st, DEPARTURE, device.device_id, request))

    # Incoming request from a source
    def on_arrival(self, env, source_id: int):
        seq = self.M.note_arrival(source_id)
        request = Request(source_id, seq, arrival_time=env.t)

        src = self.sources[source_id]
        env.schedule(Event(env.t + src.next_interval(), ARRIVAL, source_id))

        device = self.selector.get_free_device(self.devices)
        if device is not None:
            self._dispatch(env, device, request)
            return

        if self.buffer.is_full():
            victim = self.buffer.select_victim()
            if victim is not None:
                self.buffer.remove(victim)
                self.M.note_rejection(victim)
                log.debug("t=%.4f: %s evicted by %s", env.t, victim.label(), request.label())
        self.buffer.add(request)

    # Service completion at a device
    def on_departure(self, env, device_id: int, request: Request):
        device = self.devices[device_id]
        finished = device.finish_service()
        if finished is not request:
            errmsg = (f"departure of {request.label()} from D{device_id + 1} "
                      f"but the device held {finished.label() if finished else 'nothing'}")
            log.error(errmsg)
            raise InvariantError(errmsg)
        finished.finish_service_time = env.t
        self.M.note_departure(device_id, finished)

        if self.buffer.is_empty():
            return
        device = self.selector.get_free_device(self.devices)
        if device is None:
            # Leave the buffer untouched; the next departure will pick it up
            log.warning("t=%.4f: no free device after departure from D%d, %d request(s) stay buffered",
                        env.t, device_id + 1, len(self.buffer))
            return
        nxt = self.buffer.select_next()
        self.buffer.remove(nxt)
        self._dispatch(env, device, nxt)
