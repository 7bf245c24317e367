# Copyright (c) 2025
# MIT License
# -----------------------------------------------------------------------------
# stations.py
# -----------------------------------------------------------------------------
# Purpose:
#   Service devices and the round-robin selector that hands out free ones.
#
# Design notes:
#   - A device holds at most one request and never queues; waiting happens
#     only in the shared Buffer.
#   - Service times are exponential with the device's configured mean,
#     drawn from the run's shared random stream.
#   - The selector's cursor moves only when a free device is found, so a
#     failed scan leaves the rotation untouched.
#
# Usage:
#   from qnsim.stations import make_devices, DeviceSelector
# -----------------------------------------------------------------------------

from __future__ import annotations
import logging, random
from typing import List, Optional, Sequence

from .entities import Request
from .queues import InvariantError

log = logging.getLogger(__name__)

class Device:
    """Single service slot.

    Parameters
    ----------
    device_id : int
        Index of the device in the pool.
    mean_service : float
        Mean of the exponential service-time distribution.
    rng : random.Random
        Shared random stream of the run.
    """
    def __init__(self, device_id: int, mean_service: float, rng: random.Random):
        self.device_id = device_id
        self.mean_service = mean_service
        self.rng = rng
        self.current: Optional[Request] = None

    def service_time(self) -> float:
        return self.rng.expovariate(1.0 / self.mean_service)

    def is_free(self) -> bool:
        return self.current is None

    def start_service(self, request: Request, now: float):
        if self.current is not None:
            errmsg = (f"device D{self.device_id + 1} is busy with {self.current.label()}, "
                      f"cannot start {request.label()}")
            log.error(errmsg)
            raise InvariantError(errmsg)
        self.current = request
        request.start_service_time = now

    def finish_service(self) -> Optional[Request]:
        finished = self.current
        self.current = None
        return finished

    def __repr__(self):
        state = self.current.label() if self.current else "free"
        return f"Device(D{self.device_id + 1}, mean={self.mean_service}, {state})"


class DeviceSelector:
    """Round-robin choice among free devices."""
    def __init__(self, num_devices: int):
        self.num_devices = num_devices
        self.last_used = -1

    def get_free_device(self, devices: Sequence[Device]) -> Optional[Device]:
        if not devices:
            return None
        start = (self.last_used + 1) % self.num_devices
        for i in range(self.num_devices):
            idx = (start + i) % self.num_devices
            if devices[idx].is_free():
                self.last_used = idx
                return devices[idx]
        return None


def make_devices(cfg: dict, rng: random.Random) -> List[Device]:
    """
    Create the device pool from config.

    Parameters
    ----------
    cfg : dict
        Parsed YAML config with a 'devices' list of {mean_service: float}.
    rng : random.Random
        Shared random stream.

    Returns
    -------
    list[Device]
        Devices indexed by id.
    """
    return [
        Device(i, float(spec["mean_service"]), rng)
        for i, spec in enumerate(cfg["devices"])
    ]
