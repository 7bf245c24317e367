from __future__ import annotations
import random

import pytest

from qnsim.buffer import Buffer
from qnsim.config import apply_overrides, load_cfg
from qnsim.arrivals import make_sources
from qnsim.metrics import Metrics
from qnsim.network import Network
from qnsim.queues import Env
from qnsim.stations import make_devices


@pytest.fixture
def baseline_cfg():
    return load_cfg()


@pytest.fixture
def make_cfg(baseline_cfg):
    """Baseline config with overrides merged on top."""
    def _make(overrides=None):
        return apply_overrides(baseline_cfg, overrides or {})
    return _make


@pytest.fixture
def two_source_cfg(make_cfg):
    # Two sources, one device, buffer of one: the eviction scenario
    return make_cfg({
        "sources": [
            {"min_interval": 100.0, "max_interval": 100.0},
            {"min_interval": 100.0, "max_interval": 100.0},
        ],
        "devices": [{"mean_service": 50.0}],
        "buffer": {"size": 1},
    })


@pytest.fixture
def wire():
    """Build an (env, router) pair without scheduling any arrivals."""
    def _wire(cfg, seed=0):
        rng = random.Random(seed)
        sources = make_sources(cfg, rng)
        devices = make_devices(cfg, rng)
        router = Network(sources, devices, Buffer(cfg["buffer"]["size"]),
                         Metrics(len(sources), len(devices)))
        return Env(router), router
    return _wire
