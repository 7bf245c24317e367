# Copyright (c) 2025
# MIT License
# -----------------------------------------------------------------------------
# config.py
# -----------------------------------------------------------------------------
# Purpose:
#   Load the baseline model parameters from YAML, merge overrides on top,
#   and reject structurally invalid parameter sets before a run starts.
#
# Usage:
#   cfg = apply_overrides(load_cfg(), {"buffer": {"size": 1}})
#   validate_cfg(cfg)
# -----------------------------------------------------------------------------

from __future__ import annotations
import copy, os
from typing import Dict, Optional
import yaml

BASELINE_PATH = os.path.join(os.path.dirname(__file__), "baseline.yaml")

def load_cfg(path: Optional[str] = None) -> Dict:
    with open(path or BASELINE_PATH, "r") as f:
        return yaml.safe_load(f)

def apply_overrides(cfg: Dict, overrides: Dict) -> Dict:
    """Apply overrides (recursive merge) on top of the base config."""
    new = copy.deepcopy(cfg)

    def _merge(dst: Dict, src: Dict):
        for key, val in src.items():
            if isinstance(val, dict) and isinstance(dst.get(key), dict):
                _merge(dst[key], val)
            else:
                dst[key] = copy.deepcopy(val)

    _merge(new, overrides)
    return new

def validate_cfg(cfg: Dict) -> Dict:
    """Raise ValueError on parameters the model cannot run with."""
    sources = cfg.get("sources") or []
    devices = cfg.get("devices") or []
    if not sources:
        raise ValueError("at least one source is required")
    if not devices:
        raise ValueError("at least one device is required")
    for i, src in enumerate(sources):
        lo, hi = float(src["min_interval"]), float(src["max_interval"])
        if lo <= 0 or hi < lo:
            raise ValueError(f"source {i}: need 0 < min_interval <= max_interval, got [{lo}, {hi}]")
    for i, dev in enumerate(devices):
        if float(dev["mean_service"]) <= 0:
            raise ValueError(f"device {i}: mean_service must be positive")
    size = int(cfg.get("buffer", {}).get("size", 0))
    if size < 1:
        raise ValueError(f"buffer size must be at least 1, got {size}")
    sim = cfg.get("sim", {})
    if float(sim.get("max_time", 0.0)) < 0 or int(sim.get("max_requests", 0)) < 0:
        raise ValueError("max_time and max_requests must be non-negative")
    return cfg
