"""
experiments/run_experiments.py

Run harness: loads the baseline config, runs one simulation with it, and
prints the model banner followed by the results report.

    python -m experiments.run_experiments
"""

from __future__ import annotations
import logging, sys
from typing import Dict, Optional

from qnsim.config import load_cfg
from qnsim.report import format_banner, format_report
from qnsim.simulation import run_once

log = logging.getLogger(__name__)

def run_baseline(cfg: Optional[Dict] = None) -> Dict:
    """Run the baseline model once and return its summary."""
    cfg = cfg if cfg is not None else load_cfg()
    print(format_banner(cfg))
    res = run_once(cfg)
    print()
    print(format_report(res))
    return res

def main() -> int:
    """Entry point: one run with the baseline parameters."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    res = run_baseline()
    log.info("served %d of %d generated, %d rejected",
             res["served"], res["generated"], res["rejected"])
    return 0

if __name__ == "__main__":
    sys.exit(main())
