# Copyright (c) 2025
# MIT License
# -----------------------------------------------------------------------------
# report.py
# -----------------------------------------------------------------------------
# Purpose:
#   Human-readable console output: the model banner printed before a run
#   and the results report built from a Metrics.summary() dict.
#
# Design notes:
#   - Pure string builders; printing is left to the caller.
#   - Sources and devices are shown 1-based (S1, D1) while ids stay 0-based.
#
# Usage:
#   print(format_banner(cfg)); print(format_report(summary))
# -----------------------------------------------------------------------------

from __future__ import annotations
from typing import Dict, List, Optional

DISCIPLINES = (
    "Infinite sources",
    "Uniform request distribution",
    "Exponential service time",
    "Buffering in arrival order",
    "Rejection by source priority",
    "Packet service",
    "Round-robin device selection",
)

def source_name(source_id: Optional[int]) -> str:
    return "none" if source_id is None else f"S{source_id + 1}"

def format_banner(cfg: Dict) -> str:
    sim = cfg.get("sim", {})
    lines: List[str] = ["=== SIMULATION MODEL ===", "DISCIPLINES:"]
    lines += [f"- {d}" for d in DISCIPLINES]
    lines.append(f"Parameters: {len(cfg['sources'])} sources, {len(cfg['devices'])} devices, "
                 f"buffer: {cfg['buffer']['size']}")
    lines.append(f"Max time: {float(sim.get('max_time', 1000.0)):g} units")
    lines.append(f"Max requests: {int(sim.get('max_requests', 1000))}")
    lines.append("-" * 40)
    return "\n".join(lines)

def format_report(summary: Dict) -> str:
    lines: List[str] = ["=== SIMULATION RESULTS ==="]
    lines.append(f"Total simulation time: {summary['elapsed_time']:.2f} units")
    lines.append(f"Requests generated: {summary['generated']}")
    lines.append(f"Requests served: {summary['served']}")
    lines.append(f"Requests rejected: {summary['rejected']}")
    if summary.get("stop_reason"):
        lines.append(f"Stopped by: {summary['stop_reason']}")

    lines.append("")
    lines.append("--- SOURCE CHARACTERISTICS ---")
    lines.append(f"{'Source':>10}{'Requests':>12}{'Rejected':>12}{'P_reject':>12}{'T_total':>12}{'T_wait':>12}")
    for row in summary["sources"]:
        lines.append(
            f"{source_name(row['source']):>10}"
            f"{row['requests']:>12d}"
            f"{row['rejected']:>12d}"
            f"{row['rejection_probability']:>12.3f}"
            f"{row['avg_total_time']:>12.2f}"
            f"{row['avg_waiting_time']:>12.2f}"
        )

    lines.append("")
    lines.append("--- DEVICE CHARACTERISTICS ---")
    lines.append(f"{'Device':>10}{'Utilization':>15}")
    for row in summary["devices"]:
        lines.append(f"{'D' + str(row['device'] + 1):>10}{row['utilization']:>15.3f}")

    lines.append("")
    lines.append("--- DISCIPLINE ANALYSIS ---")
    lines.append(f"Packet service: Current packet = {source_name(summary['current_serving_source'])}")
    lines.append(f"Rejections: Total rejected = {summary['rejected']}")
    lines.append(f"Buffer: Max size = {summary['buffer_capacity']}, Current size = {summary['buffer_size']}")
    if summary.get("seed") is not None:
        lines.append(f"Seed: {summary['seed']}")
    return "\n".join(lines)
