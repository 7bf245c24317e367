"""
qnsim package initializer.

This package contains the event-driven simulation engine, primitives
(calendar, buffer, devices), arrival sources, routing handlers and metric
collection for a finite-buffer queueing network with packet service and
priority-based rejection.
"""
import logging

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "entities", "queues", "buffer", "stations", "network",
    "arrivals", "metrics", "config", "report", "simulation",
]
