"""Run harness for the qnsim baseline model."""
