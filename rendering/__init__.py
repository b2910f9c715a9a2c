"""Pygame rendering of simulation snapshots and the status panel."""
