"""Configuration package for the viewer.

Display constants live in ``core.config.display``; connection settings and
their environment overrides live in ``core.config.client``.
"""
