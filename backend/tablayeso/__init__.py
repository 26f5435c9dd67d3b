"""Tablayeso materials estimator: drywall wall, ceiling and trim quantity takeoff."""

__version__ = "2.0.0"
