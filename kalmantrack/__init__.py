"""Lidar and radar fusion with linear and extended Kalman filters."""

__version__ = "0.1.0"

__all__ = ["__version__"]