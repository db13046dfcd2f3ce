"""Angle wrapping and conversions between Cartesian and polar track states."""

from __future__ import annotations

import math

import numpy as np

_MIN_RANGE = 1e-6


def normalize_angle(phi: float) -> float:
    """Wrap an angle once by 2*pi towards the interval [-pi, pi]."""
    if phi > math.pi:
        phi -= 2 * math.pi
    elif phi < -math.pi:
        phi += 2 * math.pi
    return phi


def cartesian_to_polar(x) -> np.ndarray:
    """Map a state (px, py, vx, vy) to a measurement (rho, phi, rho_dot).

    The range is clamped to a small positive value so that the radial
    velocity stays finite at the origin.
    """
    px, py, vx, vy = (float(v) for v in np.asarray(x, dtype=float)[:4])
    rho = math.hypot(px, py)
    phi = math.atan2(py, px)
    rho = max(rho, _MIN_RANGE)
    rho_dot = (px * vx + py * vy) / rho
    return np.array([rho, phi, rho_dot])


def polar_to_cartesian(x) -> np.ndarray:
    """Map (rho, phi, rho_dot) to (px, py, vx, vy) along the bearing phi."""
    rho, phi, rho_dot = (float(v) for v in np.asarray(x, dtype=float)[:3])
    c = math.cos(phi)
    s = math.sin(phi)
    return np.array([rho * c, rho * s, rho_dot * c, rho_dot * s])