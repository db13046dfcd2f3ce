"""Sensor-fusion tracking run: lidar through a KF, radar through an EKF."""

from __future__ import annotations

import argparse
import logging
import math
import sys
from collections.abc import Iterable, Iterator

import numpy as np

from kalmantrack.data import (
    Config,
    ConfigError,
    MeasurementPack,
    SensorType,
    load_config,
    load_data,
)
from kalmantrack.filters import EKF, KF
from kalmantrack.geometry import polar_to_cartesian

log = logging.getLogger(__name__)

DEFAULT_DATA = "../data/sample-laser-radar-measurement-data-1.txt"
DEFAULT_CONFIG = "../config/cfg.yaml"
DEFAULT_OUTPUT = "../data/output.txt"

_MIN_RANGE_SQ = 1e-12
_MICROSECONDS = 1_000_000.0


def to_cartesian(x) -> np.ndarray:
    """Return a Cartesian state, converting a polar (rho, phi, rho_dot) one."""
    x = np.asarray(x, dtype=float)
    return polar_to_cartesian(x) if x.size == 3 else x


def format_state(x, gt, t: int) -> str:
    """Format a timestamp, an estimated state and its ground truth as one line."""
    x = np.asarray(x, dtype=float).reshape(-1)
    if x.size != 4:
        raise ValueError("Input vector must have exactly 4 elements.")
    gt = np.asarray(gt, dtype=float).reshape(-1)
    values = " ".join(f"{v:g}" for v in x)
    truth = " ".join(f"{v:g}" for v in gt)
    return f"{t} {values} {truth}"


def calculate_jacobian(x) -> np.ndarray:
    """Jacobian of the polar measurement function at a Cartesian or polar state."""
    x = np.asarray(x, dtype=float).reshape(-1)
    if x.size not in (3, 4):
        raise ValueError("Input vector must have exactly 3 or 4 elements.")
    px, py, vx, vy = (float(v) for v in to_cartesian(x))
    c1 = max(px * px + py * py, _MIN_RANGE_SQ)
    c2 = math.sqrt(c1)
    c3 = c1 * c2
    return np.array(
        [
            [px / c2, py / c2, 0.0, 0.0],
            [-py / c1, px / c1, 0.0, 0.0],
            [
                py * (py * vx - px * vy) / c3,
                px * (px * vy - py * vx) / c3,
                px / c2,
                py / c2,
            ],
        ]
    )


def transition_matrix(base, dt: float) -> np.ndarray:
    """Copy ``base`` with the position-velocity couplings set to ``dt``."""
    f = np.array(base, dtype=float, copy=True)
    f[0, 2] = dt
    f[1, 3] = dt
    return f


def process_noise(dt: float, noise_ax: float, noise_ay: float) -> np.ndarray:
    """Process noise of a constant-velocity model driven by random acceleration."""
    dt2 = dt * dt
    dt3 = dt2 * dt
    dt4 = dt3 * dt
    return np.array(
        [
            [0.25 * dt4 * noise_ax, 0.0, 0.5 * dt3 * noise_ax, 0.0],
            [0.0, 0.25 * dt4 * noise_ay, 0.0, 0.5 * dt3 * noise_ay],
            [0.5 * dt3 * noise_ax, 0.0, dt2 * noise_ax, 0.0],
            [0.0, 0.5 * dt3 * noise_ay, 0.0, dt2 * noise_ay],
        ]
    )


def run(
    measurements: Iterable[MeasurementPack], cfg: Config
) -> Iterator[tuple[int, np.ndarray, np.ndarray]]:
    """Filter the measurements in order, yielding ``(t, state, ground_truth)``.

    The first measurement initialises the track; every later one is
    predicted forward and fused through the filter that matches its sensor.
    """
    kf = KF(4, 4, False)
    kf.H = np.asarray(cfg.H, dtype=float)
    kf.P = np.asarray(cfg.P, dtype=float)
    kf.Q = np.asarray(cfg.Q, dtype=float)
    kf.R = np.asarray(cfg.R_lidar, dtype=float)

    ekf = EKF(4, 3, False)

    last_state: np.ndarray | None = None
    last_time = 0

    for pack in measurements:
        if last_state is None:
            if pack.sensor_type is SensorType.LIDAR:
                last_state = np.array([pack.state[0], pack.state[1], 0.0, 0.0])
                kf.x = last_state
            else:
                last_state = to_cartesian(pack.state)
                ekf.x = last_state
            last_time = pack.t
            yield pack.t, last_state, pack.gt
            continue

        dt = (pack.t - last_time) / _MICROSECONDS
        f = transition_matrix(cfg.F, dt)
        q = process_noise(dt, cfg.noise_ax, cfg.noise_ay)
        x = to_cartesian(last_state)

        if pack.sensor_type is SensorType.LIDAR:
            kf.F = f
            kf.Q = q
            kf.R = np.asarray(cfg.R_lidar, dtype=float)
            kf.x = x
            kf.predict(cfg.U)
            kf.update(pack.state)
            last_state = kf.x
        else:
            ekf.F = f
            ekf.H = calculate_jacobian(x)
            ekf.Q = q
            ekf.R = np.asarray(cfg.R_radar, dtype=float)
            ekf.x = x
            ekf.predict(cfg.U)
            ekf.update(pack.state)
            last_state = to_cartesian(ekf.x)

        last_time = pack.t
        yield pack.t, last_state, pack.gt


def main(argv=None) -> int:
    """Run the tracker over a measurement file and write the estimates."""
    parser = argparse.ArgumentParser(
        description="Fuse lidar and radar measurements with Kalman filters."
    )
    parser.add_argument("--data", default=DEFAULT_DATA, help="measurement file")
    parser.add_argument("--config", default=DEFAULT_CONFIG, help="YAML configuration")
    parser.add_argument("--output", default=DEFAULT_OUTPUT, help="output file")
    args = parser.parse_args(argv)

    try:
        out = open(args.output, "w", encoding="utf-8")
    except OSError:
        print("Failed to open output file!", file=sys.stderr)
        return 1

    with out:
        try:
            measurements = load_data(args.data)
        except OSError:
            print(f"Cannot open file: {args.data}", file=sys.stderr)
            return 1
        if not measurements:
            return 1
        try:
            cfg = load_config(args.config)
        except (OSError, ConfigError) as exc:
            print(f"Cannot load configuration: {exc}", file=sys.stderr)
            return 1
        for t, state, gt in run(measurements, cfg):
            out.write(format_state(state, gt, t) + "\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())