"""Loading of sensor measurements and filter configuration."""

from __future__ import annotations

import enum
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

import numpy as np
import yaml

from kalmantrack.geometry import normalize_angle

log = logging.getLogger(__name__)


class ConfigError(ValueError):
    """Raised when a configuration file is missing or malformed data."""


class SensorType(enum.Enum):
    LIDAR = 0
    RADAR = 1


_SENSOR_CODES = {"L": SensorType.LIDAR, "R": SensorType.RADAR}
_STATE_SIZES = {SensorType.LIDAR: 2, SensorType.RADAR: 3}


@dataclass
class MeasurementPack:
    """One sensor reading with its timestamp (microseconds) and ground truth."""

    t: int
    sensor_type: SensorType
    state: np.ndarray
    gt: np.ndarray


@dataclass
class Config:
    F: np.ndarray
    P: np.ndarray
    H: np.ndarray
    Q: np.ndarray
    R_lidar: np.ndarray
    R_radar: np.ndarray
    U: np.ndarray
    noise_ax: float
    noise_ay: float
    use_control: bool = False


def parse_measurement(line: str) -> MeasurementPack:
    """Parse one line: sensor code, readings, timestamp, four ground-truth values.

    Lidar lines carry ``x y``; radar lines carry ``rho phi rho_dot`` and the
    bearing is wrapped towards [-pi, pi].
    """
    fields = line.split()
    if not fields:
        raise ValueError("empty measurement line")
    code, *rest = fields
    try:
        sensor_type = _SENSOR_CODES[code]
    except KeyError:
        raise ValueError(f"unknown sensor type: {code!r}") from None
    size = _STATE_SIZES[sensor_type]
    if len(rest) < size + 5:
        raise ValueError(f"too few fields in measurement line: {line.strip()!r}")
    state = np.array([float(v) for v in rest[:size]])
    if sensor_type is SensorType.RADAR:
        state[1] = normalize_angle(state[1])
    timestamp = int(rest[size])
    gt = np.array([float(v) for v in rest[size + 1 : size + 5]])
    return MeasurementPack(t=timestamp, sensor_type=sensor_type, state=state, gt=gt)


def load_data(file_path) -> list[MeasurementPack]:
    """Read every measurement line of a file, skipping blank lines."""
    packs = []
    with open(file_path, encoding="utf-8") as handle:
        for number, line in enumerate(handle, start=1):
            if not line.strip():
                continue
            try:
                packs.append(parse_measurement(line))
            except ValueError as exc:
                raise ValueError(f"{file_path}:{number}: {exc}") from exc
    return packs


def read_matrix(node, name: str) -> np.ndarray:
    """Build a matrix from a mapping entry holding ``shape`` and row-major ``data``."""
    entry = node.get(name) if isinstance(node, Mapping) else None
    if not isinstance(entry, Mapping):
        raise ConfigError(f"Missing or invalid matrix node: {name}")
    shape = entry.get("shape")
    data = entry.get("data")
    if not isinstance(shape, list) or len(shape) != 2:
        raise ConfigError(f"Invalid shape for matrix: {name}")
    if not isinstance(data, list):
        raise ConfigError(f"Missing or invalid data for matrix: {name}")
    try:
        rows, cols = (int(v) for v in shape)
        values = [float(v) for v in data]
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Non-numeric entry in matrix: {name}") from exc
    if rows < 0 or cols < 0 or len(values) != rows * cols:
        raise ConfigError(f"Shape does not match data size for matrix: {name}")
    return np.array(values).reshape(rows, cols)


def _read_scalar(node: Mapping, name: str) -> float:
    try:
        return float(node[name])
    except KeyError:
        raise ConfigError(f"Missing value: {name}") from None
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid value: {name}") from exc


def load_config(file_path) -> Config:
    """Load filter matrices and noise levels from a YAML file."""
    node = yaml.safe_load(Path(file_path).read_text(encoding="utf-8"))
    if not isinstance(node, Mapping):
        raise ConfigError(f"Configuration is not a mapping: {file_path}")
    u = read_matrix(node, "U")
    if u.shape[1] != 1:
        raise ConfigError("Control input U must have a single column")
    cfg = Config(
        F=read_matrix(node, "F"),
        P=read_matrix(node, "P"),
        H=read_matrix(node, "H"),
        Q=read_matrix(node, "Q"),
        R_lidar=read_matrix(node, "R_lidar"),
        R_radar=read_matrix(node, "R_radar"),
        U=u.reshape(-1),
        noise_ax=_read_scalar(node, "noise_ax"),
        noise_ay=_read_scalar(node, "noise_ay"),
    )
    log.debug(
        "config F=%s H=%s R_lidar=%s R_radar=%s noise_ax=%s noise_ay=%s",
        cfg.F, cfg.H, cfg.R_lidar, cfg.R_radar, cfg.noise_ax, cfg.noise_ay,
    )
    return cfg