# kalmantrack

Track an object moving in a plane by fusing two kinds of sensor readings:

* **lidar** readings, which give a position `(x, y)` and are handled by a
  linear Kalman filter (`KF`);
* **radar** readings, which give range, bearing and range rate
  `(rho, phi, rho_dot)` and are handled by an extended Kalman filter (`EKF`)
  linearised with the Jacobian of the polar measurement model.

The state is `(px, py, vx, vy)` under a constant-velocity motion model. The
process noise is built from the elapsed time between readings and the
configured acceleration noise `noise_ax` / `noise_ay`.

## Installation

```
pip install .
```

To run the test suite as well:

```
pip install ".[test]"
pytest
```

## Command line

```
kalmantrack [--data FILE] [--config FILE] [--output FILE]
```

| Option     | Default                                              |
|------------|------------------------------------------------------|
| `--data`   | `../data/sample-laser-radar-measurement-data-1.txt`  |
| `--config` | `../config/cfg.yaml`                                 |
| `--output` | `../data/output.txt`                                 |

The command reads the measurement file and the YAML configuration, runs every
reading through the filters in order, and writes one line per reading to the
output file:

```
<timestamp> <px> <py> <vx> <vy> <gt_px> <gt_py> <gt_vx> <gt_vy>
```

The first reading starts the track (a lidar reading with zero velocity, a
radar reading converted to Cartesian form); every later reading is a predict
step over the elapsed time followed by an update with that reading.

The command exits with status 1, with a message on standard error, when the
output file cannot be opened, the measurement file cannot be read, or the
configuration cannot be loaded. It also exits with status 1 when the
measurement file holds no readings.

## Measurement file

Whitespace-separated, one reading per line. Timestamps are in microseconds.
Blank lines are skipped.

```
L  <x> <y> <timestamp> <gt_px> <gt_py> <gt_vx> <gt_vy>
R  <rho> <phi> <rho_dot> <timestamp> <gt_px> <gt_py> <gt_vx> <gt_vy>
```

Radar bearings are wrapped once by 2π towards `[-pi, pi]` on load. A line with
an unknown sensor code or too few fields raises `ValueError`, naming the file
and line number.

## Configuration file

Matrices are given by a shape and a row-major list of values. A minimal
configuration:

```yaml
F:
  shape: [4, 4]
  data: [1, 0, 1, 0,
         0, 1, 0, 1,
         0, 0, 1, 0,
         0, 0, 0, 1]
P:
  shape: [4, 4]
  data: [1, 0, 0, 0,
         0, 1, 0, 0,
         0, 0, 1000, 0,
         0, 0, 0, 1000]
H:
  shape: [2, 4]
  data: [1, 0, 0, 0,
         0, 1, 0, 0]
Q:
  shape: [4, 4]
  data: [0, 0, 0, 0,
         0, 0, 0, 0,
         0, 0, 0, 0,
         0, 0, 0, 0]
U:
  shape: [4, 1]
  data: [0, 0, 0, 0]
R_lidar:
  shape: [2, 2]
  data: [0.0225, 0,
         0, 0.0225]
R_radar:
  shape: [3, 3]
  data: [0.09, 0, 0,
         0, 0.0009, 0,
         0, 0, 0.09]
noise_ax: 9
noise_ay: 9
```

The `F` entries that couple position to velocity are replaced by the elapsed
time at every step. A missing matrix, a `shape` that is not two numbers, a
`data` length that does not match the `shape`, a non-numeric entry, a `U`
with more than one column, or a missing or invalid `noise_ax` / `noise_ay`
raises `kalmantrack.data.ConfigError` (a subclass of `ValueError`).

## Library use

```python
from kalmantrack.data import load_config, load_data
from kalmantrack.app import format_state, run

cfg = load_config("cfg.yaml")
measurements = load_data("measurements.txt")
for t, state, ground_truth in run(measurements, cfg):
    print(format_state(state, ground_truth, t))
```

`run` is a generator yielding `(timestamp, state, ground_truth)` for each
reading.

The building blocks are available on their own:

* `kalmantrack.filters` — `KF` and `EKF`, both derived from the abstract
  `KalmanFilterBase`. The matrices are plain attributes (`x`, `P`, `Q`, `R`,
  `F`, `H`, `B`); the methods are `predict(u)`, `update(z)`, `kalman_gain()`
  and `set_control_matrix(b)`, which also switches the control input on.
  `EKF.update` expects `H` to hold the Jacobian at the current state.
* `kalmantrack.geometry` — `normalize_angle`, `cartesian_to_polar` and
  `polar_to_cartesian`.
* `kalmantrack.data` — `SensorType`, `MeasurementPack`, `Config`,
  `ConfigError`, `parse_measurement`, `load_data`, `read_matrix` and
  `load_config`.
* `kalmantrack.app` — `calculate_jacobian`, `transition_matrix`,
  `process_noise`, `format_state`, `to_cartesian`, `run` and `main`.

## What it does not do

The ground truth is carried through to the output next to each estimate, but
the package computes no error measures (such as RMSE) and draws no plots.