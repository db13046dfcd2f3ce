"""Linear and extended Kalman filters for a constant-velocity track."""

from __future__ import annotations

import abc

import numpy as np

from kalmantrack.geometry import cartesian_to_polar


class KalmanFilterBase(abc.ABC):
    """Shared state, prediction and gain of the Kalman filters.

    The matrices are plain attributes: ``x`` (state), ``P`` (state
    covariance), ``Q`` (process noise), ``R`` (measurement noise), ``F``
    (transition), ``H`` (observation) and ``B`` (control input).
    """

    def __init__(self, state_dim: int, meas_dim: int, use_control: bool = False):
        self.x = np.zeros(state_dim)
        self.P = np.eye(state_dim)
        self.Q = np.eye(state_dim)
        self.R = np.eye(meas_dim)
        self.F = np.eye(state_dim)
        self.H = np.zeros((meas_dim, state_dim))
        self.B = np.zeros((state_dim, state_dim))
        self.use_control = use_control

    def set_control_matrix(self, b) -> None:
        """Install a control-input matrix and switch control on."""
        self.B = np.asarray(b, dtype=float)
        self.use_control = True

    def predict(self, u=None) -> None:
        """Propagate the state and covariance one step through ``F``."""
        x = np.asarray(self.x, dtype=float)
        if self.use_control:
            if u is None:
                raise ValueError("control input required when control is enabled")
            self.x = self.F @ x + self.B @ np.asarray(u, dtype=float)
        else:
            self.x = self.F @ x
        self.P = self.F @ self.P @ self.F.T + self.Q

    def kalman_gain(self) -> np.ndarray:
        """Return ``P H^T (H P H^T + R)^-1``."""
        innovation_cov = self.H @ self.P @ self.H.T + self.R
        return self.P @ self.H.T @ np.linalg.inv(innovation_cov)

    @abc.abstractmethod
    def update(self, z) -> None:
        """Correct the state with the measurement ``z``."""

    def _correct(self, gain: np.ndarray, residual: np.ndarray) -> None:
        self.x = np.asarray(self.x, dtype=float) + gain @ residual
        identity = np.eye(self.x.size)
        self.P = (identity - gain @ self.H) @ self.P


class KF(KalmanFilterBase):
    """Kalman filter with a linear measurement model ``z = H x``."""

    def update(self, z) -> None:
        gain = self.kalman_gain()
        residual = np.asarray(z, dtype=float) - self.H @ np.asarray(self.x, dtype=float)
        self._correct(gain, residual)


class EKF(KalmanFilterBase):
    """Extended Kalman filter with a polar (range, bearing, range-rate) model.

    ``H`` must hold the Jacobian of the measurement function at the
    current state.
    """

    def update(self, z) -> None:
        gain = self.kalman_gain()
        residual = np.asarray(z, dtype=float) - cartesian_to_polar(self.x)
        self._correct(gain, residual)