from __future__ import annotations

from dataclasses import dataclass
from math import atan2

import numpy as np
from numpy.typing import NDArray

from dimer_dynamics.errors import DegenerateRotationalForceError
from dimer_dynamics.helper_functions import normalize, vector_rejection


def compute_dimer_endpoints(r0: NDArray, dr: float, n: NDArray) -> tuple:
    return r0 + dr * n, r0 - dr * n


def compute_dimer_endpoint2_force(f0: NDArray, f1: NDArray) -> NDArray:
    return 2.0 * f0 - f1


def compute_rotational_force(f0: NDArray, f1: NDArray, dr: float) -> NDArray:
    return (f1 - f0) / dr


def compute_dimer_axis(r0: NDArray, r1: NDArray) -> NDArray:
    return normalize(r1 - r0)


def compute_rotational_direction(f_rot: NDArray, n_unit: NDArray) -> NDArray:
    if np.linalg.norm(f_rot) == 0.0:
        raise DegenerateRotationalForceError(msg=f"invalid rotational force: {f_rot}")
    # zero when the dimer already lies along an eigenmode
    return normalize(vector_rejection(f_rot, n_unit))


def compute_dimer_curvature(f_rot: NDArray, n_unit: NDArray) -> float:
    return float(-np.dot(f_rot, n_unit))


def compute_dimer_curvature_derivative(f_rot: NDArray, theta_unit: NDArray) -> float:
    return float(-2.0 * np.dot(f_rot, theta_unit))


def estimate_rotational_angle(c0: float, c0d: float) -> float:
    """
    Eq. 32 in Heyden2005JCP. atan2 keeps the estimate finite for zero curvature.
    """
    return 0.5 * atan2(-0.5 * c0d, abs(c0))


def rotate_dimer_endpoint1(r0: NDArray, n_unit: NDArray, t_unit: NDArray, phi: float, dr: float) -> NDArray:
    """coordinates of endpoint 1 after rotating by `phi` in the plane of `n_unit` and `t_unit`"""
    return r0 + dr * np.cos(phi) * n_unit + dr * np.sin(phi) * t_unit


@dataclass
class RotationState:
    """
    Second derivative information of the potential energy surface at the
    dimer center, estimated from a RawDimer.

    `fr`: rotational force

    `n`: unit vector along the dimer axis
    """

    fr: NDArray
    n: NDArray

    def curvature(self) -> float:
        return compute_dimer_curvature(self.fr, self.n)

    def rotational_direction(self) -> NDArray:
        return compute_rotational_direction(self.fr, self.n)

    def curvature_derivative(self, theta: NDArray = None) -> float:
        """
        derivative of the curvature with respect to a rotation towards `theta`.
        defaults to the steepest descent rotation direction.
        """
        if theta is None:
            theta = self.rotational_direction()
        return compute_dimer_curvature_derivative(self.fr, theta)

    def estimated_rotational_angle(self) -> float:
        return estimate_rotational_angle(self.curvature(), self.curvature_derivative())

    @property
    def rotational_force(self) -> NDArray:
        return self.fr

    @property
    def curvature_mode(self) -> NDArray:
        return self.n


@dataclass
class RawDimer:
    """
    A dimer with a center `0` and an endpoint `1`.

    `r0`, `f0`: position and forces at the center

    `r1`, `f1`: position and forces at the endpoint

    `e0`: energy at the center
    """

    r0: NDArray
    f0: NDArray
    r1: NDArray
    f1: NDArray
    e0: float = None

    @property
    def dr(self) -> float:
        return float(np.linalg.norm(self.r1 - self.r0))

    def dimer_axis(self) -> NDArray:
        return compute_dimer_axis(self.r0, self.r1)

    def rotational_force(self) -> NDArray:
        return compute_rotational_force(self.f0, self.f1, self.dr)

    def extrapolate(self) -> RotationState:
        """estimates second derivative information at the center by finite differencing"""
        return RotationState(fr=self.rotational_force(), n=self.dimer_axis())

    def endpoint2(self) -> tuple:
        """position and (extrapolated) force of the image mirrored through the center"""
        _, r2 = compute_dimer_endpoints(self.r0, self.dr, self.dimer_axis())
        return r2, compute_dimer_endpoint2_force(self.f0, self.f1)

    def get_endpoint1_after_rotation(self, tau: NDArray, theta: NDArray, phi: float) -> NDArray:
        """
        coordinates of endpoint 1 after rotation in direction `theta` by angle `phi`
        in the plane spanned by `tau` and `theta`.
        """
        return rotate_dimer_endpoint1(self.r0, tau, theta, phi, self.dr)
