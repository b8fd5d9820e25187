"""
Fourier series model of the dimer curvature as a function of the rotation angle,
Heyden, Bell and Keil, J. Chem. Phys. 123, 224101 (2005).
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from math import atan, cos, pi, sin, tan

from numpy.typing import NDArray

from dimer_dynamics.dimer.raw import RawDimer
from dimer_dynamics.errors import InvalidTrialAngleError

logger = logging.getLogger(__name__)

DEGENERATE_ANGLE_THRESH = 1e-12


def get_fourier_series_constants(c0: float, c0d: float, c1: float, phi1: float) -> tuple:
    """
    returns the Fourier constants (a0, a1, b1) that reproduce `c0` and `c0d` at phi=0
    and `c1` at phi=phi1
    """
    phi = 2.0 * phi1
    denom = 1.0 - cos(phi)
    if abs(denom) < DEGENERATE_ANGLE_THRESH:
        raise InvalidTrialAngleError(phi=phi1)

    b1 = 0.5 * c0d
    a1 = (c0 - c1 + b1 * sin(phi)) / denom
    a0 = 2.0 * (c0 - a1)
    return a0, a1, b1


def get_phi_min_by_fourier_series(a1: float, b1: float) -> float:
    if a1 == 0.0:
        return pi / 4 if b1 >= 0 else -pi / 4
    return 0.5 * atan(b1 / a1)


def get_curvature_by_fourier_series(a0: float, a1: float, b1: float, phi: float) -> float:
    """Eq. 24 in Heyden2005JCP"""
    return a0 / 2.0 + a1 * cos(2.0 * phi) + b1 * sin(2.0 * phi)


def get_extrapolated_force(phi1: float, phi_min: float, f0: NDArray, f1: NDArray, f1_prime: NDArray) -> NDArray:
    """
    Eq. 35 in Heyden2005JCP: force on endpoint 1 rotated by `phi_min`, from the forces
    before (`f1`) and after (`f1_prime`) the trial rotation by `phi1`.
    """
    return (
        sin(phi1 - phi_min) / sin(phi1) * f1
        + sin(phi_min) / sin(phi1) * f1_prime
        + (1.0 - cos(phi_min) - sin(phi_min) * tan(0.5 * phi1)) * f0
    )


@dataclass
class FourierRotation:
    a0: float
    a1: float
    b1: float
    c0: float

    @classmethod
    def fit(cls, c0: float, c0d: float, phi1: float, c1: float) -> FourierRotation:
        """
        c0: curvature at phi = 0
        c0d: curvature derivative at phi = 0
        phi1: trial rotation angle
        c1: curvature at phi = phi1
        """
        a0, a1, b1 = get_fourier_series_constants(c0=c0, c0d=c0d, c1=c1, phi1=phi1)
        return cls(a0=a0, a1=a1, b1=b1, c0=c0)

    def curvature(self, phi: float) -> float:
        return get_curvature_by_fourier_series(self.a0, self.a1, self.b1, phi)

    def optimal_rotation(self) -> tuple:
        """returns the rotation angle of the curvature extremum and the curvature there"""
        phi_min = get_phi_min_by_fourier_series(self.a1, self.b1)
        return phi_min, self.curvature(phi_min)

    def resolve_minimum(self, extrapolated_force: bool = False) -> tuple:
        """
        optimal rotation, shifted by 90 degrees when the fit landed on a curvature maximum.
        With extrapolated forces the shift is kept only if it lowers the curvature below
        both `c0` and the fitted extremum.
        """
        phi_min, curvature_min = self.optimal_rotation()
        if curvature_min <= self.c0:
            return phi_min, curvature_min

        logger.info(f"found maximum curvature: {curvature_min} > {self.c0}")
        phi = phi_min + pi / 2.0
        c_min_prime = self.curvature(phi)
        if not extrapolated_force:
            return phi, c_min_prime

        if c_min_prime < self.c0 and c_min_prime < curvature_min:
            logger.warning("corrected curvature maximum using extrapolated forces, which are not reliable here")
            return phi, c_min_prime
        return phi_min, curvature_min


@dataclass
class FourierState:
    """
    State after a Fourier rotation.

    `curvature_min`: minimum curvature predicted by the Fourier series
    `phi_min`: rotation angle of the minimum curvature mode
    `r1_min`: position of endpoint 1 at `phi_min`
    `f1_min`: extrapolated force on endpoint 1 at `phi_min`
    `phi1`: trial angle used for the fit
    """
    curvature_min: float
    phi_min: float
    r1_min: NDArray
    f1_min: NDArray
    phi1: float


def fourier_rotate(
    raw_dimer: RawDimer,
    r1_prime: NDArray,
    f1_prime: NDArray,
    phi1: float,
    theta: NDArray,
    extrapolated_force: bool = False,
) -> FourierState:
    """
    Estimates the optimal rotation from one trial rotation.

    Args:
        raw_dimer (RawDimer): dimer before the trial rotation
        r1_prime (NDArray): position of endpoint 1 in the trial rotation
        f1_prime (NDArray): force of endpoint 1 in the trial rotation
        phi1 (float): trial rotation angle
        theta (NDArray): unit rotation direction, orthogonal to the dimer axis
        extrapolated_force (bool): whether the forces on endpoint 1 are extrapolated
    """
    n0 = raw_dimer.dimer_axis()
    state = raw_dimer.extrapolate()
    c0 = state.curvature()
    c0d = state.curvature_derivative(theta)

    trial_dimer = replace(raw_dimer, r1=r1_prime, f1=f1_prime)
    c1 = trial_dimer.extrapolate().curvature()

    fourier_rot = FourierRotation.fit(c0=c0, c0d=c0d, phi1=phi1, c1=c1)
    phi_min, curvature_min = fourier_rot.resolve_minimum(extrapolated_force=extrapolated_force)

    r1_min = raw_dimer.get_endpoint1_after_rotation(n0, theta, phi_min)
    f1_min = get_extrapolated_force(
        phi1=phi1, phi_min=phi_min, f0=raw_dimer.f0, f1=raw_dimer.f1, f1_prime=f1_prime)

    return FourierState(
        curvature_min=curvature_min,
        phi_min=phi_min,
        r1_min=r1_min,
        f1_min=f1_min,
        phi1=phi1,
    )
