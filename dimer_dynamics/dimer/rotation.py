from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from math import acos, degrees
from typing import Callable, List

import numpy as np
from numpy.typing import NDArray

from dimer_dynamics.dimer.fourier import fourier_rotate
from dimer_dynamics.dimer.raw import RawDimer
from dimer_dynamics.errors import DegenerateRotationalForceError
from dimer_dynamics.helper_functions import cosine_similarity, normalize, vector_rejection
from dimer_dynamics.inputs import DimerInputs
from dimer_dynamics.optimizers.cg import ConjugateGradient
from dimer_dynamics.outputs import RotationRecord

logger = logging.getLogger(__name__)


@dataclass
class RotationResult:
    raw_dimer: RawDimer
    curvature: float
    orientation: NDArray
    converged: bool
    n_rotations: int
    rotation_angle: float
    history: List[RotationRecord] = field(default_factory=list)


def check_dimer_rotation_convergence(phi_est: float, phi_tol: float) -> bool:
    if abs(phi_est) < phi_tol:
        logger.info(
            f"rotational angle is small enough: |{degrees(phi_est):.2f}| deg < {degrees(phi_tol):.2f} deg")
        return True

    return False


def get_rotational_direction(f_rot: NDArray, tau: NDArray, cg: ConjugateGradient = None) -> NDArray:
    """
    rotation direction perpendicular to the dimer orientation `tau`, from conjugate
    gradients if `cg` is given, otherwise the steepest descent direction.
    """
    if cg is not None:
        return cg.propagate(f_rot, dimer_orientation=tau)

    theta = vector_rejection(f_rot, tau)
    if np.linalg.norm(theta) == 0.0:
        raise DegenerateRotationalForceError(msg="Rotational force is parallel to the dimer axis.")
    return normalize(theta)


def next_rotation(
    raw_dimer: RawDimer,
    theta: NDArray,
    phi1: float,
    force_func: Callable[[NDArray], NDArray],
    use_extrapolated_forces: bool = False,
) -> tuple:
    """
    Rotates the dimer in direction `theta` by the trial angle `phi1` and moves it to the
    curvature minimum of the fitted Fourier series.

    Returns the rotated RawDimer, the FourierState and the cosine similarity between
    extrapolated and computed force on the endpoint (None with extrapolated forces).
    """
    tau = raw_dimer.dimer_axis()
    r1_prime = raw_dimer.get_endpoint1_after_rotation(tau, theta, phi1)
    f1_prime = force_func(r1_prime)

    fourier_state = fourier_rotate(
        raw_dimer,
        r1_prime=r1_prime,
        f1_prime=f1_prime,
        phi1=phi1,
        theta=theta,
        extrapolated_force=use_extrapolated_forces,
    )

    f1_min = fourier_state.f1_min
    similarity = None
    if not use_extrapolated_forces:
        f1_real = force_func(fourier_state.r1_min)
        similarity = cosine_similarity(f1_real, f1_min)
        logger.debug(f"similarity between extrapolated force and real force at R1: {similarity}")
        f1_min = f1_real

    new_dimer = replace(raw_dimer, r1=fourier_state.r1_min, f1=f1_min)
    return new_dimer, fourier_state, similarity


def optimize_rotation(
    raw_dimer: RawDimer,
    inputs: DimerInputs,
    force_func: Callable[[NDArray], NDArray],
) -> RotationResult:
    """
    Rotates the dimer axis into the lowest curvature mode at the dimer center.

    Args:
        raw_dimer (RawDimer): dimer at the initial orientation
        inputs (DimerInputs): rotation parameters
        force_func (Callable): returns the forces for a flat coordinate vector
    """
    tau_ini = raw_dimer.dimer_axis()
    cg = None
    if inputs.use_cg_rot:
        cg = ConjugateGradient(
            beta=inputs.cg_beta, restart=inputs.cg_restart, beta_damping=inputs.cg_beta_damping)

    history = []
    converged = False
    curvature_min = None
    niter = 0
    while niter < inputs.max_num_rot:
        niter += 1
        logger.info(f"dimer rotation iteration {niter}")
        state = raw_dimer.extrapolate()

        # skip the trial rotation if the estimated angle is small enough (Eq. 32 Heyden2005JCP)
        phi_est = state.estimated_rotational_angle()
        if check_dimer_rotation_convergence(phi_est, inputs.min_rot_angle):
            logger.info(f"Optimal dimer rotation found within {niter} iterations.")
            converged = True
            break

        if inputs.use_fixed_rot_angle:
            phi1 = inputs.trial_rot_angle
        else:
            phi1 = min(inputs.trial_rot_angle, phi_est)

        f_rot = state.rotational_force
        if np.linalg.norm(f_rot) == 0.0:
            raise DegenerateRotationalForceError(msg=f"invalid rotational force: {f_rot}")
        theta = get_rotational_direction(f_rot, state.curvature_mode, cg=cg)

        raw_dimer, fourier_state, similarity = next_rotation(
            raw_dimer,
            theta=theta,
            phi1=phi1,
            force_func=force_func,
            use_extrapolated_forces=inputs.use_extrapolated_forces,
        )
        curvature_min = fourier_state.curvature_min

        logger.info(f"{'phi_est/deg':^15}{'phi_trial/deg':^15}{'phi_min/deg':^15}{'c_min':^15}")
        logger.info(
            f"{degrees(phi_est):^15.2f}{degrees(phi1):^15.2f}"
            f"{degrees(fourier_state.phi_min):^15.2f}{curvature_min:^-15.3f}"
        )
        history.append(
            RotationRecord(
                niter=niter,
                phi_est=phi_est,
                phi_trial=phi1,
                phi_min=fourier_state.phi_min,
                curvature_min=curvature_min,
                force_similarity=similarity,
            )
        )
    else:
        logger.info("Max allowed iterations reached")

    if converged or curvature_min is None or not inputs.use_extrapolated_forces:
        curvature_min = raw_dimer.extrapolate().curvature()

    tau_min = raw_dimer.dimer_axis()
    rotation_angle = acos(float(np.clip(np.dot(tau_min, tau_ini), -1.0, 1.0)))
    logger.info(f"Total rotational angle = {degrees(rotation_angle):.2f} deg")

    return RotationResult(
        raw_dimer=raw_dimer,
        curvature=curvature_min,
        orientation=tau_min,
        converged=converged,
        n_rotations=niter,
        rotation_angle=rotation_angle,
        history=history,
    )
