"""
Conjugate gradient propagation of search directions.

References:
    https://en.wikipedia.org/wiki/Nonlinear_conjugate_gradient_method
    https://github.com/siesta-project/flos/blob/master/flos/optima/cg.lua
"""
from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from dimer_dynamics.errors import DegenerateRotationalForceError
from dimer_dynamics.helper_functions import vector_rejection
from dimer_dynamics.inputs import AVAIL_CG_BETAS, AVAIL_CG_RESTARTS

POWELL_THRESHOLD = 0.2


@dataclass
class ConjugateGradientState:
    forces: NDArray
    conjct: NDArray


def _safe_divide(num: float, denom: float) -> float:
    if denom == 0.0:
        return 0.0
    return num / denom


def beta_polak_ribiere(forces, state: ConjugateGradientState) -> float:
    return _safe_divide(
        np.dot(forces, forces - state.forces), np.dot(state.forces, state.forces))


def beta_fletcher_reeves(forces, state: ConjugateGradientState) -> float:
    return _safe_divide(np.dot(forces, forces), np.dot(state.forces, state.forces))


def beta_hestenes_stiefel(forces, state: ConjugateGradientState) -> float:
    diff = forces - state.forces
    return _safe_divide(-np.dot(forces, diff), np.dot(state.conjct, diff))


def beta_dai_yuan(forces, state: ConjugateGradientState) -> float:
    diff = forces - state.forces
    return _safe_divide(np.dot(forces, forces), np.dot(state.conjct, diff))


BETA_FUNCS = {
    "PR": beta_polak_ribiere,
    "FR": beta_fletcher_reeves,
    "HS": beta_hestenes_stiefel,
    "DY": beta_dai_yuan,
}


@dataclass
class ConjugateGradient:
    """
    Propagates conjugate search directions from successive force vectors.

    `beta`: formula for beta. one of PR (Polak-Ribiere), FR (Fletcher-Reeves),
        HS (Hestenes-Stiefel), DY (Dai-Yuan)

    `restart`: 'powell' restarts when the forces lost orthogonality to the previous
        forces, 'negative' restarts when beta < 0

    `beta_damping`: damping factor for a smooth restart
    """

    beta: str = "PR"
    restart: str = "powell"
    beta_damping: float = 0.8

    def __post_init__(self):
        self.beta = self.beta.upper()
        self.restart = self.restart.lower()
        assert self.beta in AVAIL_CG_BETAS, f"Unknown beta '{self.beta}'. Choose from {AVAIL_CG_BETAS}"
        assert (
            self.restart in AVAIL_CG_RESTARTS
        ), f"Unknown restart '{self.restart}'. Choose from {AVAIL_CG_RESTARTS}"
        self.state = None
        self.last_beta = None

    def reset(self):
        self.state = None
        self.last_beta = None

    def update_beta(self, forces: NDArray) -> float:
        """
        returns the damped beta after applying the restart rule
        """
        beta = BETA_FUNCS[self.beta](forces, self.state)

        if self.restart == "negative":
            beta = max(beta, 0.0)
        elif self.restart == "powell":
            # gradients lost orthogonality to the previous iteration
            n = np.dot(forces, forces)
            m = np.dot(forces, self.state.forces)
            if m == 0.0 or n / m >= POWELL_THRESHOLD:
                beta = 0.0

        return self.beta_damping * beta

    def propagate(self, forces: NDArray, dimer_orientation: NDArray = None) -> NDArray:
        """
        Returns the new (normalized) conjugate direction.

        Args:
            forces (NDArray): current forces
            dimer_orientation (NDArray, optional): unit vector. If given, forces and
                the returned direction are projected orthogonal to it.
        """
        forces = np.asarray(forces, dtype=float).flatten()
        if dimer_orientation is not None:
            forces = vector_rejection(forces, dimer_orientation)

        if self.state is None:
            self.state = ConjugateGradientState(forces=forces.copy(), conjct=forces.copy())
            self.last_beta = 0.0
            disp = forces
        else:
            beta = self.update_beta(forces)
            disp = forces + beta * self.state.conjct
            if dimer_orientation is not None:
                disp = vector_rejection(disp, dimer_orientation)

            self.state = ConjugateGradientState(forces=forces.copy(), conjct=disp.copy())
            self.last_beta = beta

        norm = np.linalg.norm(disp)
        if norm == 0.0:
            raise DegenerateRotationalForceError(msg="Conjugate direction has zero norm.")
        return disp / norm
