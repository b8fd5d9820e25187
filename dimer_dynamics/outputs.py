from __future__ import annotations

from typing import List, Optional

import numpy as np
from pydantic import BaseModel, ConfigDict


class EngineResults(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    energy: float
    gradient: np.ndarray


class EngineOutput(BaseModel):
    """
    class that has an attribute results that has another attribute `energy` and `gradient`
    for returning previously cached properties. Gives every engine the same return type
    regardless of the program that did the calculation.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    results: EngineResults


class RotationRecord(BaseModel):
    """One trial rotation of the dimer."""

    niter: int
    phi_est: float
    phi_trial: float
    phi_min: float
    curvature_min: float
    force_similarity: Optional[float] = None


class DimerOutput(BaseModel):
    """
    Result of one rotate + evaluate step of the dimer.

    `total_energy`: energy at the dimer center

    `effective_force`: force with the component along the lowest curvature mode inverted.
        This is what an outer minimizer should follow.

    `fmax`: maximum per-atom norm of `effective_force`

    `fmax_real`: maximum per-atom norm of the true force at the dimer center

    `curvature`: lowest curvature found by the rotation

    `curvature_mode`: unit vector along the lowest curvature mode

    `rotation_angle`: total angle (radians) the dimer axis turned during the rotation

    `n_rotations`: number of rotation iterations used

    `rotation_converged`: whether the estimated rotation angle fell below `min_rot_angle`

    `n_evaluations`: number of energy/force evaluations spent in this step
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    total_energy: float
    effective_force: np.ndarray
    fmax: float
    fmax_real: float
    curvature: float
    curvature_mode: np.ndarray
    rotation_angle: float = 0.0
    n_rotations: int = 0
    rotation_converged: bool = False
    n_evaluations: int = 0
    rotation_history: List[RotationRecord] = []
