from __future__ import annotations

from dataclasses import dataclass, asdict
from math import pi, radians
from pathlib import Path
from typing import Union

import toml

AVAIL_CG_BETAS = ["PR", "FR", "HS", "DY"]
AVAIL_CG_RESTARTS = ["powell", "negative"]


@dataclass
class DimerInputs:
    """
    Object containing inputs relating to the dimer rotation and translation.
    `fmax`: force threshold for the outer translation loop (default: 0.1)

    `distance`: distance between the dimer center and its endpoint (default: 1e-3)

    `trial_rot_angle`: angle (radians) of the trial rotation used to fit the
        Fourier curvature model (default: pi/4)

    `use_fixed_rot_angle`: whether to always use `trial_rot_angle`. otherwise the
        smaller of `trial_rot_angle` and the estimated rotation angle is used (default: True)

    `min_rot_angle`: estimated rotation angle (radians) under which the rotation is
        considered converged and the trial rotation is skipped (default: 5 degrees)

    `max_num_rot`: maximum number of rotation iterations per evaluation (default: 5)

    `max_num_trans`: maximum number of translation steps for the outer driver (default: 100)

    `use_extrapolated_forces`: whether to use the extrapolated force on the rotated
        endpoint instead of computing it. saves one evaluation per rotation (default: False)

    `use_cg_rot`: whether to pick the rotation plane with conjugate gradients instead of
        the steepest descent direction (default: True)

    `max_step_size`: maximum translation step size for the outer driver (default: 0.1)

    `cg_beta`: conjugate gradient beta formula. one of PR, FR, HS, DY (default: PR)

    `cg_restart`: conjugate gradient restart rule. one of powell, negative (default: powell)

    `cg_beta_damping`: damping factor applied to beta (default: 0.8)
    """

    fmax: float = 0.1
    distance: float = 1e-3
    trial_rot_angle: float = pi / 4
    use_fixed_rot_angle: bool = True
    min_rot_angle: float = radians(5.0)
    max_num_rot: int = 5
    max_num_trans: int = 100
    use_extrapolated_forces: bool = False
    use_cg_rot: bool = True
    max_step_size: float = 0.1  # dimer needs a small step size

    cg_beta: str = "PR"
    cg_restart: str = "powell"
    cg_beta_damping: float = 0.8

    def __post_init__(self):
        if self.distance <= 0:
            raise ValueError(f"Dimer distance must be positive. Got: {self.distance}")
        if self.max_num_rot < 1:
            raise ValueError(f"max_num_rot must be at least 1. Got: {self.max_num_rot}")
        if self.min_rot_angle <= 0:
            raise ValueError(f"min_rot_angle must be positive. Got: {self.min_rot_angle}")

        self.cg_beta = self.cg_beta.upper()
        self.cg_restart = self.cg_restart.lower()
        if self.cg_beta not in AVAIL_CG_BETAS:
            raise ValueError(f"Unknown cg_beta '{self.cg_beta}'. Choose from {AVAIL_CG_BETAS}")
        if self.cg_restart not in AVAIL_CG_RESTARTS:
            raise ValueError(
                f"Unknown cg_restart '{self.cg_restart}'. Choose from {AVAIL_CG_RESTARTS}")

    def copy(self) -> DimerInputs:
        return DimerInputs(**self.__dict__)

    @classmethod
    def open(cls, fp: Union[str, Path]) -> DimerInputs:
        """
        reads inputs from a toml file. keys may sit at the top level or under a [dimer] table.
        """
        data = toml.load(fp)
        data = data.get("dimer", data)
        return cls(**data)

    def save(self, fp: Union[str, Path]) -> None:
        with open(fp, "w") as f:
            toml.dump({"dimer": asdict(self)}, f)
