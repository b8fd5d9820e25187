from dataclasses import dataclass
from typing import Any


@dataclass
class EvaluationError(Exception):

    msg: str
    obj: Any = None


@dataclass
class InvalidTrialAngleError(Exception):

    phi: float
    msg: str = "Trial rotation angle must not be a multiple of pi."


@dataclass
class DegenerateRotationalForceError(Exception):
    msg: str = "Rotational force has zero norm."


@dataclass
class EnergiesNotComputedError(Exception):
    msg: str = "Energies not computed."


@dataclass
class GradientsNotComputedError(Exception):
    msg: str = "Gradients not computed."
