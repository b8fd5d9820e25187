from dimer_dynamics.dimer.raw import RawDimer, RotationState
from dimer_dynamics.dimer.fourier import FourierRotation, FourierState, fourier_rotate
from dimer_dynamics.dimer.rotation import RotationResult, optimize_rotation
from dimer_dynamics.dimer.translation import get_effective_force
from dimer_dynamics.dimer.dimer import Dimer

__all__ = [
    "RawDimer",
    "RotationState",
    "FourierRotation",
    "FourierState",
    "fourier_rotate",
    "RotationResult",
    "optimize_rotation",
    "get_effective_force",
    "Dimer",
]
