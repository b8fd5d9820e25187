from dimer_dynamics.inputs import DimerInputs
from dimer_dynamics.outputs import DimerOutput
from dimer_dynamics.nodes.node import Node, XYNode, AtomsNode
from dimer_dynamics.dimer import Dimer, RawDimer
from dimer_dynamics.errors import (EvaluationError, InvalidTrialAngleError,
                                   DegenerateRotationalForceError)

__all__ = [
    "DimerInputs",
    "DimerOutput",
    "Node",
    "XYNode",
    "AtomsNode",
    "Dimer",
    "RawDimer",
    "EvaluationError",
    "InvalidTrialAngleError",
    "DegenerateRotationalForceError",
]
