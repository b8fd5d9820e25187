from dimer_dynamics.engines.engine import Engine
from dimer_dynamics.engines.quadratic import QuadraticPotential
from dimer_dynamics.engines.threewell import ThreeWellPotential
from dimer_dynamics.engines.ase import ASEEngine

__all__ = ["Engine", "QuadraticPotential", "ThreeWellPotential", "ASEEngine"]
