from dataclasses import dataclass
from typing import List

import numpy as np
from ase import Atoms
from ase.calculators.calculator import Calculator
from ase.units import Bohr, Hartree
from numpy.typing import NDArray

from dimer_dynamics.engines.engine import Engine
from dimer_dynamics.errors import (EnergiesNotComputedError, EvaluationError,
                                   GradientsNotComputedError)
from dimer_dynamics.nodes.node import AtomsNode
from dimer_dynamics.nodes.nodehelpers import update_node_cache
from dimer_dynamics.outputs import EngineOutput, EngineResults


@dataclass
class ASEEngine(Engine):
    """
    !!! Warning:
    ASE uses the following standard units:
        - energy (eV)
        - positions (Angstroms)

        dimer-dynamics uses Hartree and Bohr.
        Conversions are made when results are cached on the nodes.
    """

    calculator: Calculator

    def compute_gradients(self, nodes: List[AtomsNode]) -> NDArray:
        try:
            return np.array([node.gradient for node in nodes])
        except GradientsNotComputedError:
            node_list = self._run_calc(nodes=nodes)
            return np.array([node.gradient for node in node_list])

    def compute_energies(self, nodes: List[AtomsNode]) -> NDArray:
        try:
            return np.array([node.energy for node in nodes])
        except EnergiesNotComputedError:
            node_list = self._run_calc(nodes=nodes)
            return np.array([node.energy for node in node_list])

    def _run_calc(self, nodes: List[AtomsNode]) -> List[AtomsNode]:
        if not isinstance(nodes, list):
            raise ValueError(f"Input needs to be a List. You input a: {type(nodes)}")
        assert all(
            isinstance(node, AtomsNode) for node in nodes
        ), "input list has nodes incompatible with ASEEngine."

        results = [self.compute_func(atoms=node.structure) for node in nodes]
        update_node_cache(node_list=nodes, results=results)
        return nodes

    def compute_func(self, atoms: Atoms) -> EngineOutput:
        try:
            ene_ev = self.calculator.get_potential_energy(atoms=atoms)  # eV
            ene = ene_ev / Hartree  # Hartree

            # ASE outputs the negative gradient
            grad_ev_ang = self.calculator.get_forces(atoms=atoms) * (-1)  # eV / Angstroms
            grad = grad_ev_ang * Bohr / Hartree  # Hartree / Bohr

            res = EngineResults(energy=ene, gradient=grad)
            return EngineOutput(results=res)
        except Exception as e:
            raise EvaluationError(msg='Energy and force evaluation failed.', obj=atoms) from e
