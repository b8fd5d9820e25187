from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Tuple

import numpy as np
from numpy.typing import NDArray

from dimer_dynamics.errors import EnergiesNotComputedError, EvaluationError
from dimer_dynamics.nodes.node import Node


@dataclass
class Engine(ABC):

    @abstractmethod
    def compute_gradients(self, nodes: List[Node]) -> NDArray:
        """
        returns the gradients for each node in the list and caches
        them on the nodes
        """
        ...

    @abstractmethod
    def compute_energies(self, nodes: List[Node]) -> NDArray:
        """
        returns the energies for each node in the list and caches
        them on the nodes
        """
        ...

    def compute_energy_forces(self, node: Node) -> Tuple[float, NDArray]:
        """
        returns the energy and the flattened forces (negative gradient) of a single node.
        The energy is read from the node cache filled by the gradient call, so each
        node is computed once. Raises EvaluationError if the engine returns non-finite values.
        """
        grad = np.asarray(self.compute_gradients([node])[0], dtype=float).flatten()
        try:
            ene = float(node.energy)
        except EnergiesNotComputedError:
            ene = float(self.compute_energies([node])[0])
        if not np.isfinite(ene) or not np.all(np.isfinite(grad)):
            raise EvaluationError(msg="Engine returned non-finite energy or gradient.", obj=node)

        return ene, -grad
