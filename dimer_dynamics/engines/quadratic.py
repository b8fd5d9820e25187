from __future__ import annotations

from dataclasses import dataclass
from typing import List

import numpy as np
from numpy.typing import NDArray

from dimer_dynamics.engines.engine import Engine
from dimer_dynamics.nodes.node import Node
from dimer_dynamics.nodes.nodehelpers import update_node_cache
from dimer_dynamics.outputs import EngineOutput, EngineResults


@dataclass
class QuadraticPotential(Engine):
    """
    E(x) = e0 + 1/2 (x - x0)^T H (x - x0)

    Curvatures along any unit vector n are exactly n^T H n, so the dimer
    estimates are exact for this surface. A `hessian` with one negative
    eigenvalue makes `x0` a first-order saddle point.
    """

    hessian: NDArray
    x0: NDArray = None
    e0: float = 0.0

    def __post_init__(self):
        self.hessian = np.asarray(self.hessian, dtype=float)
        assert np.allclose(self.hessian, self.hessian.T), "Hessian must be symmetric"
        if self.x0 is None:
            self.x0 = np.zeros(len(self.hessian))
        self.x0 = np.asarray(self.x0, dtype=float)

    def _en_func(self, x: NDArray) -> float:
        dx = np.asarray(x, dtype=float).flatten() - self.x0
        return float(self.e0 + 0.5 * dx @ self.hessian @ dx)

    def _grad_func(self, x: NDArray) -> NDArray:
        x = np.asarray(x, dtype=float)
        dx = x.flatten() - self.x0
        return (self.hessian @ dx).reshape(x.shape)

    def _compute(self, nodes: List[Node]) -> List[EngineOutput]:
        results = [
            EngineOutput(results=EngineResults(
                energy=self._en_func(node.coords), gradient=self._grad_func(node.coords)))
            for node in nodes
        ]
        update_node_cache(node_list=nodes, results=results)
        return results

    def compute_energies(self, nodes: List[Node]) -> NDArray:
        results = self._compute(nodes)
        return np.array([res.results.energy for res in results])

    def compute_gradients(self, nodes: List[Node]) -> NDArray:
        results = self._compute(nodes)
        return np.array([res.results.gradient for res in results])
