from __future__ import annotations

from dataclasses import dataclass
from typing import List

import numpy as np
from numpy.typing import NDArray

from dimer_dynamics.engines.engine import Engine
from dimer_dynamics.nodes.node import Node


@dataclass
class ThreeWellPotential(Engine):
    """
    Himmelblau surface, (x**2 + y - 11)**2 + (x + y**2 - 7)**2.
    Four minima separated by first-order saddle points.
    """

    def _en_func(self, xy: np.array) -> float:
        """
        computes energy from xy point
        """
        x, y = xy
        return (x**2 + y - 11) ** 2 + (x + y**2 - 7) ** 2

    def _grad_func(self, xy: np.array) -> NDArray:
        """
        computes gradient from xy point
        """
        x, y = xy
        dx = 2 * (x**2 + y - 11) * (2 * x) + 2 * (x + y**2 - 7)
        dy = 2 * (x**2 + y - 11) + 2 * (x + y**2 - 7) * (2 * y)
        return np.array([dx, dy])

    def _hessian_func(self, xy: np.array) -> NDArray:
        x, y = xy
        dxx = 12 * x**2 + 4 * y - 42
        dxy = 4 * x + 4 * y
        dyy = 12 * y**2 + 4 * x - 26
        return np.array([[dxx, dxy], [dxy, dyy]])

    def _compute_ene_grads(self, nodes: List[Node]):
        if not isinstance(nodes, list):
            raise ValueError(f"Unsupported type {type(nodes)}")
        return [(self._en_func(node.coords), self._grad_func(node.coords)) for node in nodes]

    def compute_energies(self, nodes: List[Node]) -> NDArray:

        ene_grad_tuple = self._compute_ene_grads(nodes)
        for node, tup in zip(nodes, ene_grad_tuple):
            node._cached_energy = tup[0]
            node._cached_gradient = tup[1]

        return np.array([t[0] for t in ene_grad_tuple])

    def compute_gradients(self, nodes: List[Node]) -> NDArray:
        ene_grad_tuple = self._compute_ene_grads(nodes)
        for node, tup in zip(nodes, ene_grad_tuple):
            node._cached_energy = tup[0]
            node._cached_gradient = tup[1]

        return np.array([t[1] for t in ene_grad_tuple])
