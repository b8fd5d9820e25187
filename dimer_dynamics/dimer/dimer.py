from __future__ import annotations

import logging
from typing import Tuple

import numpy as np
from numpy.typing import NDArray

from dimer_dynamics.dimer.raw import RawDimer
from dimer_dynamics.dimer.rotation import optimize_rotation
from dimer_dynamics.dimer.translation import get_effective_force
from dimer_dynamics.engines.engine import Engine
from dimer_dynamics.helper_functions import get_fmax, normalize
from dimer_dynamics.inputs import DimerInputs
from dimer_dynamics.nodes.node import Node, XYNode
from dimer_dynamics.nodes.nodehelpers import displace_by_dr
from dimer_dynamics.outputs import DimerOutput

logger = logging.getLogger(__name__)


class Dimer:
    def __init__(self, node: Node, orientation: NDArray, engine: Engine, inputs: DimerInputs = None):
        """
        Dimer centered on `node` with its axis along `orientation`.

        Parameters:
        - node: node at the dimer center. Its coordinates may have any shape, they are
            flattened for the dimer and reshaped back for the engine.
        - orientation: initial dimer axis, normalized on construction.
        - engine: engine computing energies and gradients. Borrowed, never modified.
        - inputs: dimer parameters
        """
        orientation = np.asarray(orientation, dtype=float).flatten()
        if orientation.size != node.coords.size:
            raise ValueError(
                f"invalid data: orientation has {orientation.size} components, "
                f"coordinates have {node.coords.size}"
            )
        if np.linalg.norm(orientation) == 0.0:
            raise ValueError("Dimer orientation must not be the zero vector.")

        self.node = node
        self.orientation = normalize(orientation)
        self.engine = engine
        self.inputs = inputs if inputs is not None else DimerInputs()

        self.raw_dimer = None
        self.n_evaluations = 0

    @classmethod
    def from_coords(cls, center: NDArray, orientation: NDArray, engine: Engine, inputs: DimerInputs = None) -> Dimer:
        return cls(node=XYNode(structure=np.asarray(center, dtype=float)),
                   orientation=orientation, engine=engine, inputs=inputs)

    @property
    def center(self) -> NDArray:
        return self.node.coords.flatten()

    def update_center(self, new_coords: NDArray) -> None:
        """moves the dimer center. the orientation is kept as the starting guess of the next rotation"""
        new_coords = np.asarray(new_coords, dtype=float).reshape(self.node.coords.shape)
        self.node = self.node.update_coords(new_coords)
        self.raw_dimer = None

    def _evaluate_node(self, node: Node) -> Tuple[float, NDArray]:
        self.n_evaluations += 1
        return self.engine.compute_energy_forces(node)

    def get_forces(self, coords: NDArray) -> NDArray:
        node = self.node.update_coords(np.asarray(coords).reshape(self.node.coords.shape))
        _, forces = self._evaluate_node(node)
        return forces

    def build_raw_dimer(self) -> RawDimer:
        """evaluates the center and the endpoint along the current orientation"""
        e0, f0 = self._evaluate_node(self.node)
        endpoint = displace_by_dr(self.node, displacement=self.orientation, dr=self.inputs.distance)
        _, f1 = self._evaluate_node(endpoint)
        return RawDimer(r0=self.center, f0=f0, r1=endpoint.coords.flatten(), f1=f1, e0=e0)

    def get_optimal_rotation(self):
        """
        rotates the dimer into the lowest curvature mode at the current center.
        """
        raw_dimer = self.build_raw_dimer()
        result = optimize_rotation(raw_dimer, inputs=self.inputs, force_func=self.get_forces)
        self.orientation = result.orientation
        self.raw_dimer = result.raw_dimer
        return result

    def evaluate(self) -> DimerOutput:
        """
        Returns the energy and effective forces for a dimer translation step.
        """
        n_eval_start = self.n_evaluations
        result = self.get_optimal_rotation()

        f0 = result.raw_dimer.f0
        effective_force = get_effective_force(f0, result.curvature, result.orientation)

        shape = self.node.coords.shape
        return DimerOutput(
            total_energy=result.raw_dimer.e0,
            effective_force=effective_force,
            fmax=get_fmax(effective_force, shape),
            fmax_real=get_fmax(f0, shape),
            curvature=result.curvature,
            curvature_mode=result.orientation.copy(),
            rotation_angle=result.rotation_angle,
            n_rotations=result.n_rotations,
            rotation_converged=result.converged,
            n_evaluations=self.n_evaluations - n_eval_start,
            rotation_history=result.history,
        )
