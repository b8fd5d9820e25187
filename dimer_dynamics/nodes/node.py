from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

import numpy as np
from ase import Atoms
from ase.units import Bohr
from numpy.typing import NDArray

from dimer_dynamics.errors import (EnergiesNotComputedError,
                                   GradientsNotComputedError)
from dimer_dynamics.outputs import EngineOutput


@dataclass
class Node(ABC):

    @property
    @abstractmethod
    def structure(self): ...

    @property
    @abstractmethod
    def _cached_energy(self): ...

    @property
    @abstractmethod
    def _cached_gradient(self): ...

    @abstractmethod
    def update_coords(coords): ...

    @abstractmethod
    def copy(self):
        ...

    @abstractmethod
    def coords(self):
        ...

    @property
    def energy(self):
        if self._cached_energy is not None:
            return self._cached_energy
        else:
            raise EnergiesNotComputedError()

    @property
    def gradient(self):
        if self._cached_gradient is not None:
            return self._cached_gradient
        else:
            raise GradientsNotComputedError()


@dataclass
class XYNode(Node):
    structure: np.array = None
    _cached_result: EngineOutput = None
    _cached_energy: float = None
    _cached_gradient: NDArray = None

    def __post_init__(self):
        self.structure = np.asarray(self.structure, dtype=float)

    def update_coords(self, new_coords: np.array) -> XYNode:
        """
        returns a new XYNode with coordinates 'new_coords'
        """
        copy_node = self.copy()
        copy_node.structure = np.asarray(new_coords, dtype=float)
        copy_node._cached_result = None
        copy_node._cached_energy = None
        copy_node._cached_gradient = None
        return copy_node

    @property
    def coords(self) -> np.array:
        return self.structure

    def copy(self) -> XYNode:
        return XYNode(**self.__dict__)


@dataclass
class AtomsNode(Node):
    """
    Node wrapping an `ase.Atoms` object.

    !!! Warning:
        ASE stores positions in Angstroms. `coords` and `update_coords` work in Bohr,
        the unit of every engine in this package.
    """
    structure: Atoms = None
    _cached_result: EngineOutput = None
    _cached_energy: float = None
    _cached_gradient: NDArray = None

    @property
    def coords(self) -> np.array:
        """
        positions of the atoms in Bohr, shape (natom, 3)
        """
        return self.structure.get_positions() / Bohr

    def update_coords(self, new_coords: np.array) -> AtomsNode:
        """
        returns a new AtomsNode with coordinates 'new_coords' (Bohr)
        """
        atoms = self.structure.copy()
        atoms.set_positions(np.asarray(new_coords, dtype=float).reshape(-1, 3) * Bohr)
        return AtomsNode(structure=atoms)

    @property
    def symbols(self):
        return self.structure.get_chemical_symbols()

    def copy(self) -> AtomsNode:
        data = self.__dict__.copy()
        data["structure"] = self.structure.copy()
        return AtomsNode(**data)
