import numpy as np
from numpy.typing import NDArray


def normalize(vec: NDArray) -> NDArray:
    """returns `vec` scaled to unit length. zero vectors are returned unchanged."""
    norm = np.linalg.norm(vec)
    if norm == 0.0:
        return vec.copy()
    return vec / norm


def vector_projection(vec: NDArray, direction: NDArray) -> NDArray:
    """component of `vec` along the unit vector `direction`"""
    return np.dot(vec, direction) * direction


def vector_rejection(vec: NDArray, direction: NDArray) -> NDArray:
    """component of `vec` orthogonal to the unit vector `direction`"""
    return vec - vector_projection(vec, direction)


def cosine_similarity(vec1: NDArray, vec2: NDArray) -> float:
    denom = np.linalg.norm(vec1) * np.linalg.norm(vec2)
    if denom == 0.0:
        return 0.0
    return float(np.dot(vec1, vec2) / denom)


def get_fmax(forces: NDArray, shape: tuple) -> float:
    """
    maximum force norm. `forces` is reshaped to `shape` and the norm is taken per row
    (per atom for (natom, 3) coordinates). 1-D coordinates use the absolute value of
    each component.
    """
    forces = np.asarray(forces).reshape(shape)
    if forces.ndim == 1:
        return float(np.amax(np.abs(forces)))
    return float(np.sqrt((forces**2).sum(axis=1).max()))
