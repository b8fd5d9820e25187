import numpy as np

from dimer_dynamics.nodes.node import Node


def update_node_cache(node_list, results):
    """
    inplace update of cached results
    """
    for node, result in zip(node_list, results):
        node._cached_result = result
        node._cached_energy = result.results.energy
        node._cached_gradient = result.results.gradient


def displace_by_dr(node: Node, displacement: np.array, dr: float = 0.1) -> Node:
    """returns a new node object that has been displaced along the input 'displacement' vector by 'dr'.

    Args:
        node (Node): Node to displace
        displacement (np.array): vector along which to displace. Flattened vectors are
            reshaped to the node's coordinates.
        dr (float, optional): Magnitude of displacement vector. Defaults to 0.1.
    """
    displacement = np.asarray(displacement, dtype=float).reshape(node.coords.shape)
    displacement = displacement / np.linalg.norm(displacement)
    new_coords = node.coords + dr*displacement
    return node.update_coords(new_coords)
