import logging

from numpy.typing import NDArray

from dimer_dynamics.helper_functions import vector_projection

logger = logging.getLogger(__name__)


def get_effective_force(f0: NDArray, c_min: float, t_min: NDArray) -> NDArray:
    """
    Force used to translate the dimer center.

    Args:
        f0 (NDArray): forces at the dimer center
        c_min (float): lowest curvature from the rotation
        t_min (NDArray): unit vector along the lowest curvature mode
    """
    f_parallel = vector_projection(f0, t_min)
    if c_min >= 0:
        # no negative mode: drag up along the lowest curvature mode only
        logger.info("drag up directly")
        return -f_parallel
    return f0 - 2.0 * f_parallel
