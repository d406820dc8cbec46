"""
Zero Solver
===========
Bisection over the launch angle so the projectile crosses the sight line
at the zero range.

The search runs a fixed number of iterations on [-5°, +5°]; there is no
tolerance check, the iteration count alone ends it.
"""

import numpy as np

from .integrator import simulate_to_x
from .logger import logger
from .projectile import FlightParameters


ZERO_SEARCH_MIN_DEG = -5.0
ZERO_SEARCH_MAX_DEG = 5.0
ZERO_ITERATIONS     = 24


def solve_zero_angle(params: FlightParameters, muzzle_velocity: float,
                     zero_range_m: float,
                     iterations: int = ZERO_ITERATIONS) -> float:
    """
    Launch angle (rad) that brings the projectile back to the sight
    height at `zero_range_m`.

    A zero range of 0 m or less returns 0.0.
    """
    if zero_range_m <= 0:
        logger.debug(f"Zero range {zero_range_m} m, using a level bore")
        return 0.0

    lo = np.radians(ZERO_SEARCH_MIN_DEG)
    hi = np.radians(ZERO_SEARCH_MAX_DEG)
    target_y = params.sight_height_m

    for _ in range(iterations):
        mid = (lo + hi) / 2
        hit_y = simulate_to_x(params, muzzle_velocity, mid, zero_range_m)
        if hit_y > target_y:
            hi = mid
        else:
            lo = mid

    angle = (lo + hi) / 2
    logger.debug(f"Zero angle {angle * 1000:.4f} mrad at {zero_range_m:.1f} m")
    return float(angle)
