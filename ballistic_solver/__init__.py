"""
Point-Mass Rifle Trajectory Solver
==================================
Computes a zeroed rifle's trajectory table (drop, hold in MOA/MIL,
time of flight, velocity, energy every 25 m) from rifle, ammunition and
atmospheric inputs:
  - Gravity
  - G1 / G7 drag scaled by ballistic coefficient and air density
  - Humid-air density from station pressure or altitude
  - Head/tail and vertical wind

RK4 integration with a distance-based variable time step, and a
bisection search for the zero angle.
"""

from .units import INCH, YARD, GRAIN, FPS, MPH, to_moa, to_mil
from .atmosphere import (
    pressure_from_altitude, saturation_vapor_pressure, air_density,
    speed_of_sound, density_profile,
)
from .drag_model import (
    DragModel, DragCurve, G1, G7, ALL_CURVES,
    get_curve, interpolate, drag_acceleration,
)
from .projectile import (
    Rifle, Bullet, Environment, SolverOptions, FlightParameters,
    resolve_muzzle_velocity, wind_vector, compute_acceleration,
)
from .integrator import State, Sample, Trajectory, rk4_step, simulate_to_x
from .zero import solve_zero_angle
from .solver import solve_trajectory, build_trajectory, prepare_flight
from .dope import filter_samples, correction, format_dope_table
from .presets import default_rifle, default_bullet, default_environment, default_options
from .validation import ValidationResult, reference_samples, validate_against_reference
from .logger import logger, enable_file_logging, disable_file_logging

__version__ = "1.0.0"
__all__ = [
    'INCH', 'YARD', 'GRAIN', 'FPS', 'MPH', 'to_moa', 'to_mil',
    'pressure_from_altitude', 'saturation_vapor_pressure', 'air_density',
    'speed_of_sound', 'density_profile',
    'DragModel', 'DragCurve', 'G1', 'G7', 'ALL_CURVES',
    'get_curve', 'interpolate', 'drag_acceleration',
    'Rifle', 'Bullet', 'Environment', 'SolverOptions', 'FlightParameters',
    'resolve_muzzle_velocity', 'wind_vector', 'compute_acceleration',
    'State', 'Sample', 'Trajectory', 'rk4_step', 'simulate_to_x',
    'solve_zero_angle',
    'solve_trajectory', 'build_trajectory', 'prepare_flight',
    'filter_samples', 'correction', 'format_dope_table',
    'default_rifle', 'default_bullet', 'default_environment', 'default_options',
    'ValidationResult', 'reference_samples', 'validate_against_reference',
    'logger', 'enable_file_logging', 'disable_file_logging',
]
