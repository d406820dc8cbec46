"""
Default scenario: a 16" AR-15 with a 100 yd zero firing 77 gr
match bullets (G7 BC 0.372, 2750 fps box velocity) in a standard day at
300 m elevation.
"""

from .drag_model import DragModel
from .projectile import Bullet, Environment, Rifle, SolverOptions
from .units import GRAIN, FPS, INCH, YARD


def default_rifle() -> Rifle:
    return Rifle(
        barrel_length_m=16 * INCH,
        twist_m=7 * INCH,
        sight_height_m=2.5 * INCH,
        zero_range_m=100 * YARD,
    )


def default_bullet() -> Bullet:
    return Bullet(
        mass_kg=77 * GRAIN,
        diameter_m=0.224 * INCH,
        ballistic_coefficient=0.372,
        drag_model=DragModel.G7,
        factory_velocity_ms=2750 * FPS,
    )


def default_environment() -> Environment:
    return Environment(
        altitude_m=300.0,
        temperature_c=15.0,
        relative_humidity=0.5,
        wind_speed_ms=0.0,
        wind_direction_deg=90.0,
        incline_deg=0.0,
    )


def default_options() -> SolverOptions:
    return SolverOptions(step_m=2.0, max_range_m=1000.0)
