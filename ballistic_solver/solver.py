"""
Solve Orchestrator
==================
Composes atmosphere, muzzle velocity, wind, zeroing and integration into
the single operation the rest of an application needs:

    samples = solve_trajectory(rifle, bullet, environment, options)

Inputs are not validated. Out-of-domain values (negative mass, negative
ranges, non-finite fields) give numeric garbage rather than an exception.
"""

from typing import List, Tuple

from .atmosphere import (
    ZERO_CELSIUS, air_density, pressure_from_altitude, speed_of_sound,
)
from .integrator import Sample, Trajectory
from .logger import logger
from .projectile import (
    Bullet, Environment, FlightParameters, Rifle, SolverOptions,
    resolve_muzzle_velocity, wind_vector,
)
from .zero import solve_zero_angle


def prepare_flight(rifle: Rifle, bullet: Bullet,
                   environment: Environment) -> Tuple[FlightParameters, float]:
    """
    Resolve the air, wind and projectile inputs of one shot.

    Returns (flight parameters, muzzle velocity in m/s).
    """
    temperature_k = environment.temperature_c + ZERO_CELSIUS
    if environment.station_pressure_pa is not None:
        pressure = environment.station_pressure_pa
    else:
        pressure = pressure_from_altitude(environment.altitude_m or 0.0)

    params = FlightParameters(
        drag_model=bullet.drag_model,
        ballistic_coefficient=bullet.ballistic_coefficient,
        mass_kg=bullet.mass_kg,
        density=air_density(pressure, temperature_k, environment.relative_humidity),
        speed_of_sound=speed_of_sound(temperature_k),
        wind=wind_vector(environment.wind_speed_ms, environment.wind_direction_deg),
        sight_height_m=rifle.sight_height_m,
    )
    muzzle_velocity = resolve_muzzle_velocity(bullet, rifle.barrel_length_m)

    logger.debug(f"Pressure {pressure:.1f} Pa, density {params.density:.5f} kg/m³, "
                 f"a={params.speed_of_sound:.1f} m/s")
    logger.debug(f"Muzzle velocity {muzzle_velocity:.1f} m/s, wind {params.wind}")
    return params, muzzle_velocity


def build_trajectory(rifle: Rifle, bullet: Bullet, environment: Environment,
                     options: SolverOptions) -> Trajectory:
    """Zero the rifle and return the (not yet integrated) trajectory."""
    if options.reserved_flags:
        logger.debug(f"Ignoring reserved corrections: {', '.join(options.reserved_flags)}")

    params, muzzle_velocity = prepare_flight(rifle, bullet, environment)
    angle = solve_zero_angle(params, muzzle_velocity, rifle.zero_range_m)
    return Trajectory(params, muzzle_velocity, angle,
                      step_m=options.step_m, max_range_m=options.max_range_m)


def solve_trajectory(rifle: Rifle, bullet: Bullet, environment: Environment,
                     options: SolverOptions) -> List[Sample]:
    """
    Trajectory table for a zeroed rifle: one `Sample` every 25 m from the
    muzzle up to `options.max_range_m`, in increasing range order.
    """
    samples = build_trajectory(rifle, bullet, environment, options).samples()
    logger.debug(f"Solved {len(samples)} samples to {options.max_range_m:.0f} m")
    return samples
