"""
Rifle, Ammunition & Forces
==========================
Input records for one solve and the point-mass acceleration model:
  - Gravity
  - Aerodynamic drag (G1/G7 index scaled by density and BC)
  - Wind (drag acts on the velocity relative to the air mass)

Coordinate system (vertical plane of fire):
  x = downrange (horizontal, positive away from the shooter)
  y = height    (vertical, up positive)
"""

import numpy as np
from dataclasses import dataclass
from typing import Optional, Tuple

from .atmosphere import GRAVITY
from .drag_model import DragModel, drag_acceleration
from .units import INCH, FPS


# ── Muzzle velocity heuristic ─────────────────────────────────────────────
BASELINE_BARREL_LENGTH = 24 * INCH   # m
FPS_PER_INCH_OF_BARREL = 10.0
MIN_MUZZLE_VELOCITY    = 100.0       # m/s
DEFAULT_MUZZLE_VELOCITY = 800.0      # m/s


@dataclass(frozen=True)
class Rifle:
    """Rifle and sight setup."""
    barrel_length_m: float = 24 * INCH
    twist_m: float = 10 * INCH             # reserved, unused
    sight_height_m: float = 1.5 * INCH     # sight line above bore axis
    zero_range_m: float = 100.0


@dataclass(frozen=True)
class Bullet:
    """
    Projectile and load.

    `factory_velocity_ms` is the box velocity; it is only used when
    `muzzle_velocity_ms` is not given.
    """
    mass_kg: float
    diameter_m: float
    ballistic_coefficient: float
    drag_model: DragModel = DragModel.G1
    muzzle_velocity_ms: Optional[float] = None
    factory_velocity_ms: Optional[float] = None


@dataclass(frozen=True)
class Environment:
    """
    Atmosphere and wind at the firing point.

    `wind_direction_deg` is the bearing the wind blows *from*, measured
    from the line of fire. `incline_deg`, `latitude_deg` and `heading_deg`
    are accepted for future corrections and currently ignored.
    """
    temperature_c: float = 15.0
    relative_humidity: float = 0.5
    altitude_m: Optional[float] = None
    station_pressure_pa: Optional[float] = None
    wind_speed_ms: float = 0.0
    wind_direction_deg: float = 90.0
    incline_deg: float = 0.0
    latitude_deg: Optional[float] = None
    heading_deg: Optional[float] = None


@dataclass(frozen=True)
class SolverOptions:
    """Integration settings. The correction flags are reserved no-ops."""
    step_m: float = 2.0
    max_range_m: float = 1000.0
    include_coriolis: bool = False
    include_spin_drift: bool = False
    include_aerodynamic_jump: bool = False

    @property
    def reserved_flags(self) -> Tuple[str, ...]:
        """Names of the reserved corrections that were switched on."""
        flags = {
            'include_coriolis': self.include_coriolis,
            'include_spin_drift': self.include_spin_drift,
            'include_aerodynamic_jump': self.include_aerodynamic_jump,
        }
        return tuple(name for name, on in flags.items() if on)


@dataclass(frozen=True)
class FlightParameters:
    """Everything the equations of motion need, resolved once per solve."""
    drag_model: DragModel
    ballistic_coefficient: float
    mass_kg: float
    density: float                 # kg/m³
    speed_of_sound: float          # m/s
    wind: Tuple[float, float]      # (x, y) air-mass velocity, m/s
    sight_height_m: float


def resolve_muzzle_velocity(bullet: Bullet, barrel_length_m: float) -> float:
    """
    Muzzle velocity (m/s) for a bullet fired from the given barrel.

    An explicit muzzle velocity wins. Otherwise the factory velocity is
    shifted by 10 fps per inch of barrel away from a 24" test barrel and
    floored at 100 m/s. With neither, 800 m/s.
    """
    if bullet.muzzle_velocity_ms is not None:
        return bullet.muzzle_velocity_ms
    if bullet.factory_velocity_ms:
        delta_in = (barrel_length_m - BASELINE_BARREL_LENGTH) / INCH
        delta_ms = delta_in * FPS_PER_INCH_OF_BARREL * FPS
        return max(MIN_MUZZLE_VELOCITY, bullet.factory_velocity_ms + delta_ms)
    return DEFAULT_MUZZLE_VELOCITY


def wind_vector(speed_ms: float, direction_deg: float) -> Tuple[float, float]:
    """
    Air-mass velocity (x downrange, y up) for a wind blowing *from*
    `direction_deg`.
    """
    rad = np.radians(direction_deg)
    return (float(-speed_ms * np.sin(rad)), float(-speed_ms * np.cos(rad)))


def compute_acceleration(vx: float, vy: float,
                         params: FlightParameters) -> np.ndarray:
    """
    Acceleration [ax, ay] (m/s²) of the projectile at ground velocity
    (vx, vy).
    """
    # Velocity relative to the air mass
    rvx = vx - params.wind[0]
    rvy = vy - params.wind[1]
    airspeed = float(np.hypot(rvx, rvy))

    a_drag = drag_acceleration(airspeed, params.drag_model,
                               params.ballistic_coefficient, params.density)
    norm = airspeed or 1.0
    ax = -a_drag * rvx / norm
    ay = -a_drag * rvy / norm - GRAVITY
    return np.array([ax, ay])
