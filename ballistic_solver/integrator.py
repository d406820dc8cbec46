"""
Numerical Integration Engine
=============================
4th-order Runge-Kutta integration of the point-mass equations of motion

    dx/dt = vx          dvx/dt = ax(vx, vy)
    dy/dt = vy          dvy/dt = ay(vx, vy)

with a variable time step h = step / |vx|, so every step advances the
projectile roughly the same distance downrange whatever its speed.

Two operating modes:

1. **Trajectory**: continuous sampling. Emits a `Sample` at every 25 m
   mark from the muzzle up to the maximum range, never skipping a mark
   even when one step crosses several.
2. **simulate_to_x**: single target. Integrates until a downrange
   position is reached and returns the height there (used for zeroing).
"""

import numpy as np
from dataclasses import dataclass
from typing import Iterator, List

from .logger import logger
from .projectile import FlightParameters, compute_acceleration
from .units import to_moa, to_mil


RECORD_INTERVAL   = 25.0     # m
MIN_STEP          = 1.0      # m
MAX_STEP          = 10.0     # m
ZEROING_STEP      = 5.0      # m
MIN_HORIZONTAL_VELOCITY = 1e-3   # m/s
FLOOR_HEIGHT      = -100.0   # m, flight ends below this
STEP_BUDGET_FACTOR = 10       # step cap: factor x distance / step + margin
STEP_BUDGET_MARGIN = 100


@dataclass
class State:
    """Projectile state owned by a single integration run."""
    x: float      # downrange (m)
    y: float      # height (m)
    vx: float     # m/s
    vy: float     # m/s
    t: float = 0.0

    @classmethod
    def at_muzzle(cls, muzzle_velocity: float, angle_rad: float,
                  height: float) -> 'State':
        return cls(
            x=0.0, y=height,
            vx=muzzle_velocity * np.cos(angle_rad),
            vy=muzzle_velocity * np.sin(angle_rad),
        )

    @property
    def speed(self) -> float:
        return float(np.hypot(self.vx, self.vy))

    def as_vector(self) -> np.ndarray:
        return np.array([self.x, self.y, self.vx, self.vy, self.t])

    def update(self, vec: np.ndarray):
        self.x, self.y, self.vx, self.vy, self.t = (float(c) for c in vec)


@dataclass(frozen=True)
class Sample:
    """One row of the trajectory table, taken at an exact range mark."""
    range_m: float
    drop_m: float       # relative to the sight line
    wind_m: float       # placeholder, always 0
    tof_s: float
    vel_ms: float
    energy_j: float
    moa: float
    mil: float
    mach: float


def _derivative(vec: np.ndarray, params: FlightParameters) -> np.ndarray:
    ax, ay = compute_acceleration(vec[2], vec[3], params)
    return np.array([vec[2], vec[3], ax, ay, 1.0])


def rk4_step(state: State, step_m: float, params: FlightParameters):
    """
    Advance `state` in place by about `step_m` meters downrange.
    """
    h = step_m / max(MIN_HORIZONTAL_VELOCITY, abs(state.vx))
    y0 = state.as_vector()

    k1 = _derivative(y0, params)
    k2 = _derivative(y0 + 0.5 * h * k1, params)
    k3 = _derivative(y0 + 0.5 * h * k2, params)
    k4 = _derivative(y0 + h * k3, params)

    state.update(y0 + (h / 6.0) * (k1 + 2*k2 + 2*k3 + k4))


def step_budget(distance_m: float, step_m: float) -> int:
    """
    Upper bound on RK4 steps for a flight of `distance_m` downrange.

    A stable step advances about `step_m`, so finite flights finish well
    inside the budget. It only binds when the integration has gone
    unstable (for instance with a clamped, near-zero BC) and x stops
    advancing.
    """
    return int(np.ceil(max(distance_m, 0.0) / step_m)) * STEP_BUDGET_FACTOR \
        + STEP_BUDGET_MARGIN


def make_sample(mark: float, state: State,
                params: FlightParameters) -> Sample:
    """Record `state` under the exact range `mark`."""
    vel = state.speed
    drop = state.y - params.sight_height_m
    return Sample(
        range_m=mark,
        drop_m=drop,
        wind_m=0.0,
        tof_s=state.t,
        vel_ms=vel,
        energy_j=0.5 * params.mass_kg * vel * vel,
        moa=to_moa(drop, max(1.0, mark)),
        mil=to_mil(drop, max(1.0, mark)),
        mach=vel / params.speed_of_sound if params.speed_of_sound > 0 else 0.0,
    )


class Trajectory:
    """
    Lazy, restartable sequence of `Sample` records for one shot.

    Every call to ``iter()`` integrates again from the muzzle, so the
    object can be consumed more than once.
    """

    def __init__(self, params: FlightParameters, muzzle_velocity: float,
                 angle_rad: float, step_m: float, max_range_m: float):
        self.params = params
        self.muzzle_velocity = muzzle_velocity
        self.angle_rad = angle_rad
        self.step_m = max(MIN_STEP, min(step_m, MAX_STEP))
        self.max_range_m = max_range_m

    def __iter__(self) -> Iterator[Sample]:
        state = State.at_muzzle(self.muzzle_velocity, self.angle_rad,
                                self.params.sight_height_m)
        next_mark = 0.0
        steps_left = step_budget(self.max_range_m, self.step_m)

        while state.y > FLOOR_HEIGHT:
            # Emit every mark this state has reached, including any the
            # last step jumped over
            while next_mark <= self.max_range_m and state.x >= next_mark:
                yield make_sample(next_mark, state, self.params)
                next_mark += RECORD_INTERVAL

            if state.x > self.max_range_m:
                break
            if steps_left <= 0:
                logger.warning(f"Trajectory stopped at x={state.x:.1f} m: "
                               f"step budget exhausted")
                break
            rk4_step(state, self.step_m, self.params)
            steps_left -= 1

    def samples(self) -> List[Sample]:
        return list(self)


def simulate_to_x(params: FlightParameters, muzzle_velocity: float,
                  angle_rad: float, target_x: float,
                  step_m: float = ZEROING_STEP) -> float:
    """
    Height (m) of the projectile once it reaches `target_x` downrange.

    Starts at the sight height; the last step may overshoot the target.
    If the step budget runs out first, the height at that point is
    returned.
    """
    state = State.at_muzzle(muzzle_velocity, angle_rad, params.sight_height_m)
    steps_left = step_budget(target_x, step_m)
    while state.x < target_x:
        if steps_left <= 0:
            logger.debug(f"simulate_to_x gave up at x={state.x:.1f} m "
                         f"short of {target_x:.1f} m")
            break
        rk4_step(state, step_m, params)
        steps_left -= 1
    return state.y
