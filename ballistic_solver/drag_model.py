"""
Drag Model
==========
Compact G1 / G7 reference curves mapping airspeed (m/s) to a drag index.

The index is already an acceleration-like quantity: scaled by the density
ratio to sea level and divided by the ballistic coefficient it gives the
drag deceleration in m/s².

Lookup rules:
  - at or below the first tabulated velocity: the first index (flat)
  - inside the table: piecewise linear
  - above the last tabulated velocity: last index scaled by v / v_last

The tables are approximations. For match-grade output they should be
replaced with full G1/G7 data.
"""

from enum import Enum
from typing import Union

import numpy as np


SEA_LEVEL_DENSITY = 1.225   # kg/m³
MIN_BALLISTIC_COEFFICIENT = 1e-6


class DragModel(str, Enum):
    """Reference projectile a ballistic coefficient is quoted against."""
    G1 = 'G1'
    G7 = 'G7'


# ══════════════════════════════════════════════════════════════════════════
#  Reference tables: (velocity m/s, drag index) pairs
# ══════════════════════════════════════════════════════════════════════════

G1_POINTS = (
    (0.0, 0.0), (100.0, 0.05), (200.0, 0.11), (300.0, 0.20), (400.0, 0.33),
    (500.0, 0.50), (600.0, 0.72), (700.0, 0.98), (800.0, 1.28), (900.0, 1.60),
    (1000.0, 1.95), (1100.0, 2.30), (1200.0, 2.60), (1300.0, 2.85), (1400.0, 3.05),
)

G7_POINTS = (
    (0.0, 0.0), (100.0, 0.03), (200.0, 0.07), (300.0, 0.13), (400.0, 0.22),
    (500.0, 0.34), (600.0, 0.49), (700.0, 0.67), (800.0, 0.88), (900.0, 1.12),
    (1000.0, 1.38), (1100.0, 1.65), (1200.0, 1.90), (1300.0, 2.10), (1400.0, 2.25),
)


class DragCurve:
    """
    Read-only drag curve for one reference projectile.
    """

    def __init__(self, name: str, points):
        self.name = name
        table = np.array(points, dtype=float)
        self.velocity = table[:, 0]
        self.index = table[:, 1]
        self.velocity.flags.writeable = False
        self.index.flags.writeable = False

    def __len__(self):
        return len(self.velocity)

    def __repr__(self):
        return (f"DragCurve({self.name!r}, {len(self)} points, "
                f"{self.velocity[0]:.0f}-{self.velocity[-1]:.0f} m/s)")

    def lookup(self, velocity: float) -> float:
        """Drag index at the given airspeed (m/s)."""
        return interpolate(self, velocity)

    def lookup_array(self, velocity_array: np.ndarray) -> np.ndarray:
        """Vectorized lookup, same rules as `lookup`."""
        v = np.asarray(velocity_array, dtype=float)
        inside = np.interp(v, self.velocity, self.index)
        above = self.index[-1] * (v / self.velocity[-1])
        return np.where(v > self.velocity[-1], above, inside)


G1 = DragCurve('G1', G1_POINTS)
G7 = DragCurve('G7', G7_POINTS)

ALL_CURVES = {
    DragModel.G1: G1,
    DragModel.G7: G7,
}


def get_curve(model: Union[DragModel, str]) -> DragCurve:
    """Return the reference curve for a drag model or its name ('G1', 'G7')."""
    try:
        return ALL_CURVES[DragModel(model)]
    except ValueError:
        raise ValueError(
            f"Unknown drag model '{model}'. "
            f"Available: {[m.value for m in DragModel]}"
        ) from None


def interpolate(curve: DragCurve, velocity: float) -> float:
    """
    Drag index of `curve` at `velocity`.

    Total for any input: values at or below the first point (negative
    velocities included) return the first index.
    """
    v_table = curve.velocity
    i_table = curve.index

    if velocity <= v_table[0]:
        return float(i_table[0])
    if velocity > v_table[-1]:
        return float(i_table[-1] * (velocity / v_table[-1]))
    # np.interp is exact at the nodes and linear between them
    return float(np.interp(velocity, v_table, i_table))


def drag_acceleration(airspeed: float, model: Union[DragModel, str],
                      ballistic_coefficient: float, density: float) -> float:
    """
    Magnitude of the drag deceleration (m/s²) at the given airspeed.

    a = index(v) × (ρ / ρ₀) / BC, with BC floored at a small epsilon.
    """
    bc = max(ballistic_coefficient or 0.0, MIN_BALLISTIC_COEFFICIENT)
    index = interpolate(get_curve(model), airspeed)
    return index * (density / SEA_LEVEL_DENSITY) / bc
