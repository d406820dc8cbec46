"""
Unit Conversion
===============
Scale factors from the imperial units shooters use to SI base units,
and angular expressions of a drop at a given range.

    length_m   = inches * INCH
    mass_kg    = grains * GRAIN
    speed_m_s  = fps * FPS
"""

# ── Scale factors to SI ───────────────────────────────────────────────────
INCH  = 0.0254           # m
YARD  = 0.9144           # m
GRAIN = 0.00006479891    # kg
FPS   = 0.3048           # m/s
MPH   = 0.44704          # m/s

MOA_PER_RADIAN = 3437.74677
MIL_PER_RADIAN = 1000.0


def to_moa(drop_m: float, range_m: float) -> float:
    """Drop expressed in minutes of angle. Ranges below 1 m count as 1 m."""
    return drop_m * MOA_PER_RADIAN / max(range_m, 1.0)


def to_mil(drop_m: float, range_m: float) -> float:
    """Drop expressed in milliradians. Ranges below 1 m count as 1 m."""
    return drop_m * MIL_PER_RADIAN / max(range_m, 1.0)
