"""
Atmosphere Model
================
Station pressure from altitude (ISA troposphere) and moist air density
from pressure, temperature and relative humidity.

The barometric formula is only valid in the troposphere (below 11 km);
callers are expected to stay inside it.

Humid air density is the sum of the dry-air and water-vapour partial
densities, with the saturation vapour pressure from a Magnus-type fit.
"""

import numpy as np


# ── ISA Constants ──────────────────────────────────────────────────────────
SEA_LEVEL_TEMP       = 288.15      # K  (15 °C)
SEA_LEVEL_PRESSURE   = 101325.0    # Pa
LAPSE_RATE           = 0.0065      # K/m  (troposphere)
GRAVITY              = 9.80665     # m/s²
MOLAR_MASS_AIR       = 0.0289644   # kg/mol
GAS_CONSTANT         = 8.3144598   # J/(mol·K)
R_DRY_AIR            = 287.058     # J/(kg·K)
R_WATER_VAPOR        = 461.495     # J/(kg·K)
SPECIFIC_HEAT_RATIO  = 1.4         # γ for dry air
ZERO_CELSIUS         = 273.15      # K


def pressure_from_altitude(altitude: float) -> float:
    """
    Pressure (Pa) at a geometric altitude (m) below the tropopause.
    """
    exponent = GRAVITY * MOLAR_MASS_AIR / (GAS_CONSTANT * LAPSE_RATE)
    ratio = 1.0 - LAPSE_RATE * np.float64(altitude) / SEA_LEVEL_TEMP
    return float(SEA_LEVEL_PRESSURE * ratio ** exponent)


def saturation_vapor_pressure(temperature_k: float) -> float:
    """Saturation vapour pressure of water (Pa)."""
    t_k = np.float64(temperature_k)
    return float(6.1078 * 10.0 ** (7.5 * (t_k - ZERO_CELSIUS) / (t_k - 35.85)) * 100.0)


def air_density(pressure: float, temperature_k: float,
                relative_humidity: float) -> float:
    """
    Density (kg/m³) of humid air.

    Parameters
    ----------
    pressure : float
        Station pressure (Pa)
    temperature_k : float
        Air temperature (K)
    relative_humidity : float
        Fraction 0..1; values outside are clamped
    """
    rh = min(max(relative_humidity, 0.0), 1.0)
    e = rh * saturation_vapor_pressure(temperature_k)
    p_dry = pressure - e
    t_k = np.float64(temperature_k)
    return float(p_dry / (R_DRY_AIR * t_k) + e / (R_WATER_VAPOR * t_k))


def speed_of_sound(temperature_k: float) -> float:
    """
    Local speed of sound (m/s) = sqrt(γ × R_dry × T).
    """
    return float(np.sqrt(SPECIFIC_HEAT_RATIO * R_DRY_AIR * temperature_k))


# ── Vectorized version for plotting ───────────────────────────────────────
def density_profile(alt_array: np.ndarray, temperature_c: float = 15.0,
                    relative_humidity: float = 0.0) -> dict:
    """
    Pressure and density over an array of altitudes at a fixed temperature.
    Returns dict with keys: 'altitude', 'pressure', 'density'.
    """
    t_k = temperature_c + ZERO_CELSIUS
    P = np.array([pressure_from_altitude(h) for h in alt_array])
    rho = np.array([air_density(p, t_k, relative_humidity) for p in P])
    return {
        'altitude': np.asarray(alt_array),
        'pressure': P,
        'density': rho,
    }
