"""
DOPE tables
===========
Range-card views of a solved trajectory: the solver emits every 25 m,
a card usually shows a coarser interval and one angular unit.
"""

from typing import Iterable, List

from .integrator import Sample


UNITS = ('MIL', 'MOA')


def filter_samples(samples: Iterable[Sample], every_m: float = 50.0) -> List[Sample]:
    """Samples whose range is an exact multiple of `every_m`."""
    return [s for s in samples if s.range_m % every_m == 0]


def _check_units(units: str) -> str:
    units = units.upper()
    if units not in UNITS:
        raise ValueError(f"Unknown units '{units}'. Available: {list(UNITS)}")
    return units


def correction(sample: Sample, units: str = 'MIL') -> float:
    """Angular drop of a sample in the requested units."""
    units = _check_units(units)
    return sample.mil if units == 'MIL' else sample.moa


def format_dope_table(samples: Iterable[Sample], units: str = 'MIL',
                      every_m: float = 50.0) -> str:
    """Printable table: range, drop (cm), correction, TOF, velocity, energy."""
    units = _check_units(units)
    rows = filter_samples(samples, every_m)
    lines = [
        f"{'Range (m)':>9} {'Drop (cm)':>10} {units:>8} "
        f"{'TOF (s)':>8} {'Vel (m/s)':>10} {'Energy (J)':>11}",
        "-" * 61,
    ]
    for s in rows:
        lines.append(
            f"{s.range_m:>9.0f} {s.drop_m * 100:>10.1f} {correction(s, units):>8.2f} "
            f"{s.tof_s:>8.3f} {s.vel_ms:>10.1f} {s.energy_j:>11.0f}"
        )
    return '\n'.join(lines)
