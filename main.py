#!/usr/bin/env python3
"""
═══════════════════════════════════════════════════════════════════════════════
  BALLISTIC SOLVER — Main Runner
═══════════════════════════════════════════════════════════════════════════════

  Solves the default scenario and prints a range card:
    1. Atmosphere at the firing point
    2. Drag curves
    3. Zero and muzzle velocity
    4. DOPE table
    5. Wind effects
    6. Validation against an adaptive reference integration
    7. Figures

  Figures are saved to outputs/.

  Usage:
    python main.py              # Run everything
    python main.py --quick      # Skip figures
    python main.py --moa        # Range card in MOA instead of MIL
    python main.py --debug      # Debug logging
═══════════════════════════════════════════════════════════════════════════════
"""

import sys
import time
import logging
from dataclasses import replace

import numpy as np

from ballistic_solver.atmosphere import ZERO_CELSIUS, pressure_from_altitude, speed_of_sound
from ballistic_solver.drag_model import ALL_CURVES
from ballistic_solver.dope import format_dope_table
from ballistic_solver.logger import logger
from ballistic_solver.presets import (
    default_rifle, default_bullet, default_environment, default_options,
)
from ballistic_solver.solver import build_trajectory, prepare_flight
from ballistic_solver.units import INCH, FPS, GRAIN, YARD, MPH
from ballistic_solver.validation import validate_against_reference


def section(title):
    print(f"\n{'─'*60}")
    print(f"  {title}")
    print(f"{'─'*60}")


def all_finite(samples):
    return all(np.isfinite([s.drop_m, s.tof_s, s.vel_ms, s.energy_j]).all()
               for s in samples)


def main():
    start_time = time.time()
    quick = '--quick' in sys.argv
    units = 'MOA' if '--moa' in sys.argv else 'MIL'
    if '--debug' in sys.argv:
        logger.setLevel(logging.DEBUG)
        logger.info("Debug messages enabled")

    rifle = default_rifle()
    bullet = default_bullet()
    env = default_environment()
    opts = default_options()

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 1: Atmosphere
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 1: Atmosphere")
    params, muzzle_velocity = prepare_flight(rifle, bullet, env)
    t_k = env.temperature_c + ZERO_CELSIUS
    print(f"  Altitude     : {env.altitude_m:>8.0f} m")
    print(f"  Pressure     : {pressure_from_altitude(env.altitude_m):>8.0f} Pa")
    print(f"  Temperature  : {env.temperature_c:>8.1f} °C")
    print(f"  Humidity     : {env.relative_humidity:>8.0%}")
    print(f"  Density      : {params.density:>8.4f} kg/m³")
    print(f"  Sound speed  : {speed_of_sound(t_k):>8.1f} m/s")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 2: Drag Curves
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 2: Drag Curves")
    for curve in ALL_CURVES.values():
        print(f"  {curve.name}  i@300={curve.lookup(300):.3f}  "
              f"i@800={curve.lookup(800):.3f}  i@1600={curve.lookup(1600):.3f}")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 3: Zero
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 3: Zero")
    trajectory = build_trajectory(rifle, bullet, env, opts)
    print(f"  Barrel       : {rifle.barrel_length_m / INCH:>8.1f} in")
    print(f"  Factory vel  : {bullet.factory_velocity_ms / FPS:>8.0f} fps")
    print(f"  Muzzle vel   : {muzzle_velocity / FPS:>8.0f} fps ({muzzle_velocity:.1f} m/s)")
    print(f"  Zero range   : {rifle.zero_range_m / YARD:>8.0f} yd")
    print(f"  Zero angle   : {trajectory.angle_rad * 1000:>8.3f} mrad")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 4: DOPE Table
    # ══════════════════════════════════════════════════════════════════════
    section(f"PHASE 4: DOPE Table ({units})")
    samples = trajectory.samples()
    if not all_finite(samples):
        logger.warning("Trajectory contains non-finite values")
    print(format_dope_table(samples, units=units))

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 5: Wind Effects
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 5: Wind Effects (drop at max range)")
    wind_cases = [
        ("No Wind", 0.0, 90.0),
        ("Headwind 10 mph", 10 * MPH, 90.0),
        ("Tailwind 10 mph", 10 * MPH, 270.0),
        ("Updraft 10 mph", 10 * MPH, 180.0),
    ]
    for label, speed, direction in wind_cases:
        env_w = replace(env, wind_speed_ms=speed, wind_direction_deg=direction)
        s = build_trajectory(rifle, bullet, env_w, opts).samples()
        print(f"  {label:<20s}  Drop @ {s[-1].range_m:.0f} m: {s[-1].drop_m * 100:>8.1f} cm  "
              f"TOF: {s[-1].tof_s:.3f} s")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 6: Validation
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 6: Validation — RK4 vs RK45 reference")
    val_results = validate_against_reference(rifle, bullet, env, opts)

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 7: Figures
    # ══════════════════════════════════════════════════════════════════════
    if not quick:
        section("PHASE 7: Figures")
        import matplotlib.pyplot as plt
        from ballistic_solver.visualization import (
            ensure_output_dir, plot_trajectory, plot_velocity_energy,
            plot_drag_curves, plot_density_profile, plot_dashboard,
            plot_validation,
        )

        out = ensure_output_dir('outputs')
        title = f"{bullet.mass_kg / GRAIN:.0f} gr {bullet.drag_model.value}"
        figures = [
            ('01_trajectory.png', lambda p: plot_trajectory(
                samples, rifle.zero_range_m, title=title, save_path=p)),
            ('02_velocity_energy.png', lambda p: plot_velocity_energy(samples, save_path=p)),
            ('03_drag_curves.png', lambda p: plot_drag_curves(save_path=p)),
            ('04_density_profile.png', lambda p: plot_density_profile(
                env.temperature_c, save_path=p)),
            ('05_dashboard.png', lambda p: plot_dashboard(samples, title=title, save_path=p)),
            ('06_validation.png', lambda p: plot_validation(val_results, save_path=p)),
        ]
        for name, draw in figures:
            fig = draw(f'{out}/{name}')
            plt.close(fig)
            print(f"  ✓ Saved: {out}/{name}")
    else:
        section("PHASE 7: Figures SKIPPED (--quick mode)")

    elapsed = time.time() - start_time
    section("COMPLETE")
    print(f"\n  Total runtime: {elapsed:.1f} seconds\n")


if __name__ == "__main__":
    main()
