"""
Unit Tests for the Ballistic Solver Physics
===========================================
Units, drag curves, atmosphere, forces and the RK4 integrator.
Run: python -m pytest tests/ -v
"""

import sys
import os
import numpy as np
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from ballistic_solver.units import INCH, GRAIN, FPS, YARD, to_moa, to_mil
from ballistic_solver.atmosphere import (
    pressure_from_altitude, saturation_vapor_pressure, air_density,
    speed_of_sound, density_profile, SEA_LEVEL_PRESSURE, SEA_LEVEL_TEMP, GRAVITY,
)
from ballistic_solver.drag_model import (
    DragModel, G1, G7, G1_POINTS, G7_POINTS, get_curve, interpolate,
    drag_acceleration,
)
from ballistic_solver.projectile import (
    Bullet, FlightParameters, SolverOptions, compute_acceleration,
    resolve_muzzle_velocity, wind_vector,
)
from ballistic_solver.integrator import (
    State, Trajectory, rk4_step, simulate_to_x, step_budget,
)


def make_params(drag_model=DragModel.G7, bc=0.372, density=1.225,
                wind=(0.0, 0.0), sight_height=0.0635, mass=77 * GRAIN):
    return FlightParameters(
        drag_model=drag_model,
        ballistic_coefficient=bc,
        mass_kg=mass,
        density=density,
        speed_of_sound=340.3,
        wind=wind,
        sight_height_m=sight_height,
    )


class TestUnits:
    """Scale factors and angular conversions."""

    def test_scale_factors(self):
        assert 16 * INCH == pytest.approx(0.4064)
        assert 100 * YARD == pytest.approx(91.44)
        assert 2750 * FPS == pytest.approx(838.2)
        assert 7000 * GRAIN == pytest.approx(0.45359237, rel=1e-6)

    def test_one_mil_at_one_km(self):
        assert to_mil(1.0, 1000.0) == pytest.approx(1.0)

    def test_moa_mil_ratio(self):
        for drop, rng in [(-0.5, 100.0), (-3.2, 550.0), (0.01, 25.0), (-12.0, 1500.0)]:
            assert to_moa(drop, rng) / to_mil(drop, rng) == pytest.approx(3.43774677)

    def test_zero_range_counts_as_one_meter(self):
        assert to_mil(0.2, 0.0) == pytest.approx(200.0)
        assert to_moa(0.2, 0.0) == pytest.approx(0.2 * 3437.74677)


class TestDragModel:
    """Reference curve lookup."""

    def test_tabulated_points_are_exact(self):
        for curve, points in [(G1, G1_POINTS), (G7, G7_POINTS)]:
            for v, i in points:
                assert interpolate(curve, v) == pytest.approx(i, abs=1e-12)

    def test_between_points_is_bracketed(self):
        for curve, points in [(G1, G1_POINTS), (G7, G7_POINTS)]:
            for (v0, i0), (v1, i1) in zip(points, points[1:]):
                mid = interpolate(curve, 0.5 * (v0 + v1))
                assert i0 <= mid <= i1
                assert mid == pytest.approx(0.5 * (i0 + i1))

    def test_linear_scaling_above_table(self):
        last_v, last_i = G1_POINTS[-1]
        assert interpolate(G1, 2 * last_v) == pytest.approx(2 * last_i)
        assert interpolate(G7, 1750.0) / interpolate(G7, 1500.0) == pytest.approx(1750.0 / 1500.0)

    def test_flat_below_table(self):
        assert interpolate(G1, 0.0) == 0.0
        assert interpolate(G7, -50.0) == 0.0

    def test_lookup_array_matches_scalar(self):
        v = np.array([-10.0, 0.0, 150.0, 800.0, 1400.0, 2100.0])
        expected = [interpolate(G7, x) for x in v]
        assert np.allclose(G7.lookup_array(v), expected)

    def test_tables_are_read_only(self):
        with pytest.raises(ValueError):
            G1.index[3] = 99.0

    def test_get_curve(self):
        assert get_curve(DragModel.G1) is G1
        assert get_curve('G7') is G7
        with pytest.raises(ValueError):
            get_curve('G9')

    def test_drag_acceleration_sea_level(self):
        # Density ratio 1, so index / BC
        assert drag_acceleration(800.0, 'G7', 0.5, 1.225) == pytest.approx(0.88 / 0.5)

    def test_drag_scales_with_density(self):
        a_sea = drag_acceleration(800.0, DragModel.G1, 0.4, 1.225)
        a_thin = drag_acceleration(800.0, DragModel.G1, 0.4, 0.6125)
        assert a_thin == pytest.approx(0.5 * a_sea)

    def test_non_positive_bc_is_clamped(self):
        for bc in (0.0, -0.3, None):
            a = drag_acceleration(800.0, DragModel.G7, bc, 1.225)
            assert np.isfinite(a)
            assert a == pytest.approx(0.88 / 1e-6)


class TestAtmosphere:
    """Pressure and humid-air density."""

    def test_sea_level_pressure(self):
        assert pressure_from_altitude(0.0) == pytest.approx(SEA_LEVEL_PRESSURE)

    def test_pressure_decreases_with_altitude(self):
        assert pressure_from_altitude(1000) < pressure_from_altitude(300) < pressure_from_altitude(0)

    def test_pressure_at_1000m(self):
        assert pressure_from_altitude(1000.0) == pytest.approx(89875.0, rel=1e-3)

    def test_sea_level_dry_density(self):
        rho = air_density(101325.0, 288.15, 0.0)
        assert abs(rho - 1.225) / 1.225 < 0.01

    def test_saturation_vapor_pressure(self):
        assert saturation_vapor_pressure(273.15) == pytest.approx(610.78)
        assert saturation_vapor_pressure(288.15) == pytest.approx(1705.0, rel=0.01)

    def test_humid_air_is_lighter(self):
        assert air_density(101325.0, 303.15, 1.0) < air_density(101325.0, 303.15, 0.0)

    def test_humidity_is_clamped(self):
        assert air_density(101325.0, 293.15, 1.7) == air_density(101325.0, 293.15, 1.0)
        assert air_density(101325.0, 293.15, -0.4) == air_density(101325.0, 293.15, 0.0)

    def test_speed_of_sound(self):
        assert speed_of_sound(SEA_LEVEL_TEMP) == pytest.approx(340.3, abs=0.5)

    def test_density_profile(self):
        profile = density_profile(np.array([0.0, 1000.0, 2000.0]), 15.0, 0.0)
        assert np.all(np.diff(profile['density']) < 0)
        assert profile['pressure'][0] == pytest.approx(SEA_LEVEL_PRESSURE)


class TestProjectile:
    """Muzzle velocity, wind and acceleration."""

    def test_explicit_muzzle_velocity_wins(self):
        b = Bullet(mass_kg=0.005, diameter_m=0.0057, ballistic_coefficient=0.3,
                   muzzle_velocity_ms=900.0, factory_velocity_ms=800.0)
        assert resolve_muzzle_velocity(b, 16 * INCH) == 900.0

    def test_factory_velocity_barrel_adjustment(self):
        b = Bullet(mass_kg=0.005, diameter_m=0.0057, ballistic_coefficient=0.3,
                   factory_velocity_ms=2750 * FPS)
        assert resolve_muzzle_velocity(b, 24 * INCH) == pytest.approx(2750 * FPS)
        assert resolve_muzzle_velocity(b, 16 * INCH) == pytest.approx(2670 * FPS)
        assert resolve_muzzle_velocity(b, 26 * INCH) == pytest.approx(2770 * FPS)

    def test_factory_velocity_floor(self):
        b = Bullet(mass_kg=0.005, diameter_m=0.0057, ballistic_coefficient=0.3,
                   factory_velocity_ms=120.0)
        assert resolve_muzzle_velocity(b, 4 * INCH) == 100.0

    def test_default_muzzle_velocity(self):
        b = Bullet(mass_kg=0.005, diameter_m=0.0057, ballistic_coefficient=0.3)
        assert resolve_muzzle_velocity(b, 20 * INCH) == 800.0

    def test_wind_vector(self):
        x, y = wind_vector(10.0, 90.0)
        assert x == pytest.approx(-10.0)
        assert y == pytest.approx(0.0, abs=1e-9)
        x, y = wind_vector(10.0, 270.0)
        assert x == pytest.approx(10.0)
        x, y = wind_vector(4.0, 0.0)
        assert x == pytest.approx(0.0, abs=1e-9)
        assert y == pytest.approx(-4.0)

    def test_gravity_only_at_rest(self):
        acc = compute_acceleration(0.0, 0.0, make_params())
        assert acc[0] == pytest.approx(0.0)
        assert acc[1] == pytest.approx(-GRAVITY)

    def test_drag_opposes_motion(self):
        acc = compute_acceleration(800.0, 0.0, make_params())
        assert acc[0] < 0
        assert acc[0] == pytest.approx(-0.88 / 0.372)
        assert acc[1] == pytest.approx(-GRAVITY)

    def test_headwind_increases_drag(self):
        calm = compute_acceleration(800.0, 0.0, make_params())
        head = compute_acceleration(800.0, 0.0, make_params(wind=wind_vector(10.0, 90.0)))
        assert head[0] < calm[0]

    def test_reserved_flags(self):
        assert SolverOptions().reserved_flags == ()
        opts = SolverOptions(include_coriolis=True, include_aerodynamic_jump=True)
        assert opts.reserved_flags == ('include_coriolis', 'include_aerodynamic_jump')


class TestIntegrator:
    """RK4 step and the two integration modes."""

    def test_step_advances_requested_distance(self):
        state = State(x=0.0, y=0.0, vx=800.0, vy=0.0)
        rk4_step(state, 5.0, make_params())
        assert state.x == pytest.approx(5.0, abs=0.01)
        assert state.t == pytest.approx(5.0 / 800.0)
        assert state.vx < 800.0
        assert state.y < 0.0

    def test_vacuum_like_fall(self):
        """With negligible drag the step reproduces free fall."""
        params = make_params(density=0.0)
        state = State(x=0.0, y=0.0, vx=500.0, vy=0.0)
        for _ in range(10):
            rk4_step(state, 10.0, params)
        t = state.t
        assert state.y == pytest.approx(-0.5 * GRAVITY * t ** 2, rel=1e-9)
        assert state.vx == pytest.approx(500.0)

    def test_simulate_to_x_reaches_target(self):
        params = make_params()
        y = simulate_to_x(params, 800.0, 0.0, 100.0)
        assert y < params.sight_height_m
        assert simulate_to_x(params, 800.0, np.radians(1.0), 100.0) > y

    def test_marks_every_25m(self):
        traj = Trajectory(make_params(), 800.0, 0.0, step_m=2.0, max_range_m=300.0)
        ranges = [s.range_m for s in traj]
        assert ranges == [25.0 * k for k in range(13)]

    def test_no_mark_skipped_with_large_steps(self):
        traj = Trajectory(make_params(), 800.0, 0.0, step_m=50.0, max_range_m=110.0)
        assert traj.step_m == 10.0
        assert [s.range_m for s in traj] == [0.0, 25.0, 50.0, 75.0, 100.0]

    def test_step_is_clamped_below(self):
        traj = Trajectory(make_params(), 800.0, 0.0, step_m=0.1, max_range_m=50.0)
        assert traj.step_m == 1.0

    def test_sample_fields(self):
        params = make_params()
        first = next(iter(Trajectory(params, 800.0, 0.0, 2.0, 100.0)))
        assert first.range_m == 0.0
        assert first.drop_m == 0.0
        assert first.tof_s == 0.0
        assert first.wind_m == 0.0
        assert first.vel_ms == pytest.approx(800.0)
        assert first.energy_j == pytest.approx(0.5 * params.mass_kg * 800.0 ** 2)
        assert first.mach == pytest.approx(800.0 / 340.3)

    def test_restartable(self):
        traj = Trajectory(make_params(), 800.0, 0.001, 2.0, 200.0)
        assert list(traj) == list(traj)

    def test_stops_below_floor(self):
        # Slow projectile falls through -100 m long before max range
        params = make_params(bc=50.0, sight_height=0.0)
        samples = Trajectory(params, 50.0, 0.0, 5.0, 5000.0).samples()
        assert 0 < len(samples) < 5000 / 25
        assert samples[-1].range_m < 300.0

    def test_step_budget_covers_stable_flight(self):
        assert step_budget(1000.0, 2.0) >= 10 * 500
        assert step_budget(-50.0, 2.0) > 0

    def test_near_zero_bc_terminates(self):
        # Clamped BC makes drag so stiff that RK4 never gets downrange
        params = make_params(bc=0.0)
        y = simulate_to_x(params, 800.0, 0.0, 100.0)
        assert isinstance(y, float)
        samples = Trajectory(params, 800.0, 0.0, 2.0, 500.0).samples()
        assert len(samples) <= 500 / 25 + 1
