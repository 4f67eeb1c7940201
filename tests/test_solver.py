"""
Flow Around Cylinder Solver Tests

End-to-end checks of CylinderFlowSolver: initial conditions, the step
pipeline for each edge policy, accessors, configuration and instability
detection.
"""

import pytest
import numpy as np
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from lbmflow import (
    CylinderFlowSolver,
    EdgePolicy,
    SimulationConfig,
    SimulationUnstableError,
    TwoZoneFlow,
    UniformFlow,
)
from lbmflow.lattice import Q, OPPOSITE
from lbmflow.equilibrium import compute_equilibrium, equilibrium_single_site


class TestInitialization:
    """Validate the initial state."""

    def test_uniform_equilibrium(self):
        solver = CylinderFlowSolver(10, 50, 50,
                                    initial_condition=UniformFlow(0.05, 0.0))

        np.testing.assert_allclose(solver.rho, 1.0, rtol=1e-14)
        assert np.all(solver.ux == 0.05)
        assert np.all(solver.uy == 0.0)
        np.testing.assert_allclose(solver.f[:, 0, 0],
                                   equilibrium_single_site(1.0, 0.05, 0.0))

    def test_default_grid(self):
        solver = CylinderFlowSolver(10, 50, 50)

        assert (solver.width, solver.height) == (200, 100)
        assert solver.f.shape == (Q, 100, 200)
        assert solver.f_temp.shape == (Q, 100, 200)

    def test_two_zone_profile(self):
        initial = TwoZoneFlow(upstream_ux=0.1, downstream_ux=0.04)
        solver = CylinderFlowSolver(5, 30.5, 20, nx=80, ny=40,
                                    initial_condition=initial)

        assert np.all(solver.ux[:, :31] == 0.1)
        assert np.all(solver.ux[:, 31:] == 0.04)
        np.testing.assert_allclose(solver.rho, 1.0, rtol=1e-14)

    def test_two_zone_explicit_split(self):
        initial = TwoZoneFlow(upstream_ux=0.08, downstream_ux=0.02, split_x=10)
        ux, uy = initial.velocity_field(40, 8, cylinder_center_x=30)

        assert np.all(ux[:, :10] == 0.08)
        assert np.all(ux[:, 10:] == 0.02)
        assert np.all(uy == 0.0)


class TestPeriodicFlow:
    """Validate the pipeline with periodic edges."""

    def test_uniform_flow_is_fixed_point(self):
        solver = CylinderFlowSolver(0, 50, 50,
                                    initial_condition=UniformFlow(0.05, 0.0))

        solver.step()

        assert np.max(np.abs(solver.rho - 1.0)) < 1e-6
        assert np.max(np.abs(solver.ux - 0.05)) < 1e-6
        assert np.max(np.abs(solver.uy)) < 1e-6
        assert solver.step_count == 1

    def test_mass_conservation_without_obstacle(self):
        solver = CylinderFlowSolver(0, 0, 0, nx=48, ny=32, omega=1.2)
        rng = np.random.default_rng(5)
        rho = 1.0 + 0.02 * rng.standard_normal((32, 48))
        ux = 0.05 + 0.01 * rng.standard_normal((32, 48))
        uy = 0.01 * rng.standard_normal((32, 48))
        solver.f[:] = compute_equilibrium(rho, ux, uy)

        mass_initial = solver.total_mass()
        for _ in range(200):
            solver.step()
            assert np.isclose(solver.total_mass(), mass_initial, rtol=1e-12)

    def test_momentum_conservation_without_obstacle(self):
        solver = CylinderFlowSolver(0, 0, 0, nx=40, ny=24,
                                    initial_condition=UniformFlow(0.04, 0.02))
        mom_x, mom_y = solver.total_momentum()

        solver.run(50, verbose=False)

        mom_x_final, mom_y_final = solver.total_momentum()
        assert np.isclose(mom_x_final, mom_x, rtol=1e-10)
        assert np.isclose(mom_y_final, mom_y, rtol=1e-10)


class TestObstacle:
    """Validate bounce-back inside the solver."""

    @pytest.fixture
    def solver(self):
        return CylinderFlowSolver(6, 30, 20, nx=80, ny=40)

    def test_bounce_back_symmetry(self, solver):
        for _ in range(5):
            solver.step()

        solid = solver.solid_mask
        for q in range(Q):
            np.testing.assert_array_equal(solver.f[OPPOSITE[q], solid],
                                          solver.f_temp[q, solid])

    def test_obstacle_macroscopic_fields_untouched(self, solver):
        solid = solver.solid_mask
        rho_before = solver.rho[solid].copy()
        ux_before = solver.ux[solid].copy()

        solver.run(20, verbose=False)

        np.testing.assert_array_equal(solver.rho[solid], rho_before)
        np.testing.assert_array_equal(solver.ux[solid], ux_before)

    def test_flow_slows_behind_cylinder(self, solver):
        solver.run(300, verbose=False)

        wake = solver.ux[20, 40]
        free = solver.ux[5, 40]
        assert wake < free

    def test_all_obstacle_domain(self):
        solver = CylinderFlowSolver(1000, 10, 10, nx=20, ny=10)

        solver.run(3, verbose=False)

        assert np.all(solver.obstacle_map() == 1)
        assert np.all(np.isfinite(solver.f))


class TestSlipWall:
    """Validate the slip-wall channel."""

    def test_walls_after_steps(self):
        solver = CylinderFlowSolver(4, 16, 20, nx=64, ny=40,
                                    edge_policy="slip_wall")
        solver.run(100, verbose=False)

        f = solver.f
        assert np.all(solver.uy[0] == 0.0)
        assert np.all(solver.uy[-1] == 0.0)
        np.testing.assert_array_equal(f[4, -1], f[2, -1])
        np.testing.assert_array_equal(f[8, -1], f[5, -1])
        np.testing.assert_array_equal(f[7, -1], f[6, -1])
        np.testing.assert_array_equal(f[2, 0], f[4, 0])
        np.testing.assert_array_equal(f[6, 0], f[7, 0])
        np.testing.assert_array_equal(f[5, 0], f[8, 0])

    def test_uniform_flow_stays_uniform_without_obstacle(self):
        solver = CylinderFlowSolver(0, 0, 0, nx=32, ny=16,
                                    edge_policy=EdgePolicy.SLIP_WALL)
        solver.run(20, verbose=False)

        np.testing.assert_allclose(solver.ux, 0.05, atol=1e-12)
        np.testing.assert_allclose(solver.rho, 1.0, atol=1e-12)


class TestInflowOutflow:
    """Validate the inlet/outlet channel."""

    @pytest.fixture
    def solver(self):
        solver = CylinderFlowSolver(5, 30, 25, nx=120, ny=50,
                                    edge_policy=EdgePolicy.INFLOW_OUTFLOW,
                                    inflow_velocity=0.06)
        solver.run(200, verbose=False)
        return solver

    def test_inlet_velocity_pinned(self, solver):
        assert np.all(solver.ux[:, 0] == 0.06)
        assert np.all(solver.uy[:, 0] == 0.0)

    def test_outlet_bounded(self, solver):
        f = solver.f
        f_eq = compute_equilibrium(solver.rho[:, -1], solver.ux[:, -1],
                                   solver.uy[:, -1])
        bound = np.maximum(f[:, :, -2], f_eq)

        assert np.all(f[:, :, -1] <= bound + 1e-12)

    def test_remains_physical(self, solver):
        assert np.all(np.isfinite(solver.f))
        assert np.all(solver.rho > 0.5) and np.all(solver.rho < 1.5)


class TestAccessors:
    """Validate renderer-facing outputs."""

    @pytest.fixture
    def solver(self):
        solver = CylinderFlowSolver(4, 12, 9, nx=30, ny=20)
        solver.run(10, verbose=False)
        return solver

    def test_velocity_magnitudes_layout(self, solver):
        speed = solver.velocity_magnitudes()

        assert speed.shape == (30 * 20,)
        y, x = 13, 21
        expected = np.sqrt(solver.ux[y, x] ** 2 + solver.uy[y, x] ** 2)
        assert speed[y * 30 + x] == pytest.approx(expected)

    def test_obstacle_map_layout(self, solver):
        flags = solver.obstacle_map()

        assert flags.dtype == np.uint8
        assert flags.shape == (30 * 20,)
        assert set(np.unique(flags)) <= {0, 1}
        assert flags[9 * 30 + 12] == 1
        np.testing.assert_array_equal(flags.reshape(20, 30), solver.solid_mask)

    def test_accessors_have_no_side_effects(self, solver):
        f_before = solver.f.copy()

        solver.velocity_magnitudes()
        solver.obstacle_map()
        solver.get_fields()

        np.testing.assert_array_equal(solver.f, f_before)

    def test_get_fields(self, solver):
        fields = solver.get_fields()

        assert set(fields) == {'rho', 'ux', 'uy', 'vorticity'}
        assert fields['vorticity'].shape == (20, 30)


class TestStability:
    """Validate instability detection."""

    def test_negative_density_raises(self):
        solver = CylinderFlowSolver(0, 0, 0, nx=20, ny=10)
        solver.f[:, 4, 7] = -100.0

        with pytest.raises(SimulationUnstableError) as excinfo:
            solver.step()

        assert excinfo.value.step == 1
        assert excinfo.value.density < 0.0

    def test_nan_raises(self):
        solver = CylinderFlowSolver(0, 0, 0, nx=20, ny=10)
        solver.f[:, 3, 3] = np.nan

        with pytest.raises(SimulationUnstableError):
            solver.step()

    def test_density_bound(self):
        solver = CylinderFlowSolver(0, 0, 0, nx=20, ny=10, max_density=0.5)

        with pytest.raises(SimulationUnstableError, match="unstable at step 1"):
            solver.step()

    def test_is_runtime_error(self):
        assert issubclass(SimulationUnstableError, RuntimeError)


class TestConfiguration:
    """Validate configuration handling."""

    @pytest.mark.parametrize("options", [
        {"nx": 0},
        {"ny": -4},
        {"nx": 10.5},
        {"omega": 2.0},
        {"omega": 0.0},
        {"max_density": 0.0},
        {"edge_policy": "open"},
        {"nx": 1, "edge_policy": "inflow_outflow"},
        {"initial_condition": "uniform"},
    ])
    def test_invalid_options(self, options):
        with pytest.raises(ValueError):
            CylinderFlowSolver(5, 10, 10, **options)

    def test_two_column_inflow_outflow_runs(self):
        solver = CylinderFlowSolver(0, 0, 0, nx=2, ny=3,
                                    edge_policy="inflow_outflow")

        solver.run(3, verbose=False)

        assert np.all(np.isfinite(solver.f))
        assert np.all(solver.ux[:, 0] == 0.05)

    def test_negative_radius(self):
        with pytest.raises(ValueError):
            CylinderFlowSolver(-1, 10, 10)

    def test_large_tau_warns(self):
        with pytest.warns(UserWarning):
            CylinderFlowSolver(2, 10, 5, nx=20, ny=10, omega=0.3)

    def test_from_config(self):
        config = SimulationConfig(3, 10, 5, nx=24, ny=12, omega=1.4,
                                  edge_policy="inflow_outflow")
        solver = CylinderFlowSolver.from_config(config)

        assert solver.config is config
        assert solver.edge_policy is EdgePolicy.INFLOW_OUTFLOW
        assert solver.tau == pytest.approx(1.0 / 1.4)
        solver.step()
        assert solver.step_count == 1


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
