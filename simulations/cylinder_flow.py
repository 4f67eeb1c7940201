"""
Flow Around Cylinder Simulation

Runs the solver in each edge configuration:
- periodic:       fluid recirculates through all four edges
- slip_wall:      free-slip channel walls top/bottom, periodic left/right
- inflow_outflow: uniform inlet on the left, open outlet on the right

Physical setup:
- Cylinder upstream of the domain centre
- Relaxation frequency from the Reynolds number of the cylinder
- Velocity magnitude and vorticity saved as figures
"""

import os
import sys

import numpy as np

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from lbmflow import (
    CylinderFlowSolver,
    EdgePolicy,
    SimulationUnstableError,
    TwoZoneFlow,
    UniformFlow,
)
from lbmflow.collision import omega_from_reynolds


def build_solver(edge_policy, nx=200, ny=100, radius=10, re=60, u_inlet=0.05,
                 two_zone=False):
    """
    Create a solver for one edge policy.

    Parameters
    ----------
    edge_policy : EdgePolicy or str
    nx, ny : int
        Domain size
    radius : float
        Cylinder radius; the centre sits at (nx/4, ny/2)
    re : float
        Reynolds number based on cylinder diameter
    u_inlet : float
        Inlet / initial velocity (lattice units)
    two_zone : bool
        Start from the two-zone profile instead of uniform flow

    Returns
    -------
    solver : CylinderFlowSolver
    """
    omega = omega_from_reynolds(re, u_inlet, 2 * radius)

    if two_zone:
        initial = TwoZoneFlow(upstream_ux=2 * u_inlet, downstream_ux=u_inlet)
    else:
        initial = UniformFlow(ux=u_inlet)

    return CylinderFlowSolver(
        radius, nx / 4, ny / 2,
        nx=nx, ny=ny, omega=omega,
        edge_policy=edge_policy,
        initial_condition=initial,
        inflow_velocity=u_inlet,
    )


def run_case(edge_policy, num_steps=5000, report_interval=1000, save_dir=None,
             **kwargs):
    """Run one configuration and optionally save its flow field."""
    policy = EdgePolicy.parse(edge_policy)
    solver = build_solver(policy, **kwargs)

    print(f"\n[{policy.value}] {solver.nx}x{solver.ny}, "
          f"omega={solver.omega:.4f}, tau={solver.tau:.4f}, "
          f"nu={solver.viscosity:.5f}, Ma={solver.u_inlet * np.sqrt(3):.4f}")
    print(f"Solid nodes: {int(np.sum(solver.obstacle_map()))}")

    try:
        solver.run(num_steps, verbose=True, report_interval=report_interval)
    except SimulationUnstableError as exc:
        print(f"Stopped: {exc}")
        return solver

    if save_dir:
        from visualization.field_plots import plot_flow_field

        os.makedirs(save_dir, exist_ok=True)
        plot_flow_field(solver, os.path.join(save_dir, f"flow_{policy.value}.png"),
                        title_suffix=f"({policy.value}, step {solver.step_count})")

    return solver


def main():
    """Run all three edge configurations."""
    print("=" * 50)
    print("Cylinder Flow")
    print("=" * 50)

    for policy in EdgePolicy:
        run_case(policy, num_steps=5000, save_dir='results/figures')

    print("\nAnimating inflow/outflow wake...")
    from visualization.animation import LBMAnimator

    os.makedirs('results/animations', exist_ok=True)
    solver = build_solver(EdgePolicy.INFLOW_OUTFLOW)
    LBMAnimator(solver, 'results/animations/wake_inflow_outflow.gif',
                steps_per_frame=25).generate_animation(num_frames=120)


if __name__ == "__main__":
    main()
