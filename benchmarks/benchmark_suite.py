"""
Benchmark Suite

Performance of CylinderFlowSolver.step() for each edge policy across grid
sizes, in Million Lattice Updates Per Second.
"""

import sys
import os
import time

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from lbmflow import CylinderFlowSolver, EdgePolicy


def benchmark_policy(nx, ny, edge_policy, num_steps, warmup_steps=20):
    """
    Benchmark one solver configuration.

    Returns
    -------
    mlups : float
        Million Lattice Updates Per Second
    """
    solver = CylinderFlowSolver(ny / 10, nx / 4, ny / 2, nx=nx, ny=ny,
                                edge_policy=edge_policy)

    # Warmup (JIT compilation)
    for _ in range(warmup_steps):
        solver.step()

    start = time.perf_counter()
    for _ in range(num_steps):
        solver.step()
    elapsed = time.perf_counter() - start

    return num_steps * nx * ny / elapsed / 1e6


def run_full_benchmark(grid_sizes=None, num_steps=200):
    """
    Benchmark every edge policy on every grid size.

    Returns
    -------
    results : dict
        {policy value: {(nx, ny): mlups}}
    """
    if grid_sizes is None:
        grid_sizes = [(200, 100), (400, 200), (800, 400)]

    results = {}

    print("=" * 60)
    print("LBM Cylinder Solver Benchmark")
    print("=" * 60)
    print(f"Steps: {num_steps}")
    print()

    for policy in EdgePolicy:
        print(f"Benchmarking {policy.value}...")
        print("-" * 40)
        results[policy.value] = {}
        for nx, ny in grid_sizes:
            mlups = benchmark_policy(nx, ny, policy, num_steps)
            results[policy.value][(nx, ny)] = mlups
            print(f"  {nx:4d} x {ny:4d}: {mlups:8.2f} MLUPS")
        print()

    print("=" * 60)
    print("SUMMARY: Performance Comparison (MLUPS)")
    print("=" * 60)
    header = f"{'Grid':<12}" + "".join(f"{p.value:>16}" for p in EdgePolicy)
    print(header)
    print("-" * 60)
    for nx, ny in grid_sizes:
        row = "".join(f"{results[p.value][(nx, ny)]:>16.2f}" for p in EdgePolicy)
        print(f"{nx:4d}x{ny:<4d}    {row}")
    print("=" * 60)

    return results


if __name__ == "__main__":
    run_full_benchmark()
