"""
Collision Operators

BGK collision for the D2Q9 solver.

The collision step models molecular interactions and drives the distribution
toward equilibrium. The relaxation frequency omega = 1/tau controls the
viscosity:

    nu = c_s^2 * (1/omega - 0.5) * dt

where c_s^2 = 1/3 for D2Q9 and dt = 1 in lattice units.

Stability requires 0 < omega < 2 (tau > 0.5, nu > 0).
"""

import warnings

import numpy as np
from numba import njit, prange
from .lattice import EX_F, EY_F, W
from .equilibrium import equilibrium_component


class SimulationUnstableError(RuntimeError):
    """
    Raised when a fluid cell's density leaves the physical range.

    Once density hits zero, goes negative or blows up, the velocity
    division degenerates and every later step is garbage.
    """

    def __init__(self, step, x, y, density):
        self.step = step
        self.x = x
        self.y = y
        self.density = density
        super().__init__(
            f"Simulation became unstable at step {step}: "
            f"density {density!r} at cell (x={x}, y={y}). "
            f"Reduce omega or the flow velocity."
        )


def tau_from_viscosity(nu, dt=1.0, cs2=1.0/3.0):
    """
    Compute relaxation time from kinematic viscosity.

    tau = nu / (c_s^2 * dt) + 0.5
    """
    return nu / (cs2 * dt) + 0.5


def viscosity_from_tau(tau, dt=1.0, cs2=1.0/3.0):
    """
    Compute kinematic viscosity from relaxation time.

    nu = c_s^2 * (tau - 0.5) * dt

    Parameters
    ----------
    tau : float
        Relaxation time (must be > 0.5)
    dt : float
        Time step (default 1.0 in lattice units)
    cs2 : float
        Sound speed squared (default 1/3)

    Returns
    -------
    nu : float
        Kinematic viscosity
    """
    if tau <= 0.5:
        raise ValueError(f"tau must be > 0.5 for stability, got {tau}")
    return cs2 * (tau - 0.5) * dt


def omega_from_reynolds(re, u_ref, length):
    """
    Relaxation frequency for a target Reynolds number.

    Re = U * L / nu  =>  nu = U * L / Re,  omega = 1 / tau(nu)

    Parameters
    ----------
    re : float
        Reynolds number
    u_ref : float
        Reference velocity (lattice units)
    length : float
        Reference length, e.g. the cylinder diameter (lattice units)

    Returns
    -------
    omega : float
        Relaxation frequency
    """
    if re <= 0:
        raise ValueError(f"Reynolds number must be > 0, got {re}")
    nu = u_ref * length / re
    return 1.0 / tau_from_viscosity(nu)


def validate_omega(omega, name="omega"):
    """
    Validate that the relaxation frequency is in the stable range.

    Raises
    ------
    ValueError
        If omega is not in (0, 2), i.e. tau <= 0.5

    Returns
    -------
    omega : float
        Validated omega value
    """
    if not 0.0 < omega < 2.0:
        raise ValueError(
            f"{name} must be in (0, 2) for stability (got {omega}). "
            f"This corresponds to tau > 0.5 and nu > 0."
        )
    tau = 1.0 / omega
    if tau > 2.0:
        warnings.warn(
            f"{name} = {omega} gives tau = {tau:.3f}, which may cause slow "
            f"convergence. Consider tau in range (0.5, 2.0)."
        )
    return float(omega)


def bgk_collision(f, f_eq, omega):
    """
    BGK (Bhatnagar-Gross-Krook) collision operator.

    f_out = f - omega * (f - f_eq)

    Reference NumPy version over the whole field.

    Parameters
    ----------
    f : ndarray
        Distribution functions (Q, ny, nx)
    f_eq : ndarray
        Equilibrium distribution (Q, ny, nx)
    omega : float
        Relaxation frequency

    Returns
    -------
    f_out : ndarray
        Post-collision distribution
    """
    return f - omega * (f - f_eq)


@njit(parallel=True, cache=True)
def collide_bgk_numba(f, rho, ux, uy, solid_mask, omega, ex, ey, w):
    """
    Moments and BGK relaxation in one pass, in place.

    Solid nodes are skipped: neither f nor the macroscopic fields are
    touched there. A node with non-positive (or NaN) density gets NaN
    velocity and is left unrelaxed.

    Parameters
    ----------
    f : ndarray
        Distribution functions, shape (Q, ny, nx). Modified in place.
    rho : ndarray
        Output density field, shape (ny, nx)
    ux, uy : ndarray
        Output velocity fields, shape (ny, nx)
    solid_mask : ndarray
        Boolean solid mask, shape (ny, nx)
    omega : float
        Relaxation frequency (1/tau)
    ex, ey : ndarray
        Lattice velocities
    w : ndarray
        Lattice weights
    """
    q, ny, nx = f.shape

    for j in prange(ny):
        for i in range(nx):
            if solid_mask[j, i]:
                continue

            rho_local = 0.0
            rho_ux = 0.0
            rho_uy = 0.0
            for k in range(q):
                f_k = f[k, j, i]
                rho_local += f_k
                rho_ux += ex[k] * f_k
                rho_uy += ey[k] * f_k

            rho[j, i] = rho_local

            if not rho_local > 0.0:
                ux[j, i] = np.nan
                uy[j, i] = np.nan
                continue

            ux_local = rho_ux / rho_local
            uy_local = rho_uy / rho_local
            ux[j, i] = ux_local
            uy[j, i] = uy_local

            for k in range(q):
                f_eq = equilibrium_component(w[k], ex[k], ey[k],
                                             rho_local, ux_local, uy_local)
                f[k, j, i] = f[k, j, i] - omega * (f[k, j, i] - f_eq)


def collide(f, rho, ux, uy, solid_mask, omega):
    """
    BGK collision on all fluid nodes, in place.

    Parameters
    ----------
    f : ndarray
        Distribution functions, shape (Q, ny, nx). Modified in place.
    rho, ux, uy : ndarray
        Macroscopic fields, shape (ny, nx). Overwritten on fluid nodes.
    solid_mask : ndarray
        Boolean solid mask, shape (ny, nx)
    omega : float
        Relaxation frequency

    Returns
    -------
    rho, ux, uy : ndarray
        The updated macroscopic fields
    """
    collide_bgk_numba(f, rho, ux, uy, solid_mask, omega,
                      EX_F, EY_F, W)
    return rho, ux, uy


def check_stability(rho, solid_mask, max_density, step=0):
    """
    Verify every fluid density is finite and in (0, max_density].

    Raises
    ------
    SimulationUnstableError
        At the first offending fluid cell (row-major order)
    """
    bad = ~solid_mask & ~((rho > 0.0) & (rho <= max_density))
    if np.any(bad):
        y, x = np.argwhere(bad)[0]
        raise SimulationUnstableError(step, int(x), int(y), float(rho[y, x]))
