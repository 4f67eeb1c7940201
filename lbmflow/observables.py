"""
Macroscopic Observable Extraction

Compute density, velocity, and derived quantities from distributions, and
the flat arrays handed to a renderer.

In LBM, macroscopic quantities are moments of the distribution function:
    - Density (0th moment): rho = sum_i(f_i)
    - Momentum (1st moment): rho*u = sum_i(f_i * e_i)

Flat outputs are row-major over (ny, nx): index y * nx + x.
"""

import numpy as np
from .lattice import EX, EY, Q


def compute_density(f):
    """
    Compute density field from distribution functions.

    rho = sum_i(f_i)

    Parameters
    ----------
    f : ndarray
        Distribution functions, shape (Q, ny, nx)

    Returns
    -------
    rho : ndarray
        Density field, shape (ny, nx)
    """
    return np.sum(f, axis=0)


def compute_velocity(f, rho=None):
    """
    Compute velocity field from distribution functions.

    rho * u = sum_i(f_i * e_i)

    Parameters
    ----------
    f : ndarray
        Distribution functions, shape (Q, ny, nx)
    rho : ndarray, optional
        Density field, shape (ny, nx). If None, computed from f.

    Returns
    -------
    ux, uy : ndarray
        Velocity fields, shape (ny, nx)
    """
    if rho is None:
        rho = compute_density(f)

    rho_ux = np.zeros(rho.shape, dtype=np.float64)
    rho_uy = np.zeros(rho.shape, dtype=np.float64)

    for i in range(Q):
        rho_ux += f[i] * EX[i]
        rho_uy += f[i] * EY[i]

    return rho_ux / rho, rho_uy / rho


def compute_vorticity(ux, uy, dx=1.0):
    """
    Compute vorticity field using central differences.

    omega = du_y/dx - du_x/dy

    Parameters
    ----------
    ux : ndarray
        X-velocity field, shape (ny, nx)
    uy : ndarray
        Y-velocity field, shape (ny, nx)
    dx : float
        Grid spacing (default 1.0 in lattice units)

    Returns
    -------
    vorticity : ndarray
        Vorticity field, shape (ny, nx)
    """
    # Central differences with periodic wrap at the edges
    duy_dx = (np.roll(uy, -1, axis=1) - np.roll(uy, 1, axis=1)) / (2.0 * dx)
    dux_dy = (np.roll(ux, -1, axis=0) - np.roll(ux, 1, axis=0)) / (2.0 * dx)

    return duy_dx - dux_dy


def compute_velocity_magnitude(ux, uy):
    """
    Compute velocity magnitude field.

    |u| = sqrt(ux^2 + uy^2)
    """
    return np.sqrt(ux * ux + uy * uy)


def velocity_magnitude_map(ux, uy):
    """Velocity magnitude as a flat row-major float64 array."""
    return compute_velocity_magnitude(ux, uy).ravel()


def obstacle_byte_map(solid_mask):
    """Solid mask as a flat row-major uint8 array of 0/1."""
    return solid_mask.astype(np.uint8).ravel()


def total_mass(f):
    """Sum of all distributions."""
    return float(np.sum(f))


def total_momentum(f):
    """Total momentum (sum_i f_i e_i over the grid)."""
    mom_x = np.sum(f * EX[:, None, None])
    mom_y = np.sum(f * EY[:, None, None])
    return float(mom_x), float(mom_y)
