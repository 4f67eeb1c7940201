"""
Equilibrium Distribution Functions

Maxwell-Boltzmann equilibrium for the D2Q9 lattice.

The equilibrium distribution is the Maxwell-Boltzmann distribution truncated
to second order in velocity. With c_s^2 = 1/3 the coefficients become
integers and halves:

    f_i^eq = w_i * rho * [1 + 3 (e_i . u) + 4.5 (e_i . u)^2 - 1.5 u^2]

where:
    - w_i are the lattice weights
    - e_i are the lattice velocities
    - rho is the density
    - u = (ux, uy) is the macroscopic velocity

The literal coefficients are used everywhere (rather than 1/c_s^2 etc.) so
that the field, single-site and kernel versions agree bit for bit.
"""

import numpy as np
from numba import njit
from .lattice import EX, EY, W, Q


@njit(cache=True)
def equilibrium_component(w, ex, ey, rho, ux, uy):
    """
    Equilibrium value for one direction at one site.

    Scalar helper shared by the collision and boundary kernels.
    """
    eu = ex * ux + ey * uy
    u_sq = ux * ux + uy * uy
    return w * rho * (1.0 + 3.0 * eu + 4.5 * eu * eu - 1.5 * u_sq)


def compute_equilibrium(rho, ux, uy):
    """
    Compute equilibrium distribution for all lattice sites.

    Uses vectorized NumPy operations.

    Parameters
    ----------
    rho : ndarray
        Density field, shape (ny, nx)
    ux : ndarray
        X-velocity field, shape (ny, nx)
    uy : ndarray
        Y-velocity field, shape (ny, nx)

    Returns
    -------
    f_eq : ndarray
        Equilibrium distribution, shape (Q, ny, nx)
    """
    rho = np.asarray(rho, dtype=np.float64)
    f_eq = np.zeros((Q,) + rho.shape, dtype=np.float64)

    u_sq = ux * ux + uy * uy

    for i in range(Q):
        eu = EX[i] * ux + EY[i] * uy
        f_eq[i] = W[i] * rho * (1.0 + 3.0 * eu + 4.5 * eu * eu - 1.5 * u_sq)

    return f_eq


def equilibrium_single_site(rho, ux, uy):
    """
    Compute equilibrium distribution for a single lattice site.

    Used by the inflow boundary and by tests.

    Parameters
    ----------
    rho : float
        Density at the site
    ux : float
        X-velocity at the site
    uy : float
        Y-velocity at the site

    Returns
    -------
    f_eq : ndarray
        Equilibrium distribution, shape (Q,)
    """
    f_eq = np.zeros(Q, dtype=np.float64)
    u_sq = ux * ux + uy * uy

    for i in range(Q):
        eu = EX[i] * ux + EY[i] * uy
        f_eq[i] = W[i] * rho * (1.0 + 3.0 * eu + 4.5 * eu * eu - 1.5 * u_sq)

    return f_eq
