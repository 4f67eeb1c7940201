"""
Boundary Condition Handlers

Implements the boundary stage of the solver:
- Bounce-back on the cylinder (no-slip, always active)
- Periodic edges (handled in streaming)
- Slip walls on top/bottom (specular reflection)
- Inflow/outflow on left/right (equilibrium inlet, extrapolated outlet)

Exactly one edge policy is active per solver. Edge corrections run first and
never touch obstacle cells; bounce-back runs last.
"""

from enum import Enum

import numpy as np
from numba import njit, prange
from .lattice import EX_F, EY_F, W, Q, OPPOSITE, MIRROR_Y, UPWARD, DOWNWARD
from .equilibrium import equilibrium_component, equilibrium_single_site


class EdgePolicy(Enum):
    """Treatment of the grid edges."""
    PERIODIC = "periodic"
    SLIP_WALL = "slip_wall"
    INFLOW_OUTFLOW = "inflow_outflow"

    @property
    def wrap_x(self):
        """Whether streaming wraps around the left/right edges."""
        return self is not EdgePolicy.INFLOW_OUTFLOW

    @property
    def wrap_y(self):
        """Whether streaming wraps around the top/bottom edges."""
        return self is not EdgePolicy.SLIP_WALL

    @classmethod
    def parse(cls, value):
        """Accept an EdgePolicy or its string value ("slip_wall", ...)."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            choices = ", ".join(p.value for p in cls)
            raise ValueError(
                f"Unknown edge policy {value!r}, expected one of: {choices}"
            ) from None


def create_cylinder_mask(nx, ny, cx, cy, radius):
    """
    Create a solid mask for a circular cylinder.

    A cell is solid when its centre lies strictly inside the circle, so
    cells exactly on the circle stay fluid.

    Parameters
    ----------
    nx, ny : int
        Grid dimensions
    cx, cy : float
        Cylinder center coordinates (may lie outside the grid)
    radius : float
        Cylinder radius

    Returns
    -------
    mask : ndarray
        Boolean mask (True for solid), shape (ny, nx)
    """
    x = np.arange(nx, dtype=np.float64)
    y = np.arange(ny, dtype=np.float64)
    X, Y = np.meshgrid(x, y)

    dist_sq = (X - cx) ** 2 + (Y - cy) ** 2
    return dist_sq < radius * radius


def apply_bounce_back(f, f_pre, solid_mask):
    """
    Apply bounce-back on solid nodes, in place.

    Each solid node sends back what it held before collision:
        f_{i*}(x_s) = f_i^pre(x_s)

    where i* is the opposite direction of i. Reading from f_pre keeps the
    swap free of aliasing.

    Parameters
    ----------
    f : ndarray
        Distribution functions, shape (Q, ny, nx). Modified in place.
    f_pre : ndarray
        Post-streaming, pre-collision capture, shape (Q, ny, nx)
    solid_mask : ndarray
        Boolean mask for solid nodes, shape (ny, nx)

    Returns
    -------
    f : ndarray
        The same array, for chaining
    """
    for i in range(Q):
        f[OPPOSITE[i], solid_mask] = f_pre[i, solid_mask]

    return f


def apply_slip_walls(f, uy, solid_mask):
    """
    Apply slip walls on the top (y = ny-1) and bottom (y = 0) rows, in place.

    The vertical velocity is zeroed and the distributions pointing into the
    wall are mirrored into their vertical counterparts:
        top:    f4 <- f2, f8 <- f5, f7 <- f6
        bottom: f2 <- f4, f6 <- f7, f5 <- f8

    Parameters
    ----------
    f : ndarray
        Distribution functions, shape (Q, ny, nx). Modified in place.
    uy : ndarray
        Y-velocity field, shape (ny, nx). Modified in place.
    solid_mask : ndarray
        Boolean mask for solid nodes, shape (ny, nx)
    """
    for row, incoming in ((-1, UPWARD), (0, DOWNWARD)):
        fluid = ~solid_mask[row]
        uy[row, fluid] = 0.0
        for i in incoming:
            f[MIRROR_Y[i], row, fluid] = f[i, row, fluid]

    return f


def apply_inflow_outflow(f, rho, ux, uy, solid_mask, u_inlet):
    """
    Apply inflow at x = 0 and outflow at x = nx-1, in place.

    Inlet (Dirichlet velocity): every distribution is replaced by the
    equilibrium for rho = 1 and u = (u_inlet, 0); the macroscopic fields of
    the column are pinned to the same state.

    Outlet: directions with e_x < 0 are copied from the neighbour on the
    left (zero gradient); the other directions are set to the equilibrium
    of the cell's own post-collision rho, ux, uy.

    Parameters
    ----------
    f : ndarray
        Distribution functions, shape (Q, ny, nx). Modified in place.
    rho, ux, uy : ndarray
        Macroscopic fields, shape (ny, nx). Inlet column modified in place.
    solid_mask : ndarray
        Boolean mask for solid nodes, shape (ny, nx)
    u_inlet : float
        Inlet x-velocity
    """
    # Inlet
    fluid = ~solid_mask[:, 0]
    f_in = equilibrium_single_site(1.0, u_inlet, 0.0)
    f[:, fluid, 0] = f_in[:, None]
    rho[fluid, 0] = np.sum(f_in)
    ux[fluid, 0] = u_inlet
    uy[fluid, 0] = 0.0

    # Outlet
    apply_outlet_numba(f, rho, ux, uy, solid_mask, EX_F, EY_F, W)

    return f


@njit(parallel=True, cache=True)
def apply_outlet_numba(f, rho, ux, uy, solid_mask, ex, ey, w):
    """Zero-gradient outlet on the last column, written in place."""
    q, ny, nx = f.shape
    last = nx - 1

    for j in prange(ny):
        if solid_mask[j, last]:
            continue
        for k in range(q):
            if ex[k] < 0.0:
                f[k, j, last] = f[k, j, last - 1]
            else:
                f[k, j, last] = equilibrium_component(
                    w[k], ex[k], ey[k], rho[j, last], ux[j, last], uy[j, last]
                )


def apply_edge_policy(policy, f, rho, ux, uy, solid_mask, u_inlet=0.05):
    """Dispatch the edge correction for the active policy."""
    if policy is EdgePolicy.SLIP_WALL:
        apply_slip_walls(f, uy, solid_mask)
    elif policy is EdgePolicy.INFLOW_OUTFLOW:
        apply_inflow_outflow(f, rho, ux, uy, solid_mask, u_inlet)
    return f
