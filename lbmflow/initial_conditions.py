"""
Initial Velocity Profiles

Selectable initial conditions for the solver. Each profile returns the
velocity field the distribution is initialised to (at rho = 1).
"""

import numpy as np


class UniformFlow:
    """
    The same velocity everywhere.

    Parameters
    ----------
    ux, uy : float
        Initial velocity (lattice units)
    """

    def __init__(self, ux=0.05, uy=0.0):
        self.ux = ux
        self.uy = uy

    def velocity_field(self, nx, ny, cylinder_center_x):
        ux = np.full((ny, nx), self.ux, dtype=np.float64)
        uy = np.full((ny, nx), self.uy, dtype=np.float64)
        return ux, uy

    def __repr__(self):
        return f"UniformFlow(ux={self.ux}, uy={self.uy})"


class TwoZoneFlow:
    """
    Faster flow upstream of the cylinder, slower downstream.

    Cells with x < split_x get upstream_ux, the rest downstream_ux.

    Parameters
    ----------
    upstream_ux, downstream_ux : float
        X-velocity on either side of the split
    uy : float
        Y-velocity everywhere
    split_x : float, optional
        Split position. Defaults to the cylinder centre x.
    """

    def __init__(self, upstream_ux=0.1, downstream_ux=0.05, uy=0.0, split_x=None):
        self.upstream_ux = upstream_ux
        self.downstream_ux = downstream_ux
        self.uy = uy
        self.split_x = split_x

    def velocity_field(self, nx, ny, cylinder_center_x):
        split = cylinder_center_x if self.split_x is None else self.split_x
        x = np.arange(nx, dtype=np.float64)
        row = np.where(x < split, self.upstream_ux, self.downstream_ux)
        ux = np.tile(row, (ny, 1))
        uy = np.full((ny, nx), self.uy, dtype=np.float64)
        return ux, uy

    def __repr__(self):
        return (f"TwoZoneFlow(upstream_ux={self.upstream_ux}, "
                f"downstream_ux={self.downstream_ux}, uy={self.uy}, "
                f"split_x={self.split_x})")
