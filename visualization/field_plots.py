"""
Field Visualization

Plotting functions for the solver outputs: velocity magnitude with the
obstacle overlaid, and vorticity.

The plotting functions take the flat row-major arrays the solver exposes
(velocity_magnitudes(), obstacle_map()) together with the grid size, so any
host holding those arrays can draw them.
"""

import matplotlib
import matplotlib.pyplot as plt
import numpy as np
from matplotlib.colors import LinearSegmentedColormap


def create_vorticity_colormap():
    """Diverging blue-white-red colormap for vorticity."""
    colors = ['#08306b', '#2171b5', '#6baed6', '#ffffff',
              '#fc9272', '#cb181d', '#67000d']
    return LinearSegmentedColormap.from_list('vorticity', colors, N=256)


def plot_velocity_magnitude(speed, obstacle, nx, ny, ax=None,
                            title="Velocity Magnitude"):
    """
    Plot velocity magnitude with obstacle cells masked out.

    Parameters
    ----------
    speed : ndarray
        Flat velocity magnitude, length nx*ny, row-major
    obstacle : ndarray
        Flat 0/1 obstacle flags, same layout
    nx, ny : int
        Grid size
    ax : matplotlib Axes, optional
        Axes to draw into. A new figure is created if None.

    Returns
    -------
    im : AxesImage
    """
    if ax is None:
        _, ax = plt.subplots(figsize=(10, 5))

    field = np.asarray(speed, dtype=np.float64).reshape(ny, nx).copy()
    solid = np.asarray(obstacle).reshape(ny, nx).astype(bool)
    field[solid] = np.nan

    cmap = matplotlib.colormaps['viridis'].copy()
    cmap.set_bad(color='black')

    im = ax.imshow(field, origin='lower', cmap=cmap, aspect='equal',
                   extent=[0, nx, 0, ny])
    ax.set_title(title, fontsize=12, fontweight='bold')
    ax.set_xlabel('x')
    ax.set_ylabel('y')
    plt.colorbar(im, ax=ax, label='|u|', shrink=0.8)
    return im


def plot_vorticity(vorticity, solid_mask=None, ax=None, title="Vorticity"):
    """
    Plot vorticity field with diverging colormap.

    Parameters
    ----------
    vorticity : ndarray
        Vorticity field, shape (ny, nx)
    solid_mask : ndarray, optional
        Boolean mask of cells to hide, shape (ny, nx)
    ax : matplotlib Axes, optional

    Returns
    -------
    im : AxesImage
    """
    if ax is None:
        _, ax = plt.subplots(figsize=(10, 5))

    vort = np.array(vorticity, dtype=np.float64)
    if solid_mask is not None:
        vort[solid_mask] = np.nan

    ny, nx = vort.shape
    vmax = np.nanpercentile(np.abs(vort), 98) if np.any(np.isfinite(vort)) else 0.0
    vmax = vmax if vmax > 0 else 1e-12

    im = ax.imshow(vort, origin='lower', cmap=create_vorticity_colormap(),
                   aspect='equal', vmin=-vmax, vmax=vmax,
                   extent=[0, nx, 0, ny])
    ax.set_title(title, fontsize=12, fontweight='bold')
    ax.set_xlabel('x')
    ax.set_ylabel('y')
    plt.colorbar(im, ax=ax, label='omega', shrink=0.8)
    return im


def plot_flow_field(solver, save_path=None, title_suffix=""):
    """
    Velocity magnitude and vorticity of a solver, side by side.

    Parameters
    ----------
    solver : CylinderFlowSolver
    save_path : str, optional
        Where to save the figure. If None, the figure is returned open.

    Returns
    -------
    fig : matplotlib Figure
    """
    fig, axes = plt.subplots(2, 1, figsize=(12, 10))

    plot_velocity_magnitude(solver.velocity_magnitudes(), solver.obstacle_map(),
                            solver.width, solver.height, ax=axes[0],
                            title=f"Velocity Magnitude |u| {title_suffix}")
    plot_vorticity(solver.vorticity(), solver.solid_mask, ax=axes[1],
                   title=f"Vorticity {title_suffix}")

    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=150, bbox_inches='tight', facecolor='white')
        plt.close(fig)
        print(f"Saved: {save_path}")

    return fig
