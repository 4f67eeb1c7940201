"""
Streaming Step Implementations

Propagation of distribution functions along lattice velocities.

The streaming step moves each distribution f_i from site x to site x + e_i:
    f_i(x + e_i, t + dt) = f_i^out(x, t)

The solver uses the pull form, f_i(x) = f_i(x - e_i), reading the current
buffer and writing a separate scratch buffer. Nothing is written to the
buffer being read, so the result does not depend on traversal order.

Out-of-range sources are handled per axis by the edge policy:
- wrapped axis: the source index is taken modulo the grid extent
- open axis: the source is skipped and the destination keeps the site's own
  pre-streaming value, to be fixed by the boundary stage
"""

import numpy as np
from numba import njit, prange
from .lattice import EX, EY, Q


def stream_periodic(f):
    """
    Streaming step with periodic boundary conditions.

    Reference implementation using np.roll (push form).

    Parameters
    ----------
    f : ndarray
        Distribution functions, shape (Q, ny, nx)

    Returns
    -------
    f_streamed : ndarray
        Post-streaming distribution
    """
    f_out = np.zeros_like(f)

    for i in range(Q):
        # Roll in x-direction by ex[i], y-direction by ey[i]
        f_out[i] = np.roll(np.roll(f[i], EX[i], axis=1), EY[i], axis=0)

    return f_out


@njit(parallel=True, cache=True)
def stream_pull_numba(f, f_out, ex, ey, wrap_x, wrap_y):
    """
    Numba-accelerated pull streaming.

    Parameters
    ----------
    f : ndarray
        Input distribution functions, shape (Q, ny, nx)
    f_out : ndarray
        Output distribution functions, shape (Q, ny, nx)
    ex, ey : ndarray
        Lattice velocity components
    wrap_x, wrap_y : bool
        Periodic wrapping along each axis
    """
    q, ny, nx = f.shape

    for j in prange(ny):
        for i in range(nx):
            for k in range(q):
                i_src = i - ex[k]
                j_src = np.int64(j) - ey[k]

                if wrap_x:
                    i_src = (i_src + nx) % nx
                elif i_src < 0 or i_src >= nx:
                    f_out[k, j, i] = f[k, j, i]
                    continue

                if wrap_y:
                    j_src = (j_src + ny) % ny
                elif j_src < 0 or j_src >= ny:
                    f_out[k, j, i] = f[k, j, i]
                    continue

                f_out[k, j, i] = f[k, j_src, i_src]


def stream(f, f_out, policy):
    """
    Stream f into f_out according to the edge policy.

    Parameters
    ----------
    f : ndarray
        Distribution functions, shape (Q, ny, nx). Read only.
    f_out : ndarray
        Scratch buffer, shape (Q, ny, nx). Fully overwritten.
    policy : EdgePolicy
        Active edge policy

    Returns
    -------
    f_out : ndarray
        The scratch buffer
    """
    stream_pull_numba(f, f_out, EX, EY, policy.wrap_x, policy.wrap_y)
    return f_out
