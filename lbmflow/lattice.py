"""
D2Q9 Lattice Constants

Defines the D2Q9 lattice model used by every stage of the solver.
"""
import numpy as np

# D2Q9 lattice velocities
#     6   2   5
#       \ | /
#     3 - 0 - 1
#       / | \
#     7   4   8

# Lattice velocity components
EX = np.array([0, 1, 0, -1, 0, 1, -1, -1, 1], dtype=np.int32)
EY = np.array([0, 0, 1, 0, -1, 1, 1, -1, -1], dtype=np.int32)

# Float copies for the numba kernels
EX_F = EX.astype(np.float64)
EY_F = EY.astype(np.float64)

# Lattice weights
W = np.array([4/9, 1/9, 1/9, 1/9, 1/9, 1/36, 1/36, 1/36, 1/36], dtype=np.float64)

# Opposite direction indices (for bounce-back)
OPPOSITE = np.array([0, 3, 4, 1, 2, 7, 8, 5, 6], dtype=np.int32)

# Vertical mirror indices, EY flipped and EX kept (for slip walls)
MIRROR_Y = np.array([0, 1, 4, 3, 2, 8, 7, 6, 5], dtype=np.int32)

# Directions pointing into the top wall / bottom wall
UPWARD = np.array([2, 5, 6], dtype=np.int32)
DOWNWARD = np.array([4, 7, 8], dtype=np.int32)

# Lattice sound speed squared
CS2 = 1.0 / 3.0

# Number of lattice velocities
Q = 9
