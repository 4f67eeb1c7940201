"""
lbmflow - D2Q9 lattice-Boltzmann flow around a cylinder.
"""

from .boundary import EdgePolicy
from .collision import SimulationUnstableError
from .config import SimulationConfig
from .initial_conditions import TwoZoneFlow, UniformFlow
from .solver import CylinderFlowSolver

__version__ = "0.1.0"

__all__ = [
    "CylinderFlowSolver",
    "EdgePolicy",
    "SimulationConfig",
    "SimulationUnstableError",
    "TwoZoneFlow",
    "UniformFlow",
]
