"""
Simulation Configuration

Parameters fixed for the lifetime of a solver instance.
"""

from dataclasses import dataclass, field

from .boundary import EdgePolicy
from .collision import validate_omega
from .initial_conditions import UniformFlow


@dataclass
class SimulationConfig:
    """
    Configuration of a cylinder-flow simulation.

    Geometry is in grid-cell units; the cylinder centre may lie outside the
    grid. edge_policy also accepts the string names ("periodic",
    "slip_wall", "inflow_outflow").
    """
    cylinder_radius: float
    cylinder_center_x: float
    cylinder_center_y: float
    nx: int = 200
    ny: int = 100
    omega: float = 1.0
    edge_policy: EdgePolicy = EdgePolicy.PERIODIC
    initial_condition: object = field(default_factory=UniformFlow)
    inflow_velocity: float = 0.05
    max_density: float = 10.0

    def __post_init__(self):
        if int(self.nx) != self.nx or self.nx <= 0:
            raise ValueError(f"nx must be a positive integer, got {self.nx}")
        if int(self.ny) != self.ny or self.ny <= 0:
            raise ValueError(f"ny must be a positive integer, got {self.ny}")
        self.nx = int(self.nx)
        self.ny = int(self.ny)

        if self.cylinder_radius < 0:
            raise ValueError(
                f"cylinder_radius must be >= 0, got {self.cylinder_radius}"
            )
        if self.max_density <= 0:
            raise ValueError(f"max_density must be > 0, got {self.max_density}")

        self.omega = validate_omega(self.omega)
        self.edge_policy = EdgePolicy.parse(self.edge_policy)
        if self.edge_policy is EdgePolicy.INFLOW_OUTFLOW and self.nx < 2:
            raise ValueError(
                f"inflow_outflow needs nx >= 2 (inlet and outlet columns), "
                f"got {self.nx}"
            )

        if not hasattr(self.initial_condition, "velocity_field"):
            raise ValueError(
                f"initial_condition must provide velocity_field(), "
                f"got {self.initial_condition!r}"
            )

    @property
    def tau(self):
        """Relaxation time, 1/omega."""
        return 1.0 / self.omega
