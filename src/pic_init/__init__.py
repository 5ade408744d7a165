"""Fluid-moment particle loading for particle-in-cell plasma simulations.

Turns density, bulk-velocity, thermal-velocity (and optionally magnetic
field) profiles into macro-particles whose ensemble statistics reproduce
those moments.
"""

from pic_init.errors import (
    ConfigurationError,
    DegenerateFieldError,
    PhysicalValidityError,
    PicInitError,
)
from pic_init.geometry import GridLayout
from pic_init.pic import (
    Basis,
    FluidParticleInitializer,
    Particle,
    ParticleArray,
    basis_transform,
    local_magnetic_basis,
    maxwellian_velocity,
)

__version__ = "0.1.0"

__all__ = [
    "Basis",
    "ConfigurationError",
    "DegenerateFieldError",
    "FluidParticleInitializer",
    "GridLayout",
    "Particle",
    "ParticleArray",
    "PhysicalValidityError",
    "PicInitError",
    "basis_transform",
    "local_magnetic_basis",
    "maxwellian_velocity",
]
