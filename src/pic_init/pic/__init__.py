"""Particle loading package.

Exports all public symbols of the sampler, basis, initializer, particle
container and diagnostics modules.
"""

from pic_init.pic.basis import (
    CARTESIAN_BASIS,
    Basis,
    basis_transform,
    local_magnetic_basis,
    to_local_basis,
)
from pic_init.pic.fluid_initializer import (
    DEFAULT_SEED,
    DEFAULT_STREAM_ID,
    FluidParticleInitializer,
)
from pic_init.pic.maxwellian import maxwellian_velocities, maxwellian_velocity
from pic_init.pic.moments import compute_cell_moments
from pic_init.pic.parallel import load_partitioned
from pic_init.pic.particles import Particle, ParticleArray, particles_to_arrays
from pic_init.pic.profiles import constant_scalar, constant_vector, thermal_speed

__all__ = [
    "CARTESIAN_BASIS",
    "DEFAULT_SEED",
    "DEFAULT_STREAM_ID",
    "Basis",
    "FluidParticleInitializer",
    "Particle",
    "ParticleArray",
    "basis_transform",
    "compute_cell_moments",
    "constant_scalar",
    "constant_vector",
    "load_partitioned",
    "local_magnetic_basis",
    "maxwellian_velocities",
    "maxwellian_velocity",
    "particles_to_arrays",
    "thermal_speed",
    "to_local_basis",
]
