"""Particle loading from fluid moments.

``FluidParticleInitializer`` fills a grid region with macro-particles
drawn from a local drifting Maxwellian.  For every physical cell of the
region it:

    1. evaluates density n, bulk velocity V and thermal speed Vth (and the
       magnetic field B in magnetic-basis mode) at the cell center;
    2. gives each of the ``particles_per_cell`` particles the weight
       n * cell_volume / particles_per_cell, so the weights of a cell sum
       to n * cell_volume;
    3. samples velocities from N(V, diag(Vth^2)), rotating them from the
       field-aligned frame to the lab frame in magnetic-basis mode;
    4. samples the sub-cell offset uniformly in [0, 1) per axis.

In magnetic-basis mode V and Vth are interpreted in the field-aligned
frame: component 0 is parallel to B, components 1 and 2 perpendicular.

Random numbers
--------------
Each ``load_particles`` call creates its own ``numpy.random.Generator``
from ``SeedSequence(seed, spawn_key=(stream_id, dimension, *layout.region_key))``.
Every sub-domain therefore draws from an independent stream that depends
only on the seed, the stream id and the region, not on load order or on
which thread performs the load.  ``seed=None`` seeds from OS entropy
instead.

Initializers that load different populations into the same region (ions
and electrons, say) must use distinct ``stream_id`` values.  With equal
seeds and ids they draw identical uniforms, so their sub-cell offsets
coincide and their thermal noise is perfectly correlated.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

import numpy as np

from pic_init.core.bases import LoadResult, ParticleInitializerBase, ParticleSink
from pic_init.errors import ConfigurationError, DegenerateFieldError, PhysicalValidityError
from pic_init.geometry.layout import GridLayout
from pic_init.pic.basis import DEFAULT_FIELD_TOLERANCE, Basis, basis_transform, local_magnetic_basis
from pic_init.pic.maxwellian import maxwellian_velocities
from pic_init.pic.particles import Particle
from pic_init.pic.profiles import ScalarProfile, VectorProfile

if TYPE_CHECKING:
    from pic_init.config import InitializerConfig

logger = logging.getLogger(__name__)

DEFAULT_SEED: int = 0
DEFAULT_STREAM_ID: int = 0


class FluidParticleInitializer(ParticleInitializerBase):
    """Load particles from density, bulk-velocity and thermal-velocity profiles.

    The initializer holds only immutable configuration and references to
    the profile callables; it can be reused for any number of regions and
    called concurrently as long as each call targets its own sink.

    Args:
        density: Scalar profile n(position), must be >= 0.
        bulk_velocity: Vector profile V(position).
        thermal_velocity: Vector profile Vth(position), components >= 0.
        particle_charge: Charge given to every loaded particle.
        particles_per_cell: Macro-particles per physical cell (0 loads nothing).
        basis: Frame in which V and Vth are given.
        magnetic_field: Vector profile B(position); required iff ``basis``
            is :attr:`Basis.MAGNETIC`.
        seed: Base seed of the per-region random streams (``None`` = entropy).
        stream_id: Identifier of the particle population; separates the
            random streams of initializers sharing a seed and a region.
        field_tolerance: |B| below which the field direction is undefined.

    Raises:
        ConfigurationError: On an inconsistent or invalid configuration.
    """

    def __init__(
        self,
        density: ScalarProfile,
        bulk_velocity: VectorProfile,
        thermal_velocity: VectorProfile,
        particle_charge: float,
        particles_per_cell: int,
        basis: Basis | str = Basis.CARTESIAN,
        magnetic_field: VectorProfile | None = None,
        seed: int | None = DEFAULT_SEED,
        field_tolerance: float = DEFAULT_FIELD_TOLERANCE,
        stream_id: int = DEFAULT_STREAM_ID,
    ) -> None:
        for name, profile in (
            ("density", density),
            ("bulk_velocity", bulk_velocity),
            ("thermal_velocity", thermal_velocity),
        ):
            if not callable(profile):
                raise ConfigurationError(f"{name} profile must be callable")

        try:
            basis = Basis(basis)
        except ValueError as exc:
            raise ConfigurationError(f"unknown basis {basis!r}") from exc

        if basis is Basis.MAGNETIC and magnetic_field is None:
            raise ConfigurationError(
                "magnetic basis requested without a magnetic field profile"
            )
        if magnetic_field is not None and not callable(magnetic_field):
            raise ConfigurationError("magnetic_field profile must be callable")

        if isinstance(particles_per_cell, bool) or not isinstance(
            particles_per_cell, (int, np.integer)
        ):
            raise ConfigurationError(
                f"particles_per_cell must be an integer, got {particles_per_cell!r}"
            )
        if particles_per_cell < 0:
            raise ConfigurationError(
                f"particles_per_cell must be non-negative, got {particles_per_cell}"
            )
        if not np.isfinite(particle_charge):
            raise ConfigurationError(f"particle_charge must be finite, got {particle_charge}")
        if seed is not None and seed < 0:
            raise ConfigurationError(f"seed must be non-negative, got {seed}")
        if isinstance(stream_id, bool) or not isinstance(stream_id, (int, np.integer)):
            raise ConfigurationError(f"stream_id must be an integer, got {stream_id!r}")
        if stream_id < 0:
            raise ConfigurationError(f"stream_id must be non-negative, got {stream_id}")
        if not field_tolerance > 0.0:
            raise ConfigurationError(f"field_tolerance must be positive, got {field_tolerance}")

        self.density = density
        self.bulk_velocity = bulk_velocity
        self.thermal_velocity = thermal_velocity
        self.particle_charge = float(particle_charge)
        self.particles_per_cell = int(particles_per_cell)
        self.basis = basis
        self.magnetic_field = magnetic_field
        self.seed = seed
        self.stream_id = int(stream_id)
        self.field_tolerance = float(field_tolerance)

    @classmethod
    def from_config(
        cls,
        config: InitializerConfig,
        density: ScalarProfile,
        bulk_velocity: VectorProfile,
        thermal_velocity: VectorProfile,
        magnetic_field: VectorProfile | None = None,
    ) -> FluidParticleInitializer:
        """Build an initializer from a validated :class:`InitializerConfig`."""
        return cls(
            density,
            bulk_velocity,
            thermal_velocity,
            particle_charge=config.particle_charge,
            particles_per_cell=config.particles_per_cell,
            basis=config.basis,
            magnetic_field=magnetic_field,
            seed=config.seed,
            field_tolerance=config.field_tolerance,
            stream_id=config.stream_id,
        )

    # -----------------------------------------------------------------
    # Random streams
    # -----------------------------------------------------------------

    def make_rng(self, layout: GridLayout) -> np.random.Generator:
        """Return a fresh generator for the sub-stream of ``layout``."""
        if self.seed is None:
            seq = np.random.SeedSequence()
        else:
            seq = np.random.SeedSequence(
                self.seed,
                spawn_key=(self.stream_id, layout.dimension, *layout.region_key),
            )
        return np.random.default_rng(seq)

    # -----------------------------------------------------------------
    # Loading
    # -----------------------------------------------------------------

    def load_particles(
        self,
        particles: ParticleSink,
        layout: GridLayout,
        rng: np.random.Generator | None = None,
    ) -> LoadResult:
        """Append particles for every physical cell of ``layout``.

        Cells are visited in lexicographic order of their index.  The sink
        is only appended to; on error, particles of the cells processed
        before the failing one stay in it.

        Args:
            particles: Sink receiving :class:`Particle` records.
            layout: Region to load.
            rng: Generator to use instead of the region's seeded stream.

        Returns:
            Summary of the load.

        Raises:
            PhysicalValidityError: If a profile yields a negative or
                non-finite density, a negative or non-finite thermal
                speed, or a malformed value.  No particle of the offending
                cell is appended.
        """
        if rng is None:
            rng = self.make_rng(layout)

        ndim = layout.dimension
        cell_volume = layout.cell_volume
        npc = self.particles_per_cell
        result = LoadResult()

        logger.debug(
            "Loading %dD region %s (%d cells, %d particles/cell, %s basis)",
            ndim, layout.region_key, layout.n_physical_cells, npc, self.basis.value,
        )

        for icell in layout.physical_cells():
            position = layout.cell_centered_coordinates(*icell)
            n, V, Vth = self._evaluate_moments(icell, position)
            result.n_cells += 1

            if npc == 0:
                continue

            weight = n * cell_volume / npc

            basis = None
            if self.basis is Basis.MAGNETIC:
                basis = self._local_basis(icell, position, result)

            velocities = maxwellian_velocities(V, Vth, rng, npc)
            if basis is not None:
                velocities = basis_transform(basis, velocities)

            deltas = rng.random((npc, ndim))

            for v, delta in zip(velocities.tolist(), deltas.tolist()):
                particles.append(
                    Particle(
                        weight=weight,
                        charge=self.particle_charge,
                        icell=icell,
                        delta=tuple(delta),
                        v=tuple(v),
                    )
                )

            result.n_particles += npc
            result.total_weight += weight * npc

        if result.degenerate_cells:
            logger.warning(
                "Region %s: |B| below %.1e in %d cell(s); used Cartesian basis there",
                layout.region_key, self.field_tolerance, len(result.degenerate_cells),
            )
        logger.info(
            "Loaded %d particles in %d cells of region %s",
            result.n_particles, result.n_cells, layout.region_key,
        )
        return result

    # -----------------------------------------------------------------
    # Profile evaluation
    # -----------------------------------------------------------------

    def _evaluate_moments(
        self,
        icell: tuple[int, ...],
        position: tuple[float, ...],
    ) -> tuple[float, np.ndarray, np.ndarray]:
        n = np.asarray(self.density(*position), dtype=np.float64)
        if n.size != 1:
            raise PhysicalValidityError(
                f"density profile must return a scalar, got shape {n.shape}",
                icell, position,
            )
        n = float(n.reshape(()))
        if not np.isfinite(n) or n < 0.0:
            raise PhysicalValidityError(
                f"density must be finite and non-negative, got {n}", icell, position
            )

        V = _as_vector(self.bulk_velocity(*position), "bulk velocity", icell, position)
        Vth = _as_vector(self.thermal_velocity(*position), "thermal velocity", icell, position)
        if np.any(Vth < 0.0):
            raise PhysicalValidityError(
                f"thermal speed must be non-negative, got {Vth}", icell, position
            )
        return n, V, Vth

    def _local_basis(
        self,
        icell: tuple[int, ...],
        position: tuple[float, ...],
        result: LoadResult,
    ) -> np.ndarray | None:
        B = _as_vector(self.magnetic_field(*position), "magnetic field", icell, position,
                       finite=False)
        try:
            return local_magnetic_basis(B, self.field_tolerance)
        except DegenerateFieldError as exc:
            logger.debug("Cell %s: %s; using Cartesian basis", icell, exc)
            result.degenerate_cells.append(icell)
            return None


def _as_vector(
    value: Sequence[float] | np.ndarray,
    name: str,
    icell: tuple[int, ...],
    position: tuple[float, ...],
    finite: bool = True,
) -> np.ndarray:
    vec = np.asarray(value, dtype=np.float64)
    if vec.shape != (3,):
        raise PhysicalValidityError(
            f"{name} profile must return 3 components, got shape {vec.shape}",
            icell, position,
        )
    if finite and not np.all(np.isfinite(vec)):
        raise PhysicalValidityError(f"{name} must be finite, got {vec}", icell, position)
    return vec
