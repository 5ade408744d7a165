"""Macro-particle records and an append-only container for them.

Positions are stored the way PIC codes on structured grids store them:
an integer cell index plus a sub-cell offset in [0, 1) per axis, rather
than an absolute coordinate.  Use
:meth:`pic_init.geometry.GridLayout.particle_positions` to recover
coordinates.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class Particle:
    """A single macro-particle.

    Attributes:
        weight: Number of physical particles represented.
        charge: Particle charge.
        icell: Cell index per axis, in the loading layout's local index space.
        delta: Position inside the cell per axis, each in [0, 1).
        v: Velocity (vx, vy, vz).
    """

    weight: float
    charge: float
    icell: tuple[int, ...]
    delta: tuple[float, ...]
    v: tuple[float, float, float]

    @property
    def dimension(self) -> int:
        return len(self.icell)


class ParticleArray:
    """Append-only sequence of :class:`Particle` records.

    Args:
        dimension: Spatial dimension of the stored particles.  Inferred from
            the first appended particle when omitted.
        particles: Optional initial content.
    """

    def __init__(
        self,
        dimension: int | None = None,
        particles: Iterable[Particle] = (),
    ) -> None:
        self.dimension = dimension
        self._particles: list[Particle] = []
        self.extend(particles)

    def append(self, particle: Particle) -> None:
        if self.dimension is None:
            self.dimension = particle.dimension
        elif particle.dimension != self.dimension:
            raise ValueError(
                f"cannot store a {particle.dimension}D particle in a "
                f"{self.dimension}D particle array"
            )
        self._particles.append(particle)

    def extend(self, particles: Iterable[Particle]) -> None:
        for particle in particles:
            self.append(particle)

    def __len__(self) -> int:
        return len(self._particles)

    def __iter__(self) -> Iterator[Particle]:
        return iter(self._particles)

    def __getitem__(self, index: int) -> Particle:
        return self._particles[index]

    def __repr__(self) -> str:
        return f"ParticleArray(dimension={self.dimension}, n={len(self)})"

    def to_arrays(self) -> dict[str, np.ndarray]:
        """Return the particles as a structure of arrays.

        Returns:
            Dictionary with ``weight`` (N,), ``charge`` (N,), ``icell``
            (N, dim), ``delta`` (N, dim) and ``v`` (N, 3).
        """
        return particles_to_arrays(self._particles, self.dimension)


def particles_to_arrays(
    particles: Iterable[Particle],
    dimension: int | None = None,
) -> dict[str, np.ndarray]:
    """Convert any iterable of particles to a structure of arrays."""
    items = list(particles)
    if dimension is None:
        dimension = items[0].dimension if items else 0
    n = len(items)

    if n == 0:
        return {
            "weight": np.empty(0),
            "charge": np.empty(0),
            "icell": np.empty((0, dimension), dtype=np.int64),
            "delta": np.empty((0, dimension)),
            "v": np.empty((0, 3)),
        }

    return {
        "weight": np.fromiter((p.weight for p in items), dtype=np.float64, count=n),
        "charge": np.fromiter((p.charge for p in items), dtype=np.float64, count=n),
        "icell": np.array([p.icell for p in items], dtype=np.int64).reshape(n, dimension),
        "delta": np.array([p.delta for p in items], dtype=np.float64).reshape(n, dimension),
        "v": np.array([p.v for p in items], dtype=np.float64).reshape(n, 3),
    }
