"""Core abstract base classes and shared data structures.

Defines the interface contracts that particle loaders implement:
- ``ParticleSink``: protocol for the append-only particle container
- ``LoadResult``: summary of one region load
- ``ParticleInitializerBase``: ABC for anything that fills a sink from a layout
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol

import numpy as np

if TYPE_CHECKING:
    from pic_init.geometry.layout import GridLayout


class ParticleSink(Protocol):
    """Anything particles can be appended to (a ``list`` qualifies)."""

    def append(self, item: Any) -> None: ...


@dataclass
class LoadResult:
    """Summary of a single ``load_particles`` call.

    Attributes:
        n_cells: Number of physical cells visited.
        n_particles: Number of particles appended to the sink.
        total_weight: Sum of the weights of the appended particles.
        degenerate_cells: Cells where the magnetic field was too weak to
            define a direction and the Cartesian basis was used instead.
    """

    n_cells: int = 0
    n_particles: int = 0
    total_weight: float = 0.0
    degenerate_cells: list[tuple[int, ...]] = field(default_factory=list)

    def merge(self, other: LoadResult) -> LoadResult:
        """Combine the results of two disjoint region loads."""
        return LoadResult(
            n_cells=self.n_cells + other.n_cells,
            n_particles=self.n_particles + other.n_particles,
            total_weight=self.total_weight + other.total_weight,
            degenerate_cells=self.degenerate_cells + other.degenerate_cells,
        )


class ParticleInitializerBase(ABC):
    """Abstract base for all particle initializers."""

    @abstractmethod
    def load_particles(
        self,
        particles: ParticleSink,
        layout: GridLayout,
        rng: np.random.Generator | None = None,
    ) -> LoadResult:
        """Append particles for every physical cell of ``layout``.

        Args:
            particles: Append-only container receiving the new particles.
            layout: Grid region to fill.
            rng: Optional generator overriding the initializer's seeding policy.

        Returns:
            Summary of what was loaded.
        """
