"""Cartesian grid layout of a single patch in 1, 2 or 3 dimensions.

A layout describes one rectangular region of a (possibly larger) domain
decomposition.  Cells are indexed in the layout's *local* index space,
which includes ``ghost_width`` ghost cells on each side of the physical
cells:

    physical cells:  ghost_width <= i < ghost_width + n_cells

Cell-centered positions along each axis:

    x[i] = origin + (i - ghost_width + 0.5) * dx

where ``origin`` is the lower corner of the first physical cell.  The
``offset`` attribute is the global index of the first physical cell and
identifies the region inside the full domain.
"""

from __future__ import annotations

import itertools
from collections.abc import Iterator, Sequence
from dataclasses import dataclass

import numpy as np


def _as_tuple(values: Sequence[float] | float, n: int, kind: type) -> tuple:
    if np.isscalar(values):
        return tuple(kind(values) for _ in range(n))
    out = tuple(kind(v) for v in values)  # type: ignore[union-attr]
    if len(out) != n:
        raise ValueError(f"expected {n} components, got {len(out)}")
    return out


@dataclass
class GridLayout:
    """A rectangular patch of physical cells plus ghost padding.

    Attributes:
        n_cells: Number of physical cells per axis (1 to 3 axes).
        mesh_size: Grid spacing per axis.
        origin: Coordinates of the lower corner of the first physical cell.
        ghost_width: Number of ghost cells on each side of every axis.
        offset: Global index of the first physical cell per axis.
    """

    n_cells: tuple[int, ...]
    mesh_size: tuple[float, ...]
    origin: tuple[float, ...] | None = None
    ghost_width: int = 1
    offset: tuple[int, ...] | None = None

    def __post_init__(self) -> None:
        self.n_cells = tuple(int(n) for n in np.atleast_1d(self.n_cells))
        ndim = len(self.n_cells)
        if not 1 <= ndim <= 3:
            raise ValueError(f"layout must have 1 to 3 dimensions, got {ndim}")
        if any(n <= 0 for n in self.n_cells):
            raise ValueError(f"n_cells must be positive, got {self.n_cells}")

        self.mesh_size = _as_tuple(self.mesh_size, ndim, float)
        if any(not np.isfinite(d) or d <= 0.0 for d in self.mesh_size):
            raise ValueError(f"mesh_size must be positive and finite, got {self.mesh_size}")

        self.origin = _as_tuple(0.0 if self.origin is None else self.origin, ndim, float)
        if not all(np.isfinite(self.origin)):
            raise ValueError(f"origin must be finite, got {self.origin}")
        self.offset = _as_tuple(0 if self.offset is None else self.offset, ndim, int)
        if any(o < 0 for o in self.offset):
            raise ValueError(f"offset must be non-negative, got {self.offset}")

        if isinstance(self.ghost_width, bool) or int(self.ghost_width) != self.ghost_width:
            raise ValueError(f"ghost_width must be an integer, got {self.ghost_width!r}")
        self.ghost_width = int(self.ghost_width)
        if self.ghost_width < 0:
            raise ValueError(f"ghost_width must be non-negative, got {self.ghost_width}")

    # --- Shape ---

    @property
    def dimension(self) -> int:
        """Number of spatial axes."""
        return len(self.n_cells)

    @property
    def cell_volume(self) -> float:
        """Product of the mesh spacings (length, area or volume)."""
        return float(np.prod(self.mesh_size))

    @property
    def n_physical_cells(self) -> int:
        return int(np.prod(self.n_cells))

    @property
    def region_key(self) -> tuple[int, ...]:
        """Identifier of this region inside the global domain."""
        return self.offset

    def physical_start_index(self, axis: int) -> int:
        """First physical cell index along ``axis`` (local index space)."""
        self._check_axis(axis)
        return self.ghost_width

    def physical_end_index(self, axis: int) -> int:
        """One past the last physical cell index along ``axis``."""
        self._check_axis(axis)
        return self.ghost_width + self.n_cells[axis]

    def physical_cells(self) -> Iterator[tuple[int, ...]]:
        """Yield every physical cell index in lexicographic order."""
        ranges = [
            range(self.physical_start_index(d), self.physical_end_index(d))
            for d in range(self.dimension)
        ]
        return itertools.product(*ranges)

    # --- Coordinates ---

    def cell_centered_coordinates(self, *index: int) -> tuple[float, ...]:
        """Return the cell-center position of the cell at local ``index``."""
        if len(index) != self.dimension:
            raise ValueError(
                f"expected {self.dimension} indices, got {len(index)}"
            )
        return tuple(
            o + (i - self.ghost_width + 0.5) * d
            for o, i, d in zip(self.origin, index, self.mesh_size)
        )

    def particle_positions(self, icell: np.ndarray, delta: np.ndarray) -> np.ndarray:
        """Convert (cell index, sub-cell offset) pairs to positions.

        Args:
            icell: Local cell indices, shape (N, dim).
            delta: Sub-cell offsets in [0, 1), shape (N, dim).

        Returns:
            Positions, shape (N, dim).
        """
        icell = np.asarray(icell, dtype=np.float64).reshape(-1, self.dimension)
        delta = np.asarray(delta, dtype=np.float64).reshape(-1, self.dimension)
        origin = np.asarray(self.origin)
        dx = np.asarray(self.mesh_size)
        return origin + (icell - self.ghost_width + delta) * dx

    def global_index(self, index: Sequence[int]) -> tuple[int, ...]:
        """Map a local cell index to the global index space."""
        return tuple(
            int(i) - self.ghost_width + o for i, o in zip(index, self.offset)
        )

    def local_index(self, global_index: Sequence[int]) -> tuple[int, ...]:
        """Map a global cell index to this layout's local index space."""
        return tuple(
            int(g) - o + self.ghost_width for g, o in zip(global_index, self.offset)
        )

    # --- Decomposition ---

    def partition(self, splits: Sequence[int]) -> list[GridLayout]:
        """Split the physical cells into disjoint sub-layouts.

        Each axis is cut into ``splits[axis]`` nearly equal chunks.  The
        sub-layouts cover every physical cell exactly once and are
        returned in lexicographic order of their offsets.

        Args:
            splits: Number of chunks per axis.

        Returns:
            List of ``prod(splits)`` layouts sharing this layout's spacing
            and ghost width.
        """
        splits = _as_tuple(splits, self.dimension, int)
        for d, s in enumerate(splits):
            if not 1 <= s <= self.n_cells[d]:
                raise ValueError(
                    f"cannot split axis {d} with {self.n_cells[d]} cells into {s} chunks"
                )

        bounds_per_axis = []
        for d, s in enumerate(splits):
            sizes = [len(c) for c in np.array_split(np.arange(self.n_cells[d]), s)]
            starts = np.concatenate([[0], np.cumsum(sizes)[:-1]])
            bounds_per_axis.append(list(zip(starts.tolist(), sizes)))

        layouts = []
        for chunk in itertools.product(*bounds_per_axis):
            starts = tuple(c[0] for c in chunk)
            sizes = tuple(c[1] for c in chunk)
            layouts.append(
                GridLayout(
                    n_cells=sizes,
                    mesh_size=self.mesh_size,
                    origin=tuple(
                        o + s * d for o, s, d in zip(self.origin, starts, self.mesh_size)
                    ),
                    ghost_width=self.ghost_width,
                    offset=tuple(o + s for o, s in zip(self.offset, starts)),
                )
            )
        return layouts

    def _check_axis(self, axis: int) -> None:
        if not 0 <= axis < self.dimension:
            raise IndexError(f"axis {axis} out of range for {self.dimension}D layout")
