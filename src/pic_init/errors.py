"""Exception taxonomy for particle loading.

- ``ConfigurationError``: the initializer cannot be built as requested.
- ``PhysicalValidityError``: a profile produced an unphysical value while
  loading a region; the region load is aborted.
- ``DegenerateFieldError``: the local magnetic field is too weak to define
  a direction.  The initializer recovers from it by falling back to the
  Cartesian basis for the affected cell.
"""

from __future__ import annotations

from collections.abc import Sequence


class PicInitError(Exception):
    """Base class for all errors raised by :mod:`pic_init`."""


class ConfigurationError(PicInitError, ValueError):
    """Invalid initializer configuration, detected at construction time."""


class PhysicalValidityError(PicInitError, ValueError):
    """A profile evaluation produced an unphysical value.

    Attributes:
        cell: Index tuple of the offending cell (``None`` if unknown).
        position: Cell-center coordinates at which the profile was evaluated.
    """

    def __init__(
        self,
        message: str,
        cell: Sequence[int] | None = None,
        position: Sequence[float] | None = None,
    ) -> None:
        self.cell = tuple(cell) if cell is not None else None
        self.position = tuple(position) if position is not None else None
        if self.cell is not None:
            message = f"{message} (cell {self.cell}, position {self.position})"
        super().__init__(message)


class DegenerateFieldError(PicInitError, ArithmeticError):
    """Magnetic field magnitude below tolerance; its direction is undefined."""

    def __init__(self, magnitude: float, tolerance: float) -> None:
        self.magnitude = magnitude
        self.tolerance = tolerance
        super().__init__(
            f"|B| = {magnitude:.3e} is below tolerance {tolerance:.3e}; "
            "field-aligned basis is undefined"
        )
