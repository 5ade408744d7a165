"""Field-aligned velocity bases.

A field-aligned basis is stored as a 3x3 array whose *rows* are the unit
vectors (e1, e2, e3), with e1 along the local magnetic field and
e3 = e1 x e2.  A velocity ``v`` expressed in that basis maps to the lab
frame as

    v_lab = v[0] * e1 + v[1] * e2 + v[2] * e3 = v @ basis

and back with ``basis @ v_lab`` (the basis is orthonormal, so its
inverse is its transpose).
"""

from __future__ import annotations

from enum import Enum

import numpy as np

from pic_init.errors import DegenerateFieldError

DEFAULT_FIELD_TOLERANCE: float = 1e-12

CARTESIAN_BASIS = np.eye(3)
CARTESIAN_BASIS.setflags(write=False)


class Basis(str, Enum):
    """Frame in which thermal velocities are sampled."""

    CARTESIAN = "cartesian"
    MAGNETIC = "magnetic"


def local_magnetic_basis(
    B: np.ndarray | list[float] | tuple[float, float, float],
    tolerance: float = DEFAULT_FIELD_TOLERANCE,
) -> np.ndarray:
    """Build an orthonormal right-handed basis with e1 along ``B``.

    The second vector is obtained by projecting out of e1 the Cartesian
    axis along which e1 has the smallest component, so the reference axis
    is never close to parallel with the field.

    Args:
        B: Magnetic field vector, shape (3,).
        tolerance: Minimum |B| for which a direction is defined.

    Returns:
        Array of shape (3, 3) with rows (e1, e2, e3).

    Raises:
        DegenerateFieldError: If |B| < ``tolerance`` or B is not finite.
    """
    B = np.asarray(B, dtype=np.float64)
    if B.shape != (3,):
        raise ValueError(f"B must have shape (3,), got {B.shape}")

    B_mag = float(np.linalg.norm(B))
    if not np.isfinite(B_mag) or B_mag < tolerance:
        raise DegenerateFieldError(B_mag, tolerance)

    e1 = B / B_mag

    ref = np.zeros(3)
    ref[int(np.argmin(np.abs(e1)))] = 1.0

    # Gram-Schmidt step against e1
    e2 = ref - np.dot(ref, e1) * e1
    e2 /= np.linalg.norm(e2)

    e3 = np.cross(e1, e2)

    return np.stack([e1, e2, e3])


def basis_transform(basis: np.ndarray, v: np.ndarray) -> np.ndarray:
    """Express velocities given in ``basis`` coordinates in the lab frame.

    Args:
        basis: Rows (e1, e2, e3), shape (3, 3).
        v: Velocity components along (e1, e2, e3), shape (3,) or (N, 3).

    Returns:
        Lab-frame velocities with the same shape as ``v``.
    """
    return np.asarray(v, dtype=np.float64) @ np.asarray(basis, dtype=np.float64)


def to_local_basis(basis: np.ndarray, v_lab: np.ndarray) -> np.ndarray:
    """Inverse of :func:`basis_transform`: project lab-frame velocities onto ``basis``."""
    return np.asarray(v_lab, dtype=np.float64) @ np.asarray(basis, dtype=np.float64).T
