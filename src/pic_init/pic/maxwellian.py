"""Anisotropic Maxwellian velocity sampling.

Each velocity component is drawn independently from a normal
distribution with mean ``V[i]`` and standard deviation ``Vth[i]``.
Standard-normal deviates come from the Box-Muller transform of uniform
pairs; three components consume two pairs (four uniforms) per sample.

Uniforms are drawn as ``1 - rng.random()`` so they lie in (0, 1] and the
logarithm in the transform is always finite.  A zero thermal speed
therefore yields exactly the bulk velocity.
"""

from __future__ import annotations

import numpy as np
from numba import njit


@njit(cache=True)
def _box_muller_kernel(u: np.ndarray) -> np.ndarray:
    """Box-Muller transform of uniform pairs into standard normals.

    Parameters
    ----------
    u : ndarray, shape (N, 2, 2)
        Uniform deviates in (0, 1].  ``u[p, k]`` is the k-th pair of
        sample ``p``.

    Returns
    -------
    z : ndarray, shape (N, 3)
        Independent standard-normal deviates.
    """
    n = u.shape[0]
    z = np.empty((n, 3), dtype=np.float64)
    two_pi = 2.0 * np.pi

    for p in range(n):
        r0 = np.sqrt(-2.0 * np.log(u[p, 0, 0]))
        theta0 = two_pi * u[p, 0, 1]
        z[p, 0] = r0 * np.cos(theta0)
        z[p, 1] = r0 * np.sin(theta0)

        r1 = np.sqrt(-2.0 * np.log(u[p, 1, 0]))
        z[p, 2] = r1 * np.cos(two_pi * u[p, 1, 1])

    return z


def _check_moments(V: np.ndarray, Vth: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    V = np.asarray(V, dtype=np.float64)
    Vth = np.asarray(Vth, dtype=np.float64)
    if V.shape != (3,) or Vth.shape != (3,):
        raise ValueError(
            f"V and Vth must have shape (3,), got {V.shape} and {Vth.shape}"
        )
    if not (np.all(np.isfinite(Vth)) and np.all(Vth >= 0.0)):
        raise ValueError(f"thermal speeds must be finite and non-negative, got {Vth}")
    return V, Vth


def standard_normals(rng: np.random.Generator, n: int) -> np.ndarray:
    """Draw ``n`` triples of independent standard-normal deviates."""
    u = 1.0 - rng.random((n, 2, 2))
    return _box_muller_kernel(u)


def maxwellian_velocities(
    V: np.ndarray,
    Vth: np.ndarray,
    rng: np.random.Generator,
    n: int,
) -> np.ndarray:
    """Draw ``n`` velocities from a drifting anisotropic Maxwellian.

    Args:
        V: Bulk velocity, shape (3,).
        Vth: Per-axis thermal speed (standard deviation), shape (3,).
        rng: Random generator; consumed, never shared across threads.
        n: Number of samples (may be zero).

    Returns:
        Velocities, shape (n, 3).
    """
    V, Vth = _check_moments(V, Vth)
    if n < 0:
        raise ValueError(f"n must be non-negative, got {n}")
    if n == 0:
        return np.empty((0, 3), dtype=np.float64)
    return V + Vth * standard_normals(rng, n)


def maxwellian_velocity(
    V: np.ndarray,
    Vth: np.ndarray,
    rng: np.random.Generator,
) -> np.ndarray:
    """Draw a single velocity, shape (3,).  See :func:`maxwellian_velocities`."""
    return maxwellian_velocities(V, Vth, rng, 1)[0]
