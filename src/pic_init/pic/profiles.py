"""Profile functions: fluid moments as functions of position.

A scalar profile maps a position (1 to 3 coordinates, passed as separate
positional arguments) to a real number; a vector profile maps it to a
3-vector.  Any callable with that signature works; the helpers below
cover the common uniform case and the temperature -> thermal speed
conversion.

Profiles are only ever called, never mutated, so the same callable may be
shared between several initializers and evaluated from several threads.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence

import numpy as np

from pic_init.constants import k_B

ScalarProfile = Callable[..., float]
VectorProfile = Callable[..., Sequence[float]]


def constant_scalar(value: float) -> ScalarProfile:
    """Return a profile that evaluates to ``value`` everywhere."""
    value = float(value)

    def profile(*position: float) -> float:
        return value

    return profile


def constant_vector(value: Sequence[float]) -> VectorProfile:
    """Return a vector profile that evaluates to ``value`` everywhere."""
    vec = np.asarray(value, dtype=np.float64)
    if vec.shape != (3,):
        raise ValueError(f"vector profile value must have 3 components, got {vec.shape}")
    vec.setflags(write=False)

    def profile(*position: float) -> np.ndarray:
        return vec

    return profile


def thermal_speed(temperature: float, mass: float) -> float:
    """Thermal speed sqrt(k_B T / m) [m/s] for temperature [K] and mass [kg]."""
    if temperature < 0.0:
        raise ValueError(f"temperature must be non-negative, got {temperature}")
    if mass <= 0.0:
        raise ValueError(f"mass must be positive, got {mass}")
    return float(np.sqrt(k_B * temperature / mass))
