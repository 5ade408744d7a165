"""Per-cell fluid moments of a particle population.

Inverse of particle loading: accumulates weights and velocities of the
particles in each physical cell to recover density, mean velocity and
velocity variance.  Used to check that a loaded population converges to
the profiles it was drawn from.
"""

from __future__ import annotations

from collections.abc import Iterable

import numpy as np

from pic_init.geometry.layout import GridLayout
from pic_init.pic.particles import Particle, ParticleArray, particles_to_arrays


def compute_cell_moments(
    particles: ParticleArray | Iterable[Particle],
    layout: GridLayout,
) -> dict[str, np.ndarray]:
    """Weighted moments of ``particles`` per physical cell of ``layout``.

    Particles whose cell index lies outside the physical cells are ignored.

    Args:
        particles: Particles with cell indices in ``layout``'s index space.
        layout: Grid region.

    Returns:
        Dictionary with, for arrays shaped ``layout.n_cells``:
            - ``count``: number of particles per cell
            - ``density``: sum of weights / cell volume
        and, shaped ``(*layout.n_cells, 3)``:
            - ``mean_velocity``: weighted mean velocity (NaN in empty cells)
            - ``velocity_variance``: weighted per-axis variance (NaN in empty cells)
    """
    if isinstance(particles, ParticleArray) and particles.dimension is not None:
        arrays = particles.to_arrays()
    else:
        arrays = particles_to_arrays(particles, layout.dimension)

    shape = layout.n_cells
    n_total = int(np.prod(shape))

    icell = arrays["icell"] - layout.ghost_width
    inside = np.all((icell >= 0) & (icell < np.asarray(shape)), axis=1)
    icell = icell[inside]
    w = arrays["weight"][inside]
    v = arrays["v"][inside]

    flat = np.ravel_multi_index(tuple(icell.T), shape) if len(icell) else np.empty(0, dtype=np.int64)

    count = np.bincount(flat, minlength=n_total)
    w_sum = np.bincount(flat, weights=w, minlength=n_total)

    wv_sum = np.zeros((n_total, 3))
    wv2_sum = np.zeros((n_total, 3))
    np.add.at(wv_sum, flat, w[:, None] * v)
    np.add.at(wv2_sum, flat, w[:, None] * v * v)

    with np.errstate(invalid="ignore", divide="ignore"):
        mean = wv_sum / w_sum[:, None]
        variance = np.maximum(wv2_sum / w_sum[:, None] - mean * mean, 0.0)

    empty = w_sum == 0.0
    mean[empty] = np.nan
    variance[empty] = np.nan

    return {
        "count": count.reshape(shape),
        "density": (w_sum / layout.cell_volume).reshape(shape),
        "mean_velocity": mean.reshape(*shape, 3),
        "velocity_variance": variance.reshape(*shape, 3),
    }
