"""Tests for Maxwellian velocity sampling (Box-Muller)."""

from __future__ import annotations

import numpy as np
import pytest

from pic_init.pic.maxwellian import (
    maxwellian_velocities,
    maxwellian_velocity,
    standard_normals,
)


class TestStandardNormals:
    """Box-Muller kernel statistics."""

    def test_shape_and_finite(self, rng) -> None:
        z = standard_normals(rng, 1000)
        assert z.shape == (1000, 3)
        assert np.all(np.isfinite(z))

    def test_zero_mean_unit_variance(self, rng) -> None:
        """Mean ~0 and variance ~1 per component for a large sample."""
        n = 200_000
        z = standard_normals(rng, n)
        # Standard error of the mean is 1/sqrt(n)
        assert np.all(np.abs(z.mean(axis=0)) < 5.0 / np.sqrt(n))
        # Standard error of the variance is sqrt(2/n)
        assert np.all(np.abs(z.var(axis=0) - 1.0) < 5.0 * np.sqrt(2.0 / n))

    def test_components_uncorrelated(self, rng) -> None:
        """Components of one sample are independent (off-diagonal covariance ~0)."""
        n = 200_000
        z = standard_normals(rng, n)
        cov = np.cov(z, rowvar=False)
        off_diag = cov[~np.eye(3, dtype=bool)]
        assert np.all(np.abs(off_diag) < 5.0 / np.sqrt(n))

    def test_uniform_one_maps_to_zero_radius(self) -> None:
        """u1 = 1 gives log(1) = 0, so the deviate is exactly zero (no log(0) path)."""
        from pic_init.pic.maxwellian import _box_muller_kernel

        u = np.ones((1, 2, 2))
        z = _box_muller_kernel(u)
        np.testing.assert_array_equal(z, np.zeros((1, 3)))


class TestMaxwellianVelocities:
    """Drifting anisotropic Maxwellian sampling."""

    def test_zero_thermal_speed_is_exact(self, rng) -> None:
        """Vth = 0 yields exactly the bulk velocity."""
        V = np.array([1.5, -2.0, 3.25])
        v = maxwellian_velocities(V, np.zeros(3), rng, 100)
        assert np.all(v == V)

    def test_partially_cold_axis(self, rng) -> None:
        """A single zero thermal component stays exactly at the bulk value."""
        V = np.array([0.0, 7.0, 0.0])
        v = maxwellian_velocities(V, np.array([1.0, 0.0, 2.0]), rng, 500)
        assert np.all(v[:, 1] == 7.0)
        assert np.std(v[:, 0]) > 0.5

    def test_moments_converge(self, rng) -> None:
        """Empirical mean and std approach V and Vth."""
        n = 200_000
        V = np.array([1.0, -1.0, 0.5])
        Vth = np.array([0.5, 1.0, 2.0])
        v = maxwellian_velocities(V, Vth, rng, n)
        np.testing.assert_allclose(v.mean(axis=0), V, atol=5.0 * Vth.max() / np.sqrt(n))
        np.testing.assert_allclose(v.std(axis=0), Vth, rtol=0.01)

    def test_zero_samples(self, rng) -> None:
        v = maxwellian_velocities(np.zeros(3), np.ones(3), rng, 0)
        assert v.shape == (0, 3)

    def test_single_sample_shape(self, rng) -> None:
        v = maxwellian_velocity([0.0, 0.0, 0.0], [1.0, 1.0, 1.0], rng)
        assert v.shape == (3,)

    def test_negative_thermal_speed_rejected(self, rng) -> None:
        with pytest.raises(ValueError, match="thermal speeds"):
            maxwellian_velocities(np.zeros(3), np.array([1.0, -1.0, 1.0]), rng, 10)

    def test_nan_thermal_speed_rejected(self, rng) -> None:
        with pytest.raises(ValueError, match="thermal speeds"):
            maxwellian_velocities(np.zeros(3), np.array([1.0, np.nan, 1.0]), rng, 10)

    def test_wrong_shape_rejected(self, rng) -> None:
        with pytest.raises(ValueError, match="shape"):
            maxwellian_velocities(np.zeros(2), np.ones(3), rng, 10)

    def test_same_seed_same_samples(self) -> None:
        """Sampling is a pure function of the generator state."""
        a = maxwellian_velocities(np.zeros(3), np.ones(3), np.random.default_rng(7), 50)
        b = maxwellian_velocities(np.zeros(3), np.ones(3), np.random.default_rng(7), 50)
        np.testing.assert_array_equal(a, b)
