"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import numpy as np
import pytest

from pic_init.config import LoaderConfig
from pic_init.geometry import GridLayout
from pic_init.pic import constant_scalar, constant_vector


@pytest.fixture
def rng():
    """Seeded generator for reproducible statistical tests."""
    return np.random.default_rng(12345)


@pytest.fixture
def layout_1d():
    """Four physical cells of unit size."""
    return GridLayout(n_cells=(4,), mesh_size=(1.0,))


@pytest.fixture
def layout_2d():
    return GridLayout(n_cells=(3, 4), mesh_size=(0.5, 0.25), origin=(1.0, -1.0))


@pytest.fixture
def layout_3d():
    return GridLayout(n_cells=(2, 3, 2), mesh_size=(0.1, 0.2, 0.3), ghost_width=2)


@pytest.fixture
def uniform_profiles():
    """Density 10, bulk velocity (1, 0, 0), cold plasma."""
    return {
        "density": constant_scalar(10.0),
        "bulk_velocity": constant_vector([1.0, 0.0, 0.0]),
        "thermal_velocity": constant_vector([0.0, 0.0, 0.0]),
    }


@pytest.fixture
def sample_config_dict():
    """Minimal valid LoaderConfig as a dictionary."""
    return {
        "grid": {"n_cells": [4, 4], "mesh_size": [0.5, 0.5]},
        "initializer": {"particles_per_cell": 8, "particle_charge": 1.0},
        "plasma": {
            "density": 2.0,
            "bulk_velocity": [0.5, 0.0, -0.5],
            "thermal_velocity": [0.1, 0.1, 0.1],
        },
    }


@pytest.fixture
def small_config(sample_config_dict):
    return LoaderConfig(**sample_config_dict)
