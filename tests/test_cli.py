"""Tests for the pic-init command-line interface."""

from __future__ import annotations

import json

import numpy as np
import pytest
from click.testing import CliRunner

from pic_init.cli.main import cli


@pytest.fixture
def runner():
    """Click test runner."""
    return CliRunner()


@pytest.fixture
def config_file(tmp_path, small_config):
    path = tmp_path / "loader.json"
    path.write_text(small_config.to_json())
    return str(path)


class TestLoadCommand:
    def test_summary(self, runner, config_file) -> None:
        result = runner.invoke(cli, ["load", config_file])
        assert result.exit_code == 0, result.output
        assert "particles: 128" in result.output
        assert "cells: 16" in result.output
        # 16 cells * density 2.0 * volume 0.25
        assert "total_weight: 8.000000e+00" in result.output

    def test_partitioned_with_workers(self, runner, tmp_path, sample_config_dict) -> None:
        sample_config_dict["partitions"] = [2, 2]
        path = tmp_path / "split.json"
        path.write_text(json.dumps(sample_config_dict))
        result = runner.invoke(cli, ["load", str(path), "--workers", "2"])
        assert result.exit_code == 0, result.output
        assert "particles: 128" in result.output

    def test_output_npz(self, runner, config_file, tmp_path) -> None:
        out = tmp_path / "particles.npz"
        result = runner.invoke(cli, ["load", config_file, "-o", str(out), "--seed", "3"])
        assert result.exit_code == 0, result.output
        data = np.load(out)
        assert data["v"].shape == (128, 3)
        assert data["icell"].shape == (128, 2)
        assert np.all((data["delta"] >= 0.0) & (data["delta"] < 1.0))

    def test_magnetic_degenerate_reported(self, runner, tmp_path, sample_config_dict) -> None:
        sample_config_dict["initializer"]["basis"] = "magnetic"
        sample_config_dict["plasma"]["magnetic_field"] = [0.0, 0.0, 0.0]
        path = tmp_path / "degenerate.json"
        path.write_text(json.dumps(sample_config_dict))
        result = runner.invoke(cli, ["load", str(path)])
        assert result.exit_code == 0, result.output
        assert "degenerate_field_cells: 16" in result.output

    def test_invalid_config(self, runner, tmp_path, sample_config_dict) -> None:
        sample_config_dict["initializer"]["particles_per_cell"] = -2
        path = tmp_path / "bad.json"
        path.write_text(json.dumps(sample_config_dict))
        result = runner.invoke(cli, ["load", str(path)])
        assert result.exit_code == 1
        assert "Invalid config" in result.output

    def test_non_finite_mesh_size(self, runner, tmp_path, sample_config_dict) -> None:
        sample_config_dict["grid"]["mesh_size"] = [float("nan"), 0.5]
        path = tmp_path / "nan.json"
        path.write_text(json.dumps(sample_config_dict))
        result = runner.invoke(cli, ["load", str(path)])
        assert result.exit_code == 1
        assert "Invalid config" in result.output
        assert "finite" in result.output

    def test_zero_particles_per_cell(self, runner, tmp_path, sample_config_dict) -> None:
        sample_config_dict["initializer"]["particles_per_cell"] = 0
        path = tmp_path / "empty.json"
        path.write_text(json.dumps(sample_config_dict))
        result = runner.invoke(cli, ["load", str(path)])
        assert result.exit_code == 0, result.output
        assert "particles: 0" in result.output

    def test_missing_file(self, runner) -> None:
        result = runner.invoke(cli, ["load", "/nonexistent/loader.json"])
        assert result.exit_code != 0


class TestShowConfig:
    def test_echoes_json(self, runner, config_file) -> None:
        result = runner.invoke(cli, ["show-config", config_file])
        assert result.exit_code == 0
        assert json.loads(result.output)["grid"]["n_cells"] == [4, 4]
