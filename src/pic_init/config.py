"""Pydantic v2 configuration system for particle loading.

Provides validated, typed configuration for the initializer, the grid
region and a uniform plasma, with JSON I/O and cross-field validation.
"""

from __future__ import annotations

import json
import math
from pathlib import Path

from pydantic import BaseModel, Field, model_validator

from pic_init.geometry.layout import GridLayout
from pic_init.pic.basis import DEFAULT_FIELD_TOLERANCE, Basis
from pic_init.pic.fluid_initializer import DEFAULT_SEED, DEFAULT_STREAM_ID
from pic_init.pic.profiles import thermal_speed


class InitializerConfig(BaseModel):
    """Construction parameters of a ``FluidParticleInitializer``."""

    particle_charge: float = Field(1.0, description="Charge of every loaded particle")
    particles_per_cell: int = Field(..., ge=0, description="Macro-particles per physical cell")
    basis: Basis = Field(
        Basis.CARTESIAN,
        description="Velocity sampling frame: 'cartesian' or 'magnetic' (field-aligned)",
    )
    seed: int | None = Field(
        DEFAULT_SEED, ge=0,
        description="Base seed of the per-region random streams (null = OS entropy)",
    )
    field_tolerance: float = Field(
        DEFAULT_FIELD_TOLERANCE, gt=0,
        description="|B| below which the field-aligned basis falls back to Cartesian",
    )
    stream_id: int = Field(
        DEFAULT_STREAM_ID, ge=0,
        description="Population id; loaders sharing a seed and a region need distinct ids",
    )


class GridConfig(BaseModel):
    """Grid region geometry (1 to 3 dimensions)."""

    n_cells: list[int] = Field(..., min_length=1, max_length=3, description="Physical cells per axis")
    mesh_size: list[float] = Field(..., min_length=1, max_length=3, description="Grid spacing per axis")
    origin: list[float] | None = Field(None, description="Lower corner of the first physical cell")
    ghost_width: int = Field(1, ge=0, description="Ghost cells on each side of every axis")
    offset: list[int] | None = Field(None, description="Global index of the first physical cell")

    @model_validator(mode="after")
    def validate_lengths(self) -> GridConfig:
        ndim = len(self.n_cells)
        if any(n <= 0 for n in self.n_cells):
            raise ValueError("n_cells values must be positive integers")
        if any(not math.isfinite(d) for d in self.mesh_size):
            raise ValueError("mesh_size values must be finite")
        if any(d <= 0 for d in self.mesh_size):
            raise ValueError("mesh_size values must be positive")
        if self.origin is not None and any(not math.isfinite(x) for x in self.origin):
            raise ValueError("origin values must be finite")
        for name in ("mesh_size", "origin", "offset"):
            value = getattr(self, name)
            if value is not None and len(value) != ndim:
                raise ValueError(
                    f"{name} must have {ndim} components to match n_cells, got {len(value)}"
                )
        if self.offset is not None and any(o < 0 for o in self.offset):
            raise ValueError("offset values must be non-negative")
        return self

    def to_layout(self) -> GridLayout:
        """Build the corresponding grid layout."""
        return GridLayout(
            n_cells=tuple(self.n_cells),
            mesh_size=tuple(self.mesh_size),
            origin=None if self.origin is None else tuple(self.origin),
            ghost_width=self.ghost_width,
            offset=None if self.offset is None else tuple(self.offset),
        )


class UniformPlasmaConfig(BaseModel):
    """Spatially uniform fluid moments."""

    density: float = Field(..., ge=0, description="Number density")
    bulk_velocity: list[float] = Field(
        default_factory=lambda: [0.0, 0.0, 0.0],
        min_length=3, max_length=3,
        description="Bulk velocity (field-aligned components in magnetic basis)",
    )
    thermal_velocity: list[float] = Field(
        default_factory=lambda: [0.0, 0.0, 0.0],
        min_length=3, max_length=3,
        description="Per-axis thermal speed",
    )
    temperature: float | None = Field(
        None, ge=0,
        description="Temperature [K]; overrides thermal_velocity when set (requires mass)",
    )
    mass: float | None = Field(None, gt=0, description="Particle mass [kg]")
    magnetic_field: list[float] | None = Field(
        None, min_length=3, max_length=3, description="Uniform magnetic field",
    )

    @model_validator(mode="after")
    def validate_thermal(self) -> UniformPlasmaConfig:
        if any(v < 0 for v in self.thermal_velocity):
            raise ValueError("thermal_velocity components must be non-negative")
        if self.temperature is not None and self.mass is None:
            raise ValueError("temperature requires mass to derive a thermal speed")
        return self

    def thermal_speeds(self) -> list[float]:
        """Per-axis thermal speed, derived from temperature when given."""
        if self.temperature is not None and self.mass is not None:
            return [thermal_speed(self.temperature, self.mass)] * 3
        return list(self.thermal_velocity)


class LoaderConfig(BaseModel):
    """Top-level configuration for loading a uniform plasma into a region."""

    grid: GridConfig
    initializer: InitializerConfig
    plasma: UniformPlasmaConfig
    partitions: list[int] | None = Field(
        None, min_length=1, max_length=3,
        description="Sub-domain chunks per axis (default: no split)",
    )
    workers: int = Field(1, ge=1, le=256, description="Threads used to load sub-domains")

    @model_validator(mode="after")
    def validate_cross(self) -> LoaderConfig:
        if self.initializer.basis is Basis.MAGNETIC and self.plasma.magnetic_field is None:
            raise ValueError("magnetic basis requires plasma.magnetic_field")
        if self.partitions is not None:
            if len(self.partitions) != len(self.grid.n_cells):
                raise ValueError("partitions must have one entry per grid axis")
            for p, n in zip(self.partitions, self.grid.n_cells):
                if not 1 <= p <= n:
                    raise ValueError(f"cannot split an axis of {n} cells into {p} chunks")
        return self

    # --- I/O helpers ---

    @classmethod
    def from_file(cls, path: str | Path) -> LoaderConfig:
        """Load configuration from a JSON file."""
        path = Path(path)
        with path.open() as f:
            data = json.load(f)
        return cls(**data)

    def to_json(self, path: str | Path | None = None) -> str:
        """Serialize to JSON string, optionally writing to file."""
        out = self.model_dump_json(indent=2)
        if path is not None:
            Path(path).write_text(out)
        return out
