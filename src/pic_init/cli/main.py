"""Command-line interface for particle loading.

Usage:
    pic-init load config.json --workers=4 -o particles.npz
    pic-init show-config config.json
"""

from __future__ import annotations

import logging
import sys

import click
import numpy as np


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def cli(verbose: bool) -> None:
    """pic-init: load PIC macro-particles from fluid moments."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


@cli.command()
@click.argument("config_file", type=click.Path(exists=True))
@click.option("--seed", type=click.IntRange(min=0), default=None, help="Override the configured base seed.")
@click.option("--workers", type=click.IntRange(min=1), default=None, help="Threads used to load sub-domains.")
@click.option("--output", "-o", type=str, default=None, help="Write particle arrays to an .npz file.")
def load(config_file: str, seed: int | None, workers: int | None, output: str | None) -> None:
    """Load a uniform plasma described by a configuration file."""
    from pydantic import ValidationError

    from pic_init.config import LoaderConfig
    from pic_init.errors import PicInitError
    from pic_init.pic import (
        FluidParticleInitializer,
        compute_cell_moments,
        constant_scalar,
        constant_vector,
        load_partitioned,
    )

    click.echo(f"Loading config from {config_file}")
    try:
        config = LoaderConfig.from_file(config_file)
    except ValidationError as exc:
        click.echo(f"Invalid config: {exc}", err=True)
        sys.exit(1)

    if seed is not None:
        config.initializer.seed = seed
    if workers is not None:
        config.workers = workers

    plasma = config.plasma
    layout = config.grid.to_layout()

    try:
        initializer = FluidParticleInitializer.from_config(
            config.initializer,
            density=constant_scalar(plasma.density),
            bulk_velocity=constant_vector(plasma.bulk_velocity),
            thermal_velocity=constant_vector(plasma.thermal_speeds()),
            magnetic_field=(
                None if plasma.magnetic_field is None
                else constant_vector(plasma.magnetic_field)
            ),
        )
        particles, result = load_partitioned(
            initializer, layout, splits=config.partitions, workers=config.workers,
        )
    except PicInitError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    moments = compute_cell_moments(particles, layout)
    arrays = particles.to_arrays()
    mean_v = (
        np.average(arrays["v"], axis=0, weights=arrays["weight"])
        if result.total_weight > 0.0 else np.full(3, np.nan)
    )

    click.echo("\n--- Load Summary ---")
    click.echo(f"  dimension: {layout.dimension}")
    click.echo(f"  cells: {result.n_cells}")
    click.echo(f"  particles: {result.n_particles}")
    click.echo(f"  total_weight: {result.total_weight:.6e}")
    click.echo(f"  mean_density: {float(np.mean(moments['density'])):.6e}")
    click.echo(f"  mean_velocity: [{mean_v[0]:.6e}, {mean_v[1]:.6e}, {mean_v[2]:.6e}]")
    if result.degenerate_cells:
        click.echo(f"  degenerate_field_cells: {len(result.degenerate_cells)}")

    if output:
        np.savez(output, **arrays)
        click.echo(f"Particles written to {output}")


@cli.command("show-config")
@click.argument("config_file", type=click.Path(exists=True))
def show_config(config_file: str) -> None:
    """Validate a configuration file and print it."""
    from pydantic import ValidationError

    from pic_init.config import LoaderConfig

    try:
        config = LoaderConfig.from_file(config_file)
    except ValidationError as exc:
        click.echo(f"Invalid config: {exc}", err=True)
        sys.exit(1)
    click.echo(config.to_json())


if __name__ == "__main__":
    cli()
