"""Geometry module: grid regions that particles are loaded into."""

from pic_init.geometry.layout import GridLayout

__all__ = ["GridLayout"]
