"""Core interfaces shared by particle loaders."""

from pic_init.core.bases import LoadResult, ParticleInitializerBase, ParticleSink

__all__ = ["LoadResult", "ParticleInitializerBase", "ParticleSink"]
