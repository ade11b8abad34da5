"""Bundled seed data."""

from .seed_loader import load_catalog, seed_catalog, seed_tutorial

__all__ = ["load_catalog", "seed_catalog", "seed_tutorial"]
