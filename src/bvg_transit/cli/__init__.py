"""Command line interface for BVG transit queries."""

from .main import cli

__all__ = ["cli"]
