"""Adapter modules for external integrations."""

from .hivelocity import HivelocityClient

__all__ = ["HivelocityClient"]
