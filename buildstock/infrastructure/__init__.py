"""Infrastructure layer implementations."""

from buildstock.infrastructure import storage

__all__ = ["storage"]
