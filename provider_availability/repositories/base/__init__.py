"""
Base repositories package.
"""

from provider_availability.repositories.base.base_repository import (
    BaseRepository,
    ModelType,
)

__all__ = ["BaseRepository", "ModelType"]
