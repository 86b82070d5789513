"""SQLAlchemy Base class and model registry."""
from provider_availability.models.base import Base


def import_models() -> None:
    """Import all models to register them with Base.metadata."""
    import provider_availability.models  # noqa: F401


import_models()

__all__ = ["Base", "import_models"]
