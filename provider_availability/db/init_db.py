"""Database initialization utilities."""
import logging

from provider_availability.db.base import Base, import_models
from provider_availability.db.session import engine

logger = logging.getLogger(__name__)


def init_db() -> None:
    """
    Create any missing tables.

    Suitable for development and testing. Deployed databases are migrated
    out of band.
    """
    try:
        import_models()
        Base.metadata.create_all(bind=engine)
        logger.info(f"Database schema ensured ({len(Base.metadata.tables)} tables)")
    except Exception as e:
        logger.error(f"Error initializing database: {e}")
        raise

