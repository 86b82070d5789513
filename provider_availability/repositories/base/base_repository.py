"""
Base repository with standardized CRUD operations and error handling.

Repositories only flush; the calling
service owns the unit of work and commits or rolls back as a whole.
"""

from typing import Generic, List, Type, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from provider_availability.config.logging import get_logger
from provider_availability.core.exceptions import (
    EntityAlreadyExistsError,
    RepositoryError,
)
from provider_availability.models.base import BaseModel

logger = get_logger(__name__)

ModelType = TypeVar("ModelType", bound=BaseModel)


class BaseRepository(Generic[ModelType]):
    """
    Base repository with CRUD helpers for a single model.
    """

    def __init__(self, model: Type[ModelType], db: Session):
        """
        Initialize repository.

        Args:
            model: SQLAlchemy model class
            db: Database session
        """
        self.model = model
        self.db = db

    # ==================== Create Operations ====================

    def create(self, entity: ModelType) -> ModelType:
        """
        Add a new entity to the session and flush it.

        Args:
            entity: Entity to create

        Returns:
            Created entity

        Raises:
            EntityAlreadyExistsError: If a uniqueness constraint rejects the row
            RepositoryError: On any other storage failure
        """
        try:
            self.db.add(entity)
            self.db.flush()

            logger.debug(f"Created {self.model.__name__} with id: {entity.id}")
            return entity

        except IntegrityError as e:
            raise EntityAlreadyExistsError(
                f"{self.model.__name__} already exists",
                details={"table": self.model.__tablename__},
            ) from e
        except SQLAlchemyError as e:
            raise RepositoryError(f"Create failed: {str(e)}") from e

    def create_many(self, entities: List[ModelType]) -> List[ModelType]:
        """
        Add several entities in one flush.

        Raises:
            EntityAlreadyExistsError: If a uniqueness constraint rejects any row
        """
        try:
            self.db.add_all(entities)
            self.db.flush()
            logger.debug(f"Created {len(entities)} {self.model.__name__} entities")
            return entities

        except IntegrityError as e:
            raise EntityAlreadyExistsError(
                f"{self.model.__name__} already exists",
                details={"table": self.model.__tablename__, "count": len(entities)},
            ) from e
        except SQLAlchemyError as e:
            raise RepositoryError(f"Bulk create failed: {str(e)}") from e

    # ==================== Delete Operations ====================

    def delete(self, entity: ModelType) -> None:
        """Delete an entity (flush only)."""
        try:
            self.db.delete(entity)
            self.db.flush()
            logger.debug(f"Deleted {self.model.__name__} with id: {entity.id}")
        except SQLAlchemyError as e:
            raise RepositoryError(f"Delete failed: {str(e)}") from e


__all__ = ["BaseRepository", "ModelType"]
