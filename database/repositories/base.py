"""
Base repository with common operations.

Provides a generic base class for simple repositories and the translation of
driver failures into StorageUnavailableError.
"""
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, TypeVar, Generic, Optional, Type
from abc import ABC

from sqlalchemy import select
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import StorageUnavailableError
from database.base import Base

logger = logging.getLogger(__name__)

# Type variable for model classes
ModelType = TypeVar("ModelType", bound=Base)


@asynccontextmanager
async def translate_storage_errors(operation: str) -> AsyncIterator[None]:
    """
    Re-raise database outages as StorageUnavailableError.

    Integrity violations are domain outcomes and are left to the
    repository that triggered them.
    """
    try:
        yield
    except IntegrityError:
        raise
    except (DBAPIError, OSError) as e:
        logger.error(f"Storage failure during {operation}: {e}", exc_info=True)
        raise StorageUnavailableError(operation=operation) from e


class BaseRepository(ABC, Generic[ModelType]):
    """
    Abstract base repository.

    Usage:
        class UserRepository(BaseRepository[User]):
            model_class = User

            async def get_provider(self, user_id: int):
                # Custom method
                ...
    """

    model_class: Type[ModelType]

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session."""
        self.session = session

    async def get_by_id(self, entity_id: int) -> Optional[ModelType]:
        """
        Get entity by its primary key ID.

        Args:
            entity_id: Primary key ID

        Returns:
            Entity or None if not found
        """
        result = await self.session.execute(
            select(self.model_class).where(self.model_class.id == entity_id)
        )
        return result.scalar_one_or_none()

    def add(self, entity: ModelType) -> None:
        """
        Add entity to session (for create operations).

        Args:
            entity: Entity to add
        """
        self.session.add(entity)

    async def flush(self) -> None:
        """Flush session changes to database."""
        await self.session.flush()
