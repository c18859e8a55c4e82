"""User repository for database operations."""
from typing import Optional

from sqlalchemy import select

from database.models import User
from database.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Read access to customers and providers."""

    model_class = User

    async def get_provider(self, user_id: int) -> Optional[User]:
        """Get user by ID only if it has provider capability."""
        result = await self.session.execute(
            select(User).where(User.id == user_id, User.provider.is_(True))
        )
        return result.scalar_one_or_none()
