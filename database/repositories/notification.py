"""Notification repository for database operations."""
from typing import List

from sqlalchemy import select

from database.models import Notification
from database.repositories.base import BaseRepository


class NotificationRepository(BaseRepository[Notification]):
    """Repository for Notification model operations."""

    model_class = Notification

    async def create(self, recipient_id: int, content: str) -> Notification:
        """Create new unread notification."""
        notification = Notification(recipient_id=recipient_id, content=content, read=False)
        self.add(notification)
        await self.flush()
        return notification

    async def get_by_recipient(self, recipient_id: int, limit: int = 20) -> List[Notification]:
        """Latest notifications for a user, newest first."""
        result = await self.session.execute(
            select(Notification)
            .where(Notification.recipient_id == recipient_id)
            .order_by(Notification.id.desc())
            .limit(limit)
        )
        return list(result.scalars().all())
