"""File model - uploaded avatar metadata."""
from datetime import datetime

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from core.config import settings
from database.base import Base
from database.types import BigIntegerPK


class File(Base):
    """Uploaded file."""

    __tablename__ = "files"

    id: Mapped[int] = mapped_column(BigIntegerPK, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    path: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)

    created_at: Mapped[datetime] = mapped_column(server_default=func.now(), nullable=False)

    @property
    def url(self) -> str:
        return f"{settings.files_base_url}/{self.path}"

    def __repr__(self) -> str:
        return f"<File(id={self.id}, path='{self.path}')>"
