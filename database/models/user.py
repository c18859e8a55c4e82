"""User model - customers and providers share one table."""
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import BigInteger, String, Boolean, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from database.base import Base
from database.types import BigIntegerPK

if TYPE_CHECKING:
    from database.models.file import File


class User(Base):
    """User model.

    Profiles are managed elsewhere; the scheduling core only reads the name,
    email and the provider capability flag.
    """

    __tablename__ = "users"

    # Primary key
    id: Mapped[int] = mapped_column(BigIntegerPK, primary_key=True, autoincrement=True)

    # Personal info
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)

    # Provider capability
    provider: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # Avatar
    avatar_id: Mapped[int | None] = mapped_column(
        BigInteger,
        ForeignKey("files.id", ondelete="SET NULL"),
        nullable=True
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False
    )

    # Relationships
    avatar: Mapped["File | None"] = relationship("File")

    def __repr__(self) -> str:
        return f"<User(id={self.id}, name='{self.name}', provider={self.provider})>"
