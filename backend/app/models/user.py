"""
Exercise Tracker Backend - User SQLAlchemy Model
=================================================

What:  ORM model for the `users` table.
Who:   Used by UserService / ExerciseService and by Alembic.

Table Design:
    - id: short random string, generated in Python (see database.short_id)
    - name: unique; creation is idempotent by name
    - count: denormalized number of exercises, only ever changed by the
      atomic increment in ExerciseService.add_exercise
    - created_at: UTC timestamp; GET /api/users lists in this order
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Index, Integer, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base, short_id


class User(Base):
    """
    A person logging exercises.

    Exercises are stored in their own table but owned exclusively by the user:
    they reference `users.id` with ON DELETE CASCADE and are never created
    without one.
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(
        String(32),
        primary_key=True,
        default=short_id,
    )

    name: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Username; the lookup key for idempotent creation",
    )

    count: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        server_default=text("0"),
        comment="Number of exercises logged for this user",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        Index("uq_users_name", "name", unique=True),
        Index("idx_users_created_at", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, name='{self.name}', count={self.count})>"
