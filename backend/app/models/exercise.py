"""
Exercise Tracker Backend - Exercise SQLAlchemy Model
=====================================================

What:  ORM model for the `exercises` table, child rows of `users`.
How:   `position` is the zero-based insertion index inside the owning user,
       taken from the user's count at insert time. Logs are read ordered by it.

Query Patterns:
    - User log: WHERE user_id = :id [AND date BETWEEN ...] ORDER BY position
      → covered by uq_exercises_user_position
"""

import datetime

from sqlalchemy import Date, Float, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base, short_id


class Exercise(Base):
    """A single logged exercise. Immutable once created."""

    __tablename__ = "exercises"

    id: Mapped[str] = mapped_column(
        String(32),
        primary_key=True,
        default=short_id,
    )

    user_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    description: Mapped[str] = mapped_column(Text, nullable=False)

    # Minutes
    duration: Mapped[float] = mapped_column(Float, nullable=False)

    date: Mapped[datetime.date] = mapped_column(Date, nullable=False)

    position: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Insertion order within the owning user (0-based)",
    )

    __table_args__ = (
        Index("uq_exercises_user_position", "user_id", "position", unique=True),
    )

    def __repr__(self) -> str:
        return (
            f"<Exercise(id={self.id}, user_id={self.user_id}, "
            f"date='{self.date}', position={self.position})>"
        )
