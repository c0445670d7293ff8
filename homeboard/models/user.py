"""
User Model
"""
from datetime import datetime
from typing import TYPE_CHECKING, List

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from homeboard.core.timezone import utc_now
from homeboard.db.database import Base

if TYPE_CHECKING:
    from homeboard.models.schedule import Schedule


class User(Base):
    """A household member. The list is curated outside the app and never edited here."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    color: Mapped[str] = mapped_column(String(20), nullable=False)
    initial: Mapped[str] = mapped_column(String(1), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False
    )

    # Relationships - use lazy="noload" to avoid N+1 queries
    schedules: Mapped[List["Schedule"]] = relationship(
        "Schedule",
        back_populates="user",
        lazy="noload"
    )

    def __repr__(self) -> str:
        return f"<User {self.id} {self.name}>"


# The household as first provisioned
DEFAULT_USERS = [
    {"id": 1, "name": "Riko", "color": "#BB86FC", "initial": "R"},
    {"id": 2, "name": "Narumi", "color": "#03DAC6", "initial": "N"},
    {"id": 3, "name": "John", "color": "#CF6679", "initial": "J"},
]
