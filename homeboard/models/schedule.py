"""
Schedule Model - weekly availability blocks
"""
import uuid
from datetime import date, datetime, time
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Index, Integer, String, Time, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from homeboard.core.timezone import utc_now
from homeboard.db.database import Base

if TYPE_CHECKING:
    from homeboard.models.user import User


# Stored bounds for all-day blocks
ALL_DAY_START = time(0, 0)
ALL_DAY_END = time(23, 59)


class Schedule(Base):
    """One time block of a user's availability on one day of one week"""

    __tablename__ = "schedules"
    __table_args__ = (
        Index("ix_schedules_user_week_day", "user_id", "week_key", "day"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4
    )

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    # ISO week, e.g. "2024-W05"
    week_key: Mapped[str] = mapped_column(String(8), nullable=False, index=True)
    # Weekday name, e.g. "Monday"
    day: Mapped[str] = mapped_column(String(9), nullable=False)
    schedule_date: Mapped[Optional[date]] = mapped_column("date", Date, nullable=True)

    start_time: Mapped[time] = mapped_column(Time, nullable=False)
    end_time: Mapped[time] = mapped_column(Time, nullable=False)
    label: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    all_day: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False
    )

    user: Mapped["User"] = relationship(
        "User",
        back_populates="schedules",
        lazy="noload"
    )

    def __repr__(self) -> str:
        return f"<Schedule {self.user_id} {self.week_key} {self.day} {self.start_time}-{self.end_time}>"
