from datetime import datetime
from uuid import UUID

from sqlalchemy import DateTime, Enum, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from invyte.config.table_names import TableNames
from invyte.events.dtos import EventStatus
from invyte.models.base import Base, TimeStamp


class Event(Base, TimeStamp):
    __tablename__ = TableNames.EVENTS.value

    host_id: Mapped[UUID] = mapped_column(
        ForeignKey(f"{TableNames.USERS.value}.uuid", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    event_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    venue: Mapped[str | None] = mapped_column(String(500), nullable=True)
    theme: Mapped[str | None] = mapped_column(String(255), nullable=True)
    status: Mapped[str] = mapped_column(
        Enum(EventStatus, name="event_status_enum", values_callable=lambda x: [e.value for e in x]),
        default=EventStatus.LIVE,
        nullable=False,
    )
    # Random token used in the link sent with every invitation
    invite_link: Mapped[str] = mapped_column(String(36), nullable=False, unique=True, index=True)

    def __repr__(self) -> str:
        return f"<Event {self.title} ({self.status})>"
