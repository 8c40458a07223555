from datetime import datetime
from uuid import UUID

from sqlalchemy import DateTime, Enum, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from invyte.config.table_names import TableNames
from invyte.guests.dtos import GiftOption, InviteStatus, RSVPStatus
from invyte.models.base import Base, TimeStamp


class Guest(Base, TimeStamp):
    __tablename__ = TableNames.EVENT_GUESTS.value
    __table_args__ = (
        UniqueConstraint("event_id", "phone_number", name="uq_event_guests_event_phone"),
    )

    event_id: Mapped[UUID] = mapped_column(
        ForeignKey(f"{TableNames.EVENTS.value}.uuid", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    # External identity of the invitee, unique per event
    phone_number: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    guest_name: Mapped[str] = mapped_column(String(255), nullable=False)

    # Guests are never deleted; dropping one from the list marks it "removed"
    invite_status: Mapped[str] = mapped_column(
        Enum(InviteStatus, name="invite_status_enum", values_callable=lambda x: [e.value for e in x]),
        default=InviteStatus.INVITED,
        nullable=False,
    )
    rsvp_status: Mapped[str] = mapped_column(
        Enum(RSVPStatus, name="rsvp_status_enum", values_callable=lambda x: [e.value for e in x]),
        default=RSVPStatus.PENDING,
        nullable=False,
    )
    gift_option: Mapped[str | None] = mapped_column(
        Enum(GiftOption, name="gift_option_enum", values_callable=lambda x: [e.value for e in x]),
        nullable=True,
    )
    # Single-claim pointer: the first item claimed with the latest "gift" response
    wishlist_id: Mapped[UUID | None] = mapped_column(
        ForeignKey(f"{TableNames.WISHLIST.value}.uuid", ondelete="SET NULL"),
        nullable=True,
    )

    invited_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    responded_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    def __repr__(self) -> str:
        return f"<Guest {self.guest_name} ({self.phone_number}) - {self.invite_status}/{self.rsvp_status}>"
