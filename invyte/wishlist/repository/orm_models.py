from datetime import datetime
from uuid import UUID

from sqlalchemy import Boolean, DateTime, Enum, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from invyte.config.table_names import TableNames
from invyte.models.base import Base, TimeStamp
from invyte.wishlist.dtos import ClaimStatus


class WishlistItem(Base, TimeStamp):
    __tablename__ = TableNames.WISHLIST.value

    host_id: Mapped[UUID] = mapped_column(
        ForeignKey(f"{TableNames.USERS.value}.uuid", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    # NULL for items on a user's personal wishlist
    event_id: Mapped[UUID | None] = mapped_column(
        ForeignKey(f"{TableNames.EVENTS.value}.uuid", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    gift_name: Mapped[str] = mapped_column(String(255), nullable=False)
    gift_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    gift_image_url: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Claim state, mutated only through the wishlist write model
    is_claimed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    claimed_by: Mapped[UUID | None] = mapped_column(
        ForeignKey(f"{TableNames.USERS.value}.uuid", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    claim_status: Mapped[str] = mapped_column(
        Enum(ClaimStatus, name="claim_status_enum", values_callable=lambda x: [e.value for e in x]),
        default=ClaimStatus.PENDING,
        nullable=False,
    )
    claimed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    confirmed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    released_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    def __repr__(self) -> str:
        return f"<WishlistItem {self.gift_name} claimed={self.is_claimed}>"
