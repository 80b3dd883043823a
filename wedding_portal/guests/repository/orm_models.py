from datetime import date, datetime, time
from decimal import Decimal
from uuid import UUID

from sqlalchemy import (
    JSON,
    Boolean,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Numeric,
    String,
    Text,
    Time,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from wedding_portal.config.table_names import TableNames
from wedding_portal.guests.dtos import ContributionTier, InviteType, PaymentType, RsvpStatus
from wedding_portal.models.base import Base, TimeStamp


def _enum(enum_cls, name: str) -> Enum:
    return Enum(enum_cls, name=name, values_callable=lambda x: [e.value for e in x])


class Invite(Base, TimeStamp):
    __tablename__ = TableNames.INVITES.value

    invite_code: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)
    invite_type: Mapped[InviteType] = mapped_column(
        _enum(InviteType, "invite_type_enum"), nullable=False
    )
    accommodation_group: Mapped[str | None] = mapped_column(String(100), nullable=True, index=True)
    invited_to_atitlan: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    rsvp_status: Mapped[RsvpStatus] = mapped_column(
        _enum(RsvpStatus, "rsvp_status_enum"),
        default=RsvpStatus.PENDING,
        nullable=False,
    )
    rsvp_submitted_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, default=None
    )
    invite_sent: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    guests: Mapped[list["Guest"]] = relationship("Guest", back_populates="invite")

    def __repr__(self) -> str:
        return f"<Invite {self.invite_code} - {self.rsvp_status.value}>"


class Guest(Base, TimeStamp):
    __tablename__ = TableNames.GUESTS.value

    invite_id: Mapped[UUID] = mapped_column(
        ForeignKey(f"{TableNames.INVITES.value}.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    first_name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    last_name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)
    # identity in the hosted session store, only set for guests who can log in
    user_id: Mapped[UUID | None] = mapped_column(nullable=True, index=True)
    is_primary: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    invite: Mapped[Invite] = relationship("Invite", back_populates="guests")

    def __repr__(self) -> str:
        return f"<Guest {self.first_name} {self.last_name}>"


class RsvpResponse(Base, TimeStamp):
    __tablename__ = TableNames.RSVP_RESPONSES.value

    guest_id: Mapped[UUID] = mapped_column(
        ForeignKey(f"{TableNames.GUESTS.value}.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True,
    )
    attending: Mapped[bool] = mapped_column(Boolean, nullable=False)
    dietary_restrictions: Mapped[list[str]] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"), nullable=False, default=list
    )
    dietary_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    accommodation_needed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    accommodation_payment_level: Mapped[ContributionTier | None] = mapped_column(
        _enum(ContributionTier, "contribution_tier_enum"), nullable=True
    )
    atitlan_attending: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    atitlan_payment_level: Mapped[ContributionTier | None] = mapped_column(
        _enum(ContributionTier, "contribution_tier_enum"), nullable=True
    )

    def __repr__(self) -> str:
        return f"<RsvpResponse guest={self.guest_id} attending={self.attending}>"


class TravelDetails(Base, TimeStamp):
    __tablename__ = TableNames.TRAVEL_DETAILS.value

    guest_id: Mapped[UUID] = mapped_column(
        ForeignKey(f"{TableNames.GUESTS.value}.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True,
    )
    arrival_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    arrival_time: Mapped[time | None] = mapped_column(Time, nullable=True)
    arrival_airline: Mapped[str | None] = mapped_column(String(255), nullable=True)
    arrival_flight_number: Mapped[str | None] = mapped_column(String(50), nullable=True)
    departure_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    departure_time: Mapped[time | None] = mapped_column(Time, nullable=True)
    departure_airline: Mapped[str | None] = mapped_column(String(255), nullable=True)
    departure_flight_number: Mapped[str | None] = mapped_column(String(50), nullable=True)
    needs_transfer: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<TravelDetails guest={self.guest_id}>"


class Payment(Base, TimeStamp):
    __tablename__ = TableNames.PAYMENTS.value

    invite_id: Mapped[UUID] = mapped_column(
        ForeignKey(f"{TableNames.INVITES.value}.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    payment_type: Mapped[PaymentType] = mapped_column(
        _enum(PaymentType, "payment_type_enum"), nullable=False
    )
    amount_committed: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    amount_paid: Mapped[Decimal] = mapped_column(
        Numeric(10, 2), nullable=False, default=Decimal("0")
    )
    payment_method: Mapped[str | None] = mapped_column(String(100), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<Payment {self.payment_type.value} invite={self.invite_id}>"
