from decimal import Decimal

from sqlalchemy import JSON, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from wedding_portal.config.table_names import TableNames
from wedding_portal.models.base import Base, TimeStamp


class AccommodationGroup(Base, TimeStamp):
    """Hotel block a set of invites is assigned to."""

    __tablename__ = TableNames.ACCOMMODATION_GROUPS.value

    group_code: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)
    display_name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    per_night_cost: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    number_of_nights: Mapped[int] = mapped_column(Integer, nullable=False)
    # contribution fractions guests may pick from, e.g. [0, 0.5, 1]
    payment_options: Mapped[list[float]] = mapped_column(JSON, nullable=False, default=list)

    def __repr__(self) -> str:
        return f"<AccommodationGroup {self.group_code}>"
