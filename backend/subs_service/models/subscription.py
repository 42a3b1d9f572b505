"""Subscription model — one paid service a user is billed for, by month."""

import uuid
from datetime import date

from sqlalchemy import BigInteger, CheckConstraint, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from subs_service.database import Base, UpdatedAtMixin


class Subscription(UpdatedAtMixin, Base):
    """A user's subscription to a service over a range of calendar months.

    ``start_date`` and ``end_date`` are always the first day of a month.
    A missing ``end_date`` means the subscription is still active.
    """

    __tablename__ = "subscriptions"

    # BIGSERIAL on PostgreSQL; SQLite only autoincrements INTEGER PRIMARY KEY
    id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"),
        primary_key=True,
        autoincrement=True,
    )
    service_name: Mapped[str] = mapped_column(Text, nullable=False)
    price: Mapped[int] = mapped_column(BigInteger, nullable=False)  # minor currency units
    user_id: Mapped[uuid.UUID] = mapped_column(nullable=False, index=True)
    start_date: Mapped[date] = mapped_column(nullable=False)
    end_date: Mapped[date | None] = mapped_column(nullable=True)

    __table_args__ = (
        CheckConstraint("price > 0", name="ck_subscriptions_price_positive"),
    )

    def __repr__(self) -> str:
        return (
            f"<Subscription(id={self.id}, service_name={self.service_name}, "
            f"price={self.price}, user_id={self.user_id})>"
        )
