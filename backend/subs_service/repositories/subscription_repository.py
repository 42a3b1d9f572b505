"""Subscription persistence — the storage port and its SQLAlchemy adapter.

The repository owns storage mechanics only. It never validates business
data; the service does that before calling in.
"""

from __future__ import annotations

import contextlib
import uuid
from collections.abc import Iterator
from datetime import date
from typing import Protocol

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from subs_service.errors import StorageError
from subs_service.models.subscription import Subscription
from subs_service.repositories.filters import (
    SubscriptionFilter,
    build_list_query,
    build_sum_query,
)


class SubscriptionRepository(Protocol):
    """Storage operations the subscription service depends on."""

    async def create(self, subscription: Subscription) -> int:
        ...

    async def read_by_id(self, subscription_id: int) -> Subscription | None:
        ...

    async def update(self, subscription: Subscription) -> int:
        ...

    async def delete(self, subscription_id: int) -> None:
        ...

    async def list(self, subscription_filter: SubscriptionFilter) -> list[Subscription]:
        ...

    async def sum_by_period(
        self,
        period_from: date,
        period_to: date,
        user_id: uuid.UUID | None = None,
        service_name: str | None = None,
    ) -> int:
        ...


@contextlib.contextmanager
def _storage_errors(operation: str) -> Iterator[None]:
    """Re-raise database failures as StorageError."""
    try:
        yield
    except (SQLAlchemyError, OSError, TimeoutError) as exc:
        raise StorageError(f"failed to {operation} subscription: {exc}") from exc


class SqlAlchemySubscriptionRepository:
    """SubscriptionRepository backed by an async SQLAlchemy session.

    The session is owned by the caller (one per request via ``get_db``);
    this class only flushes, the caller commits or rolls back.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, subscription: Subscription) -> int:
        """Insert the subscription and return its store-assigned id."""
        with _storage_errors("create"):
            self._session.add(subscription)
            await self._session.flush()
            return subscription.id

    async def read_by_id(self, subscription_id: int) -> Subscription | None:
        """Return the subscription, or None when no row has this id."""
        query = (
            select(Subscription)
            .where(Subscription.id == subscription_id)
            .execution_options(populate_existing=True)
        )
        with _storage_errors("read"):
            result = await self._session.execute(query)
            return result.scalar_one_or_none()

    async def update(self, subscription: Subscription) -> int:
        """Replace every mutable column of the row; return the rows affected."""
        statement = (
            update(Subscription)
            .where(Subscription.id == subscription.id)
            .values(
                service_name=subscription.service_name,
                price=subscription.price,
                user_id=subscription.user_id,
                start_date=subscription.start_date,
                end_date=subscription.end_date,
            )
            .execution_options(synchronize_session=False)
        )
        with _storage_errors("update"):
            result = await self._session.execute(statement)
            return result.rowcount

    async def delete(self, subscription_id: int) -> None:
        statement = (
            delete(Subscription)
            .where(Subscription.id == subscription_id)
            .execution_options(synchronize_session=False)
        )
        with _storage_errors("delete"):
            await self._session.execute(statement)

    async def list(self, subscription_filter: SubscriptionFilter) -> list[Subscription]:
        with _storage_errors("list"):
            result = await self._session.execute(build_list_query(subscription_filter))
            return list(result.scalars().all())

    async def sum_by_period(
        self,
        period_from: date,
        period_to: date,
        user_id: uuid.UUID | None = None,
        service_name: str | None = None,
    ) -> int:
        """Total price of subscriptions overlapping the window; 0 if none match."""
        query = build_sum_query(period_from, period_to, user_id, service_name)
        with _storage_errors("sum"):
            result = await self._session.execute(query)
            return int(result.scalar_one())
