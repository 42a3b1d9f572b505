"""Subscription service — validation, normalization, and business rules.

This is the only layer the API calls into. Nothing reaches the repository
before it has been validated here.
"""

from __future__ import annotations

import logging
import uuid
from datetime import date

from subs_service.errors import NotFoundError, StorageError, ValidationError
from subs_service.models.subscription import Subscription
from subs_service.repositories.filters import DEFAULT_LIST_LIMIT, SubscriptionFilter
from subs_service.repositories.subscription_repository import SubscriptionRepository
from subs_service.services.periods import parse_month_year

# Largest value the BIGINT price column holds
MAX_PRICE = 2**63 - 1


def _parse_user_id(value: str) -> uuid.UUID:
    try:
        return uuid.UUID(value)
    except (ValueError, TypeError, AttributeError) as exc:
        raise ValidationError(f"invalid user_id: {value}") from exc


class SubscriptionService:
    """Create, read, update, delete, list, and sum subscriptions."""

    def __init__(
        self,
        repository: SubscriptionRepository,
        logger: logging.Logger | logging.LoggerAdapter | None = None,
    ) -> None:
        self._repository = repository
        self._logger = logger if logger is not None else logging.getLogger(__name__)

    def _build(
        self,
        service_name: str,
        price: int,
        user_id: str,
        start_date: str,
        end_date: str | None,
    ) -> Subscription:
        """Validate raw input and return an unsaved, normalized Subscription."""
        if not service_name:
            raise ValidationError("service name cannot be empty")
        if isinstance(price, bool) or not isinstance(price, int) or price <= 0:
            raise ValidationError("price must be > 0")
        if price > MAX_PRICE:
            raise ValidationError(f"price must not exceed {MAX_PRICE}")

        uid = _parse_user_id(user_id)
        start = parse_month_year(start_date)

        end: date | None = None
        if end_date:  # "" means open-ended, same as None
            end = parse_month_year(end_date)
            if end < start:
                raise ValidationError("end_date cannot be before start_date")

        return Subscription(
            service_name=service_name,
            price=price,
            user_id=uid,
            start_date=start,
            end_date=end,
        )

    async def create(
        self,
        service_name: str,
        price: int,
        user_id: str,
        start_date: str,
        end_date: str | None = None,
    ) -> int:
        """Validate and store a new subscription; return its id."""
        try:
            subscription = self._build(service_name, price, user_id, start_date, end_date)
        except ValidationError as exc:
            self._logger.warning("Rejected subscription create: %s", exc)
            raise

        try:
            subscription_id = await self._repository.create(subscription)
        except StorageError:
            self._logger.exception("Failed to create subscription")
            raise

        self._logger.info("Subscription created: id=%s", subscription_id)
        return subscription_id

    async def read_by_id(self, subscription_id: int) -> Subscription:
        """Return the subscription or raise NotFoundError."""
        try:
            subscription = await self._repository.read_by_id(subscription_id)
        except StorageError:
            self._logger.exception("Failed to read subscription %s", subscription_id)
            raise

        if subscription is None:
            self._logger.info("Subscription %s not found", subscription_id)
            raise NotFoundError(f"subscription {subscription_id} not found")
        return subscription

    async def update(
        self,
        subscription_id: int,
        service_name: str,
        price: int,
        user_id: str,
        start_date: str,
        end_date: str | None = None,
    ) -> None:
        """Replace every mutable field of a subscription.

        Existence is not checked first: updating an unknown id writes
        nothing and is logged, not raised.
        """
        try:
            subscription = self._build(service_name, price, user_id, start_date, end_date)
        except ValidationError as exc:
            self._logger.warning("Rejected update of subscription %s: %s", subscription_id, exc)
            raise
        subscription.id = subscription_id

        try:
            affected = await self._repository.update(subscription)
        except StorageError:
            self._logger.exception("Failed to update subscription %s", subscription_id)
            raise

        if affected == 0:
            self._logger.warning("Update matched no subscription with id=%s", subscription_id)
        else:
            self._logger.info("Subscription updated: id=%s", subscription_id)

    async def delete(self, subscription_id: int) -> None:
        """Delete by id. Deleting an unknown id is not an error."""
        try:
            await self._repository.delete(subscription_id)
        except StorageError:
            self._logger.exception("Failed to delete subscription %s", subscription_id)
            raise
        self._logger.info("Subscription deleted: id=%s", subscription_id)

    async def list(
        self,
        user_id: str | None = None,
        service_name: str | None = None,
        limit: int = 0,
        offset: int = 0,
    ) -> list[Subscription]:
        """List subscriptions by optional exact-match filters, ordered by id.

        A limit of zero falls back to DEFAULT_LIST_LIMIT; there is no way to
        ask for an unbounded list.
        """
        if limit < 0 or offset < 0:
            self._logger.warning("Rejected list: limit=%s offset=%s", limit, offset)
            raise ValidationError("limit and offset must not be negative")

        uid: uuid.UUID | None = None
        if user_id is not None:
            try:
                uid = _parse_user_id(user_id)
            except ValidationError as exc:
                self._logger.warning("Rejected list: %s", exc)
                raise

        subscription_filter = SubscriptionFilter(
            user_id=uid,
            service_name=service_name,
            limit=limit or DEFAULT_LIST_LIMIT,
            offset=offset,
        )
        try:
            return await self._repository.list(subscription_filter)
        except StorageError:
            self._logger.exception("Failed to list subscriptions")
            raise

    async def sum_by_period(
        self,
        period_from: str,
        period_to: str,
        user_id: str | None = None,
        service_name: str | None = None,
    ) -> int:
        """Sum the prices of subscriptions active at any point in the window.

        A subscription counts when ``start_date <= to`` and it has no end or
        ``end_date >= from``. Each match contributes its whole price.
        """
        try:
            start = parse_month_year(period_from)
            end = parse_month_year(period_to)
            uid = _parse_user_id(user_id) if user_id is not None else None
        except ValidationError as exc:
            self._logger.warning("Rejected sum: %s", exc)
            raise

        try:
            total = await self._repository.sum_by_period(start, end, uid, service_name)
        except StorageError:
            self._logger.exception("Failed to sum subscriptions")
            raise

        self._logger.info(
            "Summed subscriptions %s..%s user_id=%s service_name=%s: total=%s",
            period_from,
            period_to,
            uid,
            service_name,
            total,
        )
        return total
