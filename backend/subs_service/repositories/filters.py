"""Query builders for listing and summing subscriptions.

Every value ends up as a bound parameter; SQLAlchemy numbers positional
placeholders in the order the predicates are added here (user id, then
service name, then LIMIT/OFFSET).
"""

import uuid
from dataclasses import dataclass
from datetime import date

from sqlalchemy import ColumnElement, Select, func, or_, select

from subs_service.models.subscription import Subscription

DEFAULT_LIST_LIMIT = 100


@dataclass(frozen=True)
class SubscriptionFilter:
    """Optional equality filters plus pagination bounds for a listing."""

    user_id: uuid.UUID | None = None
    service_name: str | None = None
    limit: int = DEFAULT_LIST_LIMIT
    offset: int = 0


def filter_conditions(
    user_id: uuid.UUID | None,
    service_name: str | None,
) -> list[ColumnElement[bool]]:
    """Return the equality predicates for the filters that are present."""
    conditions: list[ColumnElement[bool]] = []
    if user_id is not None:
        conditions.append(Subscription.user_id == user_id)
    if service_name is not None:
        conditions.append(Subscription.service_name == service_name)
    return conditions


def build_list_query(subscription_filter: SubscriptionFilter) -> Select[tuple[Subscription]]:
    """SELECT matching subscriptions ordered by id, always bounded by LIMIT."""
    query = select(Subscription)

    conditions = filter_conditions(subscription_filter.user_id, subscription_filter.service_name)
    if conditions:
        query = query.where(*conditions)

    limit = subscription_filter.limit if subscription_filter.limit > 0 else DEFAULT_LIST_LIMIT
    query = query.order_by(Subscription.id.asc()).limit(limit)

    if subscription_filter.offset > 0:
        query = query.offset(subscription_filter.offset)
    return query


def build_sum_query(
    period_from: date,
    period_to: date,
    user_id: uuid.UUID | None = None,
    service_name: str | None = None,
) -> Select[tuple[int]]:
    """SELECT the total price of subscriptions active at any point in the window.

    A subscription overlaps ``[period_from, period_to]`` when it starts no
    later than ``period_to`` and either never ends or ends no earlier than
    ``period_from``. Whole prices are summed; nothing is pro-rated.
    """
    return select(func.coalesce(func.sum(Subscription.price), 0)).where(
        Subscription.start_date <= period_to,
        or_(Subscription.end_date.is_(None), Subscription.end_date >= period_from),
        *filter_conditions(user_id, service_name),
    )
