"""Shared API dependencies — single import point for all routers.

Re-exports the database session dependency and builds the per-request
subscription service::

    from subs_service.api.deps import get_db, get_subscription_service
"""

import logging

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from subs_service.database import get_db
from subs_service.repositories.subscription_repository import SqlAlchemySubscriptionRepository
from subs_service.services.subscription_service import SubscriptionService

service_logger = logging.getLogger("subs_service.subscriptions")


async def get_subscription_service(db: AsyncSession = Depends(get_db)) -> SubscriptionService:
    """Wire a SubscriptionService to the request's database session."""
    return SubscriptionService(SqlAlchemySubscriptionRepository(db), logger=service_logger)


__all__ = [
    "get_db",
    "get_subscription_service",
]
