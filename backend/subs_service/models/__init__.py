"""SQLAlchemy models for the subscription service.

All models are imported here so that Alembic's autogenerate can discover
them via Base.metadata. If you add a new model, import it in this file.
"""

from subs_service.models.subscription import Subscription

__all__ = [
    "Subscription",
]
