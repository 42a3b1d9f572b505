"""Seed the database with sample subscriptions for two demo users.

Goes through SubscriptionService so seeded rows obey the same validation
and month normalization as API-created ones.

Run inside Docker:
    docker compose exec backend python -m scripts.seed_data
"""

import asyncio
import sys
import uuid
from pathlib import Path

# Add backend to path so imports work when run as a script
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from sqlalchemy import delete

from subs_service.database import async_session_factory, engine
from subs_service.models.subscription import Subscription
from subs_service.repositories.subscription_repository import SqlAlchemySubscriptionRepository
from subs_service.services.subscription_service import SubscriptionService

# ---------------------------------------------------------------------------
# Seed data definitions
# ---------------------------------------------------------------------------

DEMO_USERS = [
    "60601fee-2bf1-4721-ae6f-7636e79a0cba",
    "3f6c2b1e-9d4a-4c8e-8f1b-2a7d5e0c9b64",
]

# (user index, service name, price in minor units, start, end)
SUBSCRIPTIONS = [
    (0, "Yandex Plus", 400, "07-2025", None),
    (0, "Netflix", 999, "01-2024", "12-2024"),
    (0, "Spotify", 299, "06-2023", None),
    (1, "Netflix", 999, "03-2025", None),
    (1, "iCloud", 99, "01-2022", "06-2025"),
    (1, "Kinopoisk", 349, "02-2026", ""),
]


# ---------------------------------------------------------------------------
# Main seed function
# ---------------------------------------------------------------------------


async def seed() -> None:
    """Populate the database with demo subscriptions.

    Idempotent: deletes every subscription owned by the demo users first.
    """
    async with async_session_factory() as session:
        service = SubscriptionService(SqlAlchemySubscriptionRepository(session))

        for user_id in DEMO_USERS:
            await session.execute(delete(Subscription).where(Subscription.user_id == uuid.UUID(user_id)))
        await session.flush()

        created = 0
        for user_index, service_name, price, start, end in SUBSCRIPTIONS:
            subscription_id = await service.create(
                service_name, price, DEMO_USERS[user_index], start, end
            )
            created += 1
            print(f"   {service_name} — {price} from {start} (id={subscription_id})")

        await session.commit()

        total_2025 = await service.sum_by_period("01-2025", "12-2025")

    await engine.dispose()

    print("=" * 60)
    print(f"   Subscriptions: {created}")
    print(f"   Total active in 2025: {total_2025}")
    print("=" * 60)


if __name__ == "__main__":
    asyncio.run(seed())
