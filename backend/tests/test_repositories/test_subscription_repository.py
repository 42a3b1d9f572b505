"""Repository tests against an in-memory SQLite database."""

import uuid
from datetime import date
from unittest.mock import AsyncMock

import pytest
from sqlalchemy import BigInteger, Text
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from subs_service.errors import StorageError
from subs_service.models.subscription import Subscription
from subs_service.repositories.filters import SubscriptionFilter
from subs_service.repositories.subscription_repository import SqlAlchemySubscriptionRepository


@pytest.fixture
def repository(db_session: AsyncSession) -> SqlAlchemySubscriptionRepository:
    return SqlAlchemySubscriptionRepository(db_session)


def _subscription(user_id: uuid.UUID, **overrides) -> Subscription:
    values = {
        "service_name": "Netflix",
        "price": 999,
        "user_id": user_id,
        "start_date": date(2024, 1, 1),
        "end_date": None,
    }
    values.update(overrides)
    return Subscription(**values)


class TestCreateAndRead:
    async def test_create_assigns_increasing_ids(self, repository, user_id):
        first = await repository.create(_subscription(user_id))
        second = await repository.create(_subscription(user_id))
        assert isinstance(first, int)
        assert second > first

    async def test_round_trip(self, repository, user_id):
        new_id = await repository.create(
            _subscription(user_id, service_name="Yandex Plus", price=400, end_date=date(2025, 12, 1))
        )

        stored = await repository.read_by_id(new_id)

        assert stored is not None
        assert stored.id == new_id
        assert stored.service_name == "Yandex Plus"
        assert stored.price == 400
        assert stored.user_id == user_id
        assert stored.start_date == date(2024, 1, 1)
        assert stored.end_date == date(2025, 12, 1)

    async def test_missing_row_is_none(self, repository):
        assert await repository.read_by_id(987654) is None

    async def test_long_service_name_and_largest_price_round_trip(self, repository, user_id):
        long_name = "Premium " * 64
        new_id = await repository.create(
            _subscription(user_id, service_name=long_name, price=2**63 - 1)
        )

        stored = await repository.read_by_id(new_id)

        assert stored.service_name == long_name
        assert stored.price == 2**63 - 1

    def test_column_types(self):
        columns = Subscription.__table__.c
        assert isinstance(columns.service_name.type, Text)
        assert isinstance(columns.price.type, BigInteger)


class TestUpdate:
    async def test_replaces_all_fields(self, repository, user_id):
        new_id = await repository.create(_subscription(user_id, end_date=date(2024, 6, 1)))
        other_user = uuid.uuid4()

        replacement = _subscription(
            other_user,
            service_name="Spotify",
            price=299,
            start_date=date(2023, 3, 1),
            end_date=None,
        )
        replacement.id = new_id
        affected = await repository.update(replacement)

        assert affected == 1
        stored = await repository.read_by_id(new_id)
        assert stored.service_name == "Spotify"
        assert stored.price == 299
        assert stored.user_id == other_user
        assert stored.start_date == date(2023, 3, 1)
        assert stored.end_date is None

    async def test_unknown_id_affects_nothing(self, repository, user_id):
        ghost = _subscription(user_id)
        ghost.id = 424242
        assert await repository.update(ghost) == 0


class TestDelete:
    async def test_delete_removes_row(self, repository, user_id):
        new_id = await repository.create(_subscription(user_id))
        await repository.delete(new_id)
        assert await repository.read_by_id(new_id) is None

    async def test_delete_unknown_id_is_silent(self, repository):
        await repository.delete(123456)


class TestList:
    async def test_ordered_by_id(self, repository, make_subscription, user_id):
        for name in ("C", "A", "B"):
            await make_subscription(user_id=user_id, service_name=name)

        rows = await repository.list(SubscriptionFilter())

        ids = [row.id for row in rows]
        assert ids == sorted(ids)
        assert [row.service_name for row in rows] == ["C", "A", "B"]

    async def test_default_cap(self, repository, make_subscription, user_id):
        for _ in range(105):
            await make_subscription(user_id=user_id)

        rows = await repository.list(SubscriptionFilter())

        assert len(rows) == 100
        assert [row.id for row in rows] == sorted(row.id for row in rows)

    async def test_limit_and_offset(self, repository, make_subscription, user_id):
        created = [await make_subscription(user_id=user_id) for _ in range(5)]

        rows = await repository.list(SubscriptionFilter(limit=2, offset=1))

        assert [row.id for row in rows] == [created[1].id, created[2].id]

    async def test_filters_are_exact_match(self, repository, make_subscription, user_id):
        other_user = uuid.uuid4()
        await make_subscription(user_id=user_id, service_name="Netflix")
        await make_subscription(user_id=user_id, service_name="Netflix Premium")
        await make_subscription(user_id=other_user, service_name="Netflix")

        rows = await repository.list(SubscriptionFilter(user_id=user_id, service_name="Netflix"))

        assert len(rows) == 1
        assert rows[0].user_id == user_id
        assert rows[0].service_name == "Netflix"

    async def test_unknown_user_gives_empty_list(self, repository, make_subscription, user_id):
        await make_subscription(user_id=user_id)
        assert await repository.list(SubscriptionFilter(user_id=uuid.uuid4())) == []


class TestSumByPeriod:
    WINDOW = (date(2024, 1, 1), date(2024, 12, 1))

    async def test_open_ended_started_before_window_counts(
        self, repository, make_subscription, user_id
    ):
        await make_subscription(user_id=user_id, price=700, start="06-2023")
        assert await repository.sum_by_period(*self.WINDOW) == 700

    async def test_starting_after_window_excluded(self, repository, make_subscription, user_id):
        await make_subscription(user_id=user_id, price=700, start="01-2025")
        assert await repository.sum_by_period(*self.WINDOW) == 0

    async def test_ended_before_window_excluded(self, repository, make_subscription, user_id):
        await make_subscription(user_id=user_id, price=700, start="01-2023", end="12-2023")
        assert await repository.sum_by_period(*self.WINDOW) == 0

    async def test_boundaries_inclusive(self, repository, make_subscription, user_id):
        await make_subscription(user_id=user_id, price=100, start="01-2023", end="01-2024")
        await make_subscription(user_id=user_id, price=200, start="12-2024")
        assert await repository.sum_by_period(*self.WINDOW) == 300

    async def test_whole_price_no_proration(self, repository, make_subscription, user_id):
        # Active only in the last month of the window, still counted in full
        await make_subscription(user_id=user_id, price=1000, start="12-2024", end="03-2025")
        assert await repository.sum_by_period(*self.WINDOW) == 1000

    async def test_filters_apply(self, repository, make_subscription, user_id):
        other_user = uuid.uuid4()
        await make_subscription(user_id=user_id, service_name="Netflix", price=100)
        await make_subscription(user_id=user_id, service_name="Spotify", price=20)
        await make_subscription(user_id=other_user, service_name="Netflix", price=3)

        assert await repository.sum_by_period(*self.WINDOW, user_id=user_id) == 120
        assert await repository.sum_by_period(*self.WINDOW, service_name="Netflix") == 103
        assert (
            await repository.sum_by_period(*self.WINDOW, user_id=user_id, service_name="Spotify")
            == 20
        )

    async def test_no_rows_is_zero(self, repository):
        total = await repository.sum_by_period(*self.WINDOW)
        assert total == 0
        assert isinstance(total, int)


class TestStorageErrors:
    async def test_database_error_becomes_storage_error(self, user_id):
        session = AsyncMock(spec=AsyncSession)
        session.execute.side_effect = OperationalError("SELECT 1", {}, Exception("db down"))
        repository = SqlAlchemySubscriptionRepository(session)

        with pytest.raises(StorageError) as exc_info:
            await repository.list(SubscriptionFilter(user_id=user_id))
        assert isinstance(exc_info.value.__cause__, OperationalError)

    async def test_connection_refused_becomes_storage_error(self):
        session = AsyncMock(spec=AsyncSession)
        session.execute.side_effect = ConnectionRefusedError("no server")
        repository = SqlAlchemySubscriptionRepository(session)

        with pytest.raises(StorageError):
            await repository.read_by_id(1)
