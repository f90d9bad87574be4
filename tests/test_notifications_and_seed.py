"""Tests for confirmation emails and catalog seeding."""

import json
from datetime import datetime, timezone
from uuid import uuid4

import pytest

from app.core import init_catalog
from app.schemas.reservation import AssignedTableInfo, ReservationResult
from app.services import notification
from app.services.notification import (
    NotificationService,
    build_confirmation_text,
)
from app.utils.enums import ReservationStatus, TableChannel


@pytest.fixture
def result():
    """A committed two-table reservation."""
    return ReservationResult(
        reservation_id=uuid4(),
        status=ReservationStatus.CONFIRMED,
        channel=TableChannel.ONLINE,
        guest_number=7,
        reserved_from=datetime(2026, 5, 1, 19, 0, tzinfo=timezone.utc),
        reserved_to=datetime(2026, 5, 1, 20, 0, tzinfo=timezone.utc),
        assigned_tables=[
            AssignedTableInfo(
                id=uuid4(),
                number=3,
                capacity=4,
                channel=TableChannel.ONLINE,
            ),
            AssignedTableInfo(
                id=uuid4(),
                number=5,
                capacity=4,
                channel=TableChannel.ONLINE,
            ),
        ],
        total_assigned_capacity=8,
        assigned_staff=[],
        message='ok',
    )


class TestNotificationService:
    """Test confirmation email queuing."""

    def test_confirmation_text(self, result):
        """The email lists the slot and the tables."""
        text = build_confirmation_text(result)

        assert str(result.reservation_id) in text
        assert '2026-05-01' in text
        assert '19:00-20:00' in text
        assert '№3 (4 мест), №5 (4 мест)' in text

    def test_queued_when_email_given(self, result, monkeypatch):
        """A guest with an email gets a queued confirmation."""
        sent = []
        monkeypatch.setattr(
            notification,
            'send_notification_task',
            lambda **kwargs: sent.append(kwargs),
        )

        assert NotificationService.send_reservation_confirmation(
            result,
            'guest@example.com',
        )
        assert sent[0]['emails'] == ['guest@example.com']

    def test_skipped_without_email(self, result, monkeypatch):
        """Guests without an email are not notified."""
        sent = []
        monkeypatch.setattr(
            notification,
            'send_notification_task',
            lambda **kwargs: sent.append(kwargs),
        )

        assert not NotificationService.send_reservation_confirmation(
            result,
            None,
        )
        assert sent == []


class FakeCache:
    def __init__(self):
        self.cleared = 0

    async def clear_catalog_cache(self):
        self.cleared += 1


class TestCatalogSeed:
    """Test startup seeding of tables and staff."""

    @pytest.fixture
    def seed_file(self, tmp_path):
        path = tmp_path / 'catalog.json'
        path.write_text(
            json.dumps(
                {
                    'tables': [
                        {'number': 1, 'capacity': 2, 'channel': 'ONLINE'},
                        {'number': 2, 'capacity': 6, 'channel': 'OFFLINE'},
                    ],
                    'staff': [
                        {
                            'first_name': 'Ivan',
                            'last_name': 'Petrov',
                            'role': 'WAITER',
                        },
                    ],
                },
            ),
            encoding='utf-8',
        )
        return path

    @pytest.fixture
    def repositories(self, monkeypatch):
        calls = {}

        async def add_tables(session, tables):
            calls['tables'] = tables
            return len(tables)

        async def add_staff(session, staff):
            calls['staff'] = staff
            return len(staff)

        monkeypatch.setattr(
            init_catalog.table_repository,
            'add_missing',
            add_tables,
        )
        monkeypatch.setattr(
            init_catalog.staff_repository,
            'add_missing',
            add_staff,
        )
        return calls

    def test_load_seed(self, seed_file):
        """The seed file is validated into catalog schemas."""
        seed = init_catalog.load_catalog_seed(seed_file)

        assert [table.number for table in seed.tables] == [1, 2]
        assert seed.tables[1].channel == TableChannel.OFFLINE
        assert seed.staff[0].last_name == 'Petrov'

    @pytest.mark.asyncio
    async def test_seed_adds_missing_and_clears_cache(
        self,
        seed_file,
        repositories,
    ):
        """Seeding inserts rows and invalidates the catalog cache."""
        cache = FakeCache()

        added = await init_catalog.seed_catalog_if_configured(
            None,
            seed_file,
            cache,
        )

        assert added == (2, 1)
        assert len(repositories['tables']) == 2
        assert cache.cleared == 1

    @pytest.mark.asyncio
    async def test_seed_skipped_without_path(self, tmp_path, repositories):
        """No path or a missing file leaves the catalog alone."""
        assert await init_catalog.seed_catalog_if_configured(
            None,
            None,
        ) == (0, 0)
        assert await init_catalog.seed_catalog_if_configured(
            None,
            tmp_path / 'missing.json',
        ) == (0, 0)
        assert repositories == {}
