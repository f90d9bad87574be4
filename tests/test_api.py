"""Tests for the availability endpoint over an in-memory service."""

import pytest
from httpx import ASGITransport, AsyncClient

from app.core.dependencies import get_reservation_service
from app.main import app
from app.services.engine_config import EngineConfig

from conftest import (
    SLOT_DATE,
    SLOT_TIME,
    InMemoryDatabase,
    full_crew,
    make_table,
)


@pytest.fixture
def use_service(make_service):
    """Swap the reservation service dependency for an in-memory one."""

    def install(db, **kwargs):
        service = make_service(db, **kwargs)
        app.dependency_overrides[get_reservation_service] = lambda: service
        return service

    yield install
    app.dependency_overrides.pop(get_reservation_service, None)


async def get_availability(guest_number):
    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport,
        base_url='http://test',
    ) as client:
        return await client.get(
            '/reservations/availability',
            params={
                'reservation_date': SLOT_DATE.isoformat(),
                'reservation_time': SLOT_TIME.isoformat(),
                'guest_number': guest_number,
                'channel': 'ONLINE',
            },
        )


class TestAvailabilityEndpoint:
    """Test input handling of GET /reservations/availability."""

    @pytest.mark.asyncio
    async def test_party_above_limit_is_rejected_input(self, use_service):
        """Too many guests is a client error, not a server failure."""
        db = InMemoryDatabase([make_table(1, 6)], full_crew())
        use_service(db)

        response = await get_availability(101)

        assert response.status_code == 400
        body = response.json()
        assert body['error_code'] == 'INPUT_REJECTED'
        assert body['retryable'] is False
        assert '100' in body['detail']
        assert db.units_opened == 0

    @pytest.mark.asyncio
    async def test_raised_limit_is_honoured(self, use_service):
        """With the limit set to 150 a party of 120 gets an answer."""
        db = InMemoryDatabase(
            [make_table(number, 40) for number in range(1, 4)],
            full_crew(),
        )
        use_service(
            db,
            config=EngineConfig.from_mapping({}, max_guest_number=150),
        )

        response = await get_availability(120)

        assert response.status_code == 200
        assert [
            table['number'] for table in response.json()['suggested_tables']
        ] == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_zero_guests_fails_validation(self, use_service):
        """Query validation errors use the common error body."""
        use_service(InMemoryDatabase([make_table(1, 2)], full_crew()))

        response = await get_availability(0)

        assert response.status_code == 422
        assert response.json()['code'] == 422
