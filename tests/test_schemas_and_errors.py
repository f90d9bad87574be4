"""Tests for request schemas and the reservation error contract."""

import json
from datetime import time

import pytest
from pydantic import ValidationError

from app.core.exception_handler import reservation_exception_handler
from app.core.exceptions import (
    InputRejectedError,
    NoAvailabilityError,
    ReservationConflictError,
    ReservationStorageError,
    StaffAllocationError,
)
from app.schemas.reservation import ReservationCreate
from app.utils.enums import StaffRole, TableChannel

from conftest import make_request


class TestReservationCreate:
    """Test request validation."""

    def test_defaults_and_time_truncation(self):
        """Online is the default channel and seconds are dropped."""
        request = make_request(reservation_time=time(19, 30, 45))

        assert ReservationCreate.model_fields['channel'].default == (
            TableChannel.ONLINE
        )
        assert request.reservation_time == time(19, 30)

    def test_requester_fields(self):
        """Only guest details are passed through to storage."""
        request = make_request(note='  ', phone='+79990001122')

        assert request.requester_fields() == {
            'first_name': 'Anna',
            'last_name': 'Smirnova',
            'email': 'anna@example.com',
            'phone': '+79990001122',
            'note': None,
        }

    def test_large_party_left_to_configured_limit(self):
        """The schema has no fixed ceiling on the party size."""
        assert make_request(guest_number=120).guest_number == 120

    @pytest.mark.parametrize(
        'overrides',
        [
            {'guest_number': 0},
            {'phone': '89990001122'},
            {'email': 'not-an-email'},
            {'first_name': '   '},
            {'channel': 'PHONE'},
        ],
    )
    def test_invalid_requests(self, overrides):
        """Malformed fields are rejected by the schema."""
        with pytest.raises(ValidationError):
            make_request(**overrides)


class TestReservationErrors:
    """Test error kinds and their HTTP mapping."""

    @pytest.mark.parametrize(
        'error, status_code, retryable',
        [
            (InputRejectedError('x'), 400, False),
            (NoAvailabilityError('x'), 409, True),
            (StaffAllocationError(StaffRole.WAITER), 503, True),
            (ReservationConflictError('x'), 409, True),
            (ReservationStorageError('x'), 500, True),
        ],
    )
    def test_status_and_retryable(self, error, status_code, retryable):
        """Every outcome has its own status and retry hint."""
        assert error.status_code == status_code
        assert error.retryable is retryable
        assert error.step is None

    def test_staff_error_names_role(self):
        """The allocation error tells which role is missing."""
        error = StaffAllocationError(StaffRole.CLEANER)

        assert 'CLEANER' in error.detail
        assert error.role == StaffRole.CLEANER

    @pytest.mark.asyncio
    async def test_handler_renders_error_body(self):
        """The handler returns code, detail and the retry hint."""
        response = await reservation_exception_handler(
            None,
            NoAvailabilityError('Нет столов'),
        )

        assert response.status_code == 409
        assert json.loads(response.body) == {
            'code': 409,
            'error_code': 'NO_AVAILABILITY',
            'detail': 'Нет столов',
            'retryable': True,
        }
