"""Tests for staff allocation invariants.

The pick among eligible staff is random, so only eligibility is asserted.
"""

import random
from collections import Counter

import pytest

from app.core.exceptions import StaffAllocationError
from app.services.staff_allocator import StaffAllocator
from app.utils.enums import StaffRole

from conftest import SLOT_DATE, SLOT_TIME, full_crew, make_staff, make_table


def allocate(allocator, tables, staff, slot_load=None):
    return allocator.allocate(
        tables,
        staff,
        slot_load or {},
        SLOT_DATE,
        SLOT_TIME,
    )


class TestStaffAllocator:
    """Test StaffAllocator eligibility rules."""

    @pytest.fixture
    def allocator(self):
        """Allocator with a seeded generator."""
        return StaffAllocator(max_tables_per_staff=3, rng=random.Random(7))

    def test_every_table_gets_three_roles(self, allocator):
        """Each draft carries a waiter, a manager and a cleaner."""
        tables = [make_table(number, 4) for number in range(1, 5)]
        staff = full_crew(per_role=2)
        roles = {member.id: member.role for member in staff}

        drafts = allocate(allocator, tables, staff)

        assert [draft.table_id for draft in drafts] == [t.id for t in tables]
        for draft in drafts:
            assert draft.slot_date == SLOT_DATE
            assert draft.slot_time == SLOT_TIME
            for role, staff_id in draft.staff_by_role().items():
                assert roles[staff_id] == role

    def test_load_never_exceeds_limit(self, allocator):
        """No one serves more than the limit, counting earlier slots."""
        tables = [make_table(number, 4) for number in range(1, 5)]
        staff = full_crew(per_role=2)
        existing = {staff[0].id: 2, staff[2].id: 1}

        drafts = allocate(allocator, tables, staff, existing)

        load = Counter(existing)
        for draft in drafts:
            load.update(draft.staff_by_role().values())
        assert max(load.values()) <= 3

    def test_fully_loaded_staff_skipped(self, allocator):
        """A waiter already at the limit is never picked."""
        busy, free = make_staff(StaffRole.WAITER, 2)
        staff = [
            busy,
            free,
            *make_staff(StaffRole.MANAGER),
            *make_staff(StaffRole.CLEANER),
        ]

        drafts = allocate(
            allocator,
            [make_table(1, 4), make_table(2, 4)],
            staff,
            {busy.id: 3},
        )

        assert {draft.waiter_id for draft in drafts} == {free.id}

    def test_one_person_serves_several_tables(self, allocator):
        """A single crew can cover up to the limit of tables."""
        tables = [make_table(number, 2) for number in range(1, 4)]
        staff = full_crew(per_role=1)

        drafts = allocate(allocator, tables, staff)

        assert len({draft.waiter_id for draft in drafts}) == 1
        assert len(drafts) == 3

    def test_missing_role_fails(self, allocator):
        """No cleaner on shift means no allocation."""
        staff = [
            *make_staff(StaffRole.WAITER),
            *make_staff(StaffRole.MANAGER),
        ]
        table = make_table(1, 4)

        with pytest.raises(StaffAllocationError) as error:
            allocate(allocator, [table], staff)

        assert error.value.role == StaffRole.CLEANER
        assert error.value.table_id == table.id

    def test_limit_reached_on_last_table_fails(self):
        """Running out on the last table raises instead of a partial result."""
        allocator = StaffAllocator(max_tables_per_staff=1)
        tables = [make_table(1, 4), make_table(2, 4)]

        with pytest.raises(StaffAllocationError) as error:
            allocate(allocator, tables, full_crew(per_role=1))

        assert error.value.role == StaffRole.WAITER
        assert error.value.table_id == tables[1].id
