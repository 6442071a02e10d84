# backend/tests/services/test_availability_service.py
"""
Tests for the personal training slot grid.

Run with: pytest backend/tests/services/test_availability_service.py -v
"""

from datetime import date, timedelta

import pytest

from fitclub.core.enums import BookingStatus, TrainerType
from fitclub.core.exceptions import NotFoundException, ValidationException
from fitclub.models.booking import PersonalTrainingBooking
from fitclub.services.availability_service import AvailabilityService, build_slot_grid
from tests.utils.clock import at

DAY = date(2030, 1, 8)


def _book(db, member, trainer, start, end, status=BookingStatus.CONFIRMED):
    booking = PersonalTrainingBooking(
        user_id=member.id,
        trainer_id=trainer.id,
        start_time=start,
        end_time=end,
        status=status.value,
    )
    db.add(booking)
    db.flush()
    return booking


class TestBuildSlotGrid:
    def test_empty_day_is_fully_available(self):
        slots = build_slot_grid(DAY, [], start_hour=8, end_hour=20, slot_minutes=60)

        assert len(slots) == 12
        assert all(slot.available for slot in slots)
        assert slots[0].display_time == "08:00 - 09:00"
        assert slots[-1].display_time == "19:00 - 20:00"

    def test_slots_are_contiguous(self):
        slots = build_slot_grid(DAY, [], start_hour=8, end_hour=12, slot_minutes=30)

        assert len(slots) == 8
        for current, following in zip(slots, slots[1:]):
            assert current.end_time == following.start_time


class TestAvailabilityService:
    @pytest.fixture
    def service(self, db):
        return AvailabilityService(db)

    def test_booked_hour_is_unavailable(self, db, service, member, trainer):
        _book(db, member, trainer, at(DAY, 10), at(DAY, 11))

        grid = service.get_trainer_availability(trainer.id, DAY.isoformat())

        assert grid["trainer_id"] == trainer.id
        assert grid["date"] == DAY
        slots = grid["slots"]
        assert len(slots) == 12
        unavailable = [slot["display_time"] for slot in slots if not slot["available"]]
        assert unavailable == ["10:00 - 11:00"]

    def test_partial_overlap_blocks_both_slots(self, db, service, member, trainer):
        _book(db, member, trainer, at(DAY, 10, 30), at(DAY, 11, 30))

        slots = service.get_trainer_availability(trainer.id, DAY.isoformat())["slots"]

        unavailable = [slot["display_time"] for slot in slots if not slot["available"]]
        assert unavailable == ["10:00 - 11:00", "11:00 - 12:00"]

    def test_back_to_back_booking_does_not_block_neighbours(self, db, service, member, trainer):
        _book(db, member, trainer, at(DAY, 9), at(DAY, 10))

        slots = service.get_trainer_availability(trainer.id, DAY.isoformat())["slots"]

        by_label = {slot["display_time"]: slot["available"] for slot in slots}
        assert by_label["08:00 - 09:00"] is True
        assert by_label["09:00 - 10:00"] is False
        assert by_label["10:00 - 11:00"] is True

    def test_cancelled_bookings_do_not_block(self, db, service, member, trainer):
        _book(db, member, trainer, at(DAY, 10), at(DAY, 11), status=BookingStatus.CANCELLED)

        slots = service.get_trainer_availability(trainer.id, DAY.isoformat())["slots"]

        assert all(slot["available"] for slot in slots)

    def test_other_days_do_not_block(self, db, service, member, trainer):
        next_day = DAY + timedelta(days=1)
        _book(db, member, trainer, at(next_day, 10), at(next_day, 11))

        slots = service.get_trainer_availability(trainer.id, DAY.isoformat())["slots"]

        assert all(slot["available"] for slot in slots)

    def test_available_plus_occupied_equals_total(self, db, service, member, other_member, trainer):
        _book(db, member, trainer, at(DAY, 8), at(DAY, 9))
        _book(db, other_member, trainer, at(DAY, 13, 15), at(DAY, 14, 45))

        slots = service.get_trainer_availability(trainer.id, DAY.isoformat())["slots"]

        available = [slot for slot in slots if slot["available"]]
        occupied = [slot for slot in slots if not slot["available"]]
        assert len(available) + len(occupied) == len(slots)
        assert len(occupied) == 3

    def test_invalid_date_is_rejected(self, service, trainer):
        with pytest.raises(ValidationException) as exc_info:
            service.get_trainer_availability(trainer.id, "2030-02-30")
        assert exc_info.value.code == "INVALID_DATE"

    def test_unknown_trainer(self, service):
        with pytest.raises(NotFoundException):
            service.get_trainer_availability("01HZZZZZZZZZZZZZZZZZZZZZZZ", DAY.isoformat())

    def test_group_only_trainer_has_no_grid(self, service, make_trainer):
        group_trainer = make_trainer(TrainerType.GROUP)

        with pytest.raises(NotFoundException):
            service.get_trainer_availability(group_trainer.id, DAY.isoformat())

    def test_member_is_not_a_trainer(self, service, member):
        with pytest.raises(NotFoundException):
            service.get_trainer_availability(member.id, DAY.isoformat())

    def test_list_personal_trainers(self, service, make_trainer):
        make_trainer(TrainerType.PERSONAL, full_name="Bea Personal")
        make_trainer(TrainerType.BOTH, full_name="Ari Both")
        make_trainer(TrainerType.GROUP, full_name="Gus Group")

        names = [trainer["full_name"] for trainer in service.list_personal_trainers()]

        assert names == ["Ari Both", "Bea Personal"]
