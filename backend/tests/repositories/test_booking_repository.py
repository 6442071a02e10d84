"""Overlap queries in BookingRepository use half-open intervals."""

from datetime import timedelta

import pytest
from sqlalchemy.exc import IntegrityError

from fitclub.core.enums import BookingStatus
from fitclub.models.booking import GroupClassBooking, PersonalTrainingBooking
from fitclub.repositories.booking_repository import BookingRepository
from tests.utils.clock import CLASS_DAY, at


@pytest.fixture
def repository(db):
    return BookingRepository(db)


@pytest.fixture
def session_10_to_11(repository, member, trainer):
    return repository.insert(
        PersonalTrainingBooking(
            user_id=member.id,
            trainer_id=trainer.id,
            start_time=at(CLASS_DAY, 10),
            end_time=at(CLASS_DAY, 11),
        )
    )


@pytest.mark.parametrize(
    "start,end,overlaps",
    [
        ((9, 0), (10, 0), False),
        ((11, 0), (12, 0), False),
        ((9, 30), (10, 30), True),
        ((10, 15), (10, 45), True),
        ((9, 0), (12, 0), True),
    ],
)
def test_trainer_overlap(repository, trainer, session_10_to_11, start, end, overlaps):
    found = repository.find_trainer_overlap(trainer.id, at(CLASS_DAY, *start), at(CLASS_DAY, *end))

    assert (found is not None) is overlaps


def test_member_overlap_ignores_cancelled(repository, member, session_10_to_11):
    session_10_to_11.cancel()
    repository.flush()

    assert repository.find_member_overlap(member.id, at(CLASS_DAY, 10), at(CLASS_DAY, 11)) is None


def test_trainer_bookings_in_range(repository, trainer, session_10_to_11):
    same_day = repository.get_trainer_bookings_in_range(
        trainer.id, at(CLASS_DAY, 0), at(CLASS_DAY + timedelta(days=1), 0)
    )
    next_day = repository.get_trainer_bookings_in_range(
        trainer.id, at(CLASS_DAY + timedelta(days=1), 0), at(CLASS_DAY + timedelta(days=2), 0)
    )

    assert [booking.id for booking in same_day] == [session_10_to_11.id]
    assert next_day == []


def test_occupancy_count_and_duplicate_index(repository, make_class, member, other_member):
    group_class = make_class(capacity=5)
    for user in (member, other_member):
        repository.insert(
            GroupClassBooking(user_id=user.id, group_class_id=group_class.id, class_date=CLASS_DAY)
        )

    assert repository.count_confirmed_for_occurrence(group_class.id, CLASS_DAY) == 2
    assert repository.has_member_class_booking(member.id, group_class.id, CLASS_DAY)

    with pytest.raises(IntegrityError):
        repository.insert(
            GroupClassBooking(
                user_id=member.id, group_class_id=group_class.id, class_date=CLASS_DAY
            )
        )
    # The failed insert only rolled back its savepoint
    assert repository.count_confirmed_for_occurrence(group_class.id, CLASS_DAY) == 2


def test_cancelled_seat_does_not_block_a_new_one(repository, make_class, member):
    group_class = make_class()
    first = repository.insert(
        GroupClassBooking(user_id=member.id, group_class_id=group_class.id, class_date=CLASS_DAY)
    )
    first.status = BookingStatus.CANCELLED.value
    repository.flush()

    second = repository.insert(
        GroupClassBooking(user_id=member.id, group_class_id=group_class.id, class_date=CLASS_DAY)
    )

    assert second.id != first.id
    assert repository.count_confirmed_for_occurrence(group_class.id, CLASS_DAY) == 1
