"""Schedule resolution and constraints on GroupClass and Booking rows."""

from datetime import date, timedelta

import pytest
from sqlalchemy.exc import IntegrityError

from fitclub.core.enums import BookingStatus
from fitclub.models.booking import Booking, GroupClassBooking, PersonalTrainingBooking
from fitclub.models.group_class import GroupClass, schedule_weekday
from tests.utils.clock import CLASS_DAY, at


def test_schedule_weekday_starts_on_sunday():
    assert schedule_weekday(date(2030, 1, 6)) == 0  # Sunday
    assert schedule_weekday(date(2030, 1, 7)) == 1  # Monday
    assert schedule_weekday(date(2030, 1, 12)) == 6  # Saturday


class TestOccurrence:
    def test_runs_on_scheduled_weekday_only(self, make_class):
        group_class = make_class(day=CLASS_DAY)

        assert group_class.runs_on(CLASS_DAY)
        assert group_class.runs_on(CLASS_DAY + timedelta(days=7))
        assert not group_class.runs_on(CLASS_DAY + timedelta(days=1))

    def test_occurrence_bounds(self, make_class):
        group_class = make_class(start="07:30", end="08:15")

        assert group_class.occurrence_start(CLASS_DAY) == at(CLASS_DAY, 7, 30)
        assert group_class.occurrence_end(CLASS_DAY) == at(CLASS_DAY, 8, 15)

    def test_unscheduled_day_spans_whole_day(self, make_class):
        group_class = make_class()
        thursday = CLASS_DAY + timedelta(days=1)

        assert group_class.occurrence_start(thursday) == at(thursday, 0)
        assert group_class.occurrence_end(thursday) == at(thursday + timedelta(days=1), 0)

    def test_first_matching_slot_wins(self):
        weekday = schedule_weekday(CLASS_DAY)
        group_class = GroupClass(
            name="Double",
            capacity=10,
            schedule=[
                {"day_of_week": weekday, "start_time": "06:00", "end_time": "07:00"},
                {"day_of_week": weekday, "start_time": "19:00", "end_time": "20:00"},
            ],
        )

        assert group_class.occurrence_start(CLASS_DAY) == at(CLASS_DAY, 6)


class TestConstraints:
    def test_capacity_must_be_positive(self, db):
        db.add(GroupClass(name="Empty", capacity=0, schedule=[]))

        with pytest.raises(IntegrityError):
            db.flush()
        db.rollback()

    def test_booking_variant_fields_must_match_type(self, db, member, make_class):
        group_class = make_class()
        booking = GroupClassBooking(
            user_id=member.id,
            group_class_id=group_class.id,
            class_date=CLASS_DAY,
            start_time=at(CLASS_DAY, 10),
            end_time=at(CLASS_DAY, 11),
        )
        db.add(booking)

        with pytest.raises(IntegrityError):
            db.flush()
        db.rollback()

    def test_session_end_after_start(self, db, member, trainer):
        db.add(
            PersonalTrainingBooking(
                user_id=member.id,
                trainer_id=trainer.id,
                start_time=at(CLASS_DAY, 11),
                end_time=at(CLASS_DAY, 10),
            )
        )

        with pytest.raises(IntegrityError):
            db.flush()
        db.rollback()

    def test_polymorphic_load(self, db, member, trainer):
        session = PersonalTrainingBooking(
            user_id=member.id,
            trainer_id=trainer.id,
            start_time=at(CLASS_DAY, 10),
            end_time=at(CLASS_DAY, 11),
        )
        db.add(session)
        db.flush()
        db.expunge_all()

        loaded = db.query(Booking).filter(Booking.id == session.id).one()

        assert isinstance(loaded, PersonalTrainingBooking)
        assert loaded.status == BookingStatus.CONFIRMED.value
        assert loaded.notes == ""
        assert loaded.start_time == at(CLASS_DAY, 10)
        assert loaded.effective_end() == at(CLASS_DAY, 11)
