# backend/tests/services/test_member_service.py
"""Admin member directory and the caller's profile."""

import pytest

from fitclub.core.exceptions import ForbiddenException, NotFoundException
from fitclub.core.timezone_utils import utc_now
from fitclub.services.booking_service import BookingService
from fitclub.services.member_service import MemberService
from fitclub.services.membership_service import MembershipService
from tests.utils.clock import future_day


@pytest.fixture
def service(db):
    return MemberService(db)


@pytest.fixture
def subscribed_member(db, member, packages):
    MembershipService(db).subscribe(member, packages["Premium"].id, now=utc_now())
    return member


def _book_class(db, make_class, user):
    day = future_day()
    group_class = make_class(day=day, capacity=5)
    return BookingService(db).create_group_class_booking(user, group_class.id, day.isoformat())


class TestDirectory:
    def test_lists_members_and_trainers_with_counts(
        self, db, service, make_class, subscribed_member, other_member, trainer, admin
    ):
        _book_class(db, make_class, subscribed_member)

        directory = service.list_members(admin)

        entries = {entry["user"].id: entry for entry in directory["members"]}
        assert set(entries) == {subscribed_member.id, other_member.id, trainer.id}
        mine = entries[subscribed_member.id]
        assert mine["current_membership"].package.name == "Premium"
        assert mine["bookings_count"] == 1
        assert mine["upcoming_bookings"] == 1
        assert entries[other_member.id]["current_membership"] is None
        assert entries[trainer.id]["bookings_count"] == 0
        assert directory["statistics"] == {
            "total_members": 3,
            "active_members": 1,
            "inactive_members": 2,
            "average_membership_days": 0,
            "new_members_last_30_days": 3,
            "new_members_percentage": 100,
        }

    def test_cancelled_membership_is_not_active(self, db, service, subscribed_member, admin):
        MembershipService(db).cancel_membership(subscribed_member)

        statistics = service.list_members(admin)["statistics"]

        assert statistics["active_members"] == 0
        assert statistics["inactive_members"] == 1

    def test_member_cannot_list(self, service, member):
        with pytest.raises(ForbiddenException):
            service.list_members(member)


class TestMemberDetail:
    def test_history_bookings_and_statistics(
        self, db, service, make_class, subscribed_member, admin
    ):
        booking = _book_class(db, make_class, subscribed_member)
        BookingService(db).cancel_booking(booking.id, subscribed_member)

        detail = service.get_member_detail(admin, subscribed_member.id)

        assert detail["user"].id == subscribed_member.id
        assert detail["current_membership"] is not None
        assert [m.id for m in detail["membership_history"]] == [detail["current_membership"].id]
        assert [b.id for b in detail["bookings"]] == [booking.id]
        assert detail["statistics"] == {"total_bookings": 1, "upcoming_bookings": 1}

    def test_admins_and_unknown_ids_read_as_missing(self, service, admin):
        with pytest.raises(NotFoundException):
            service.get_member_detail(admin, admin.id)
        with pytest.raises(NotFoundException):
            service.get_member_detail(admin, "missing")

    def test_trainer_cannot_view(self, service, member, trainer):
        with pytest.raises(ForbiddenException):
            service.get_member_detail(trainer, member.id)


class TestProfile:
    def test_member_sees_current_membership(self, service, subscribed_member):
        profile = service.get_profile(subscribed_member)

        assert profile["user"] is subscribed_member
        assert profile["membership"].package.name == "Premium"

    def test_member_without_membership(self, service, member):
        assert service.get_profile(member)["membership"] is None

    def test_trainer_has_no_membership(self, service, trainer):
        assert service.get_profile(trainer) == {"user": trainer, "membership": None}
