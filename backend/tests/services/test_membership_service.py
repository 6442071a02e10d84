# backend/tests/services/test_membership_service.py
"""Membership lifecycle: subscribe, change package, cancel, reactivate."""

from datetime import timedelta
from decimal import Decimal

import pytest

from fitclub.core.enums import MembershipStatus, PaymentStatus
from fitclub.core.exceptions import (
    ForbiddenException,
    MembershipStateException,
    NotFoundException,
)
from fitclub.core.timezone_utils import add_months
from fitclub.services.membership_service import MembershipService
from tests.utils.clock import NOW


@pytest.fixture
def service(db):
    return MembershipService(db)


class TestSubscribe:
    def test_creates_membership_and_payment(self, service, member, packages):
        basic = packages["Basic"]

        membership, payment = service.subscribe(member, basic.id, now=NOW)

        assert membership.status == MembershipStatus.ACTIVE.value
        assert membership.auto_renew is True
        assert membership.start_date == NOW
        assert membership.end_date == add_months(NOW, 1)
        assert payment.membership_id == membership.id
        assert payment.amount == Decimal("29.00")
        assert payment.status == PaymentStatus.COMPLETED.value
        assert payment.payment_method == "credit card"
        assert payment.description == "Subscription: Basic"

    def test_second_subscribe_is_rejected(self, service, member, packages):
        service.subscribe(member, packages["Basic"].id, now=NOW)

        with pytest.raises(MembershipStateException) as exc_info:
            service.subscribe(member, packages["VIP"].id, now=NOW)
        assert exc_info.value.code == "MEMBERSHIP_EXISTS"

    def test_concurrent_subscribe_hits_unique_index(self, service, member, packages, monkeypatch):
        service.subscribe(member, packages["Basic"].id, now=NOW)
        monkeypatch.setattr(service.repository, "get_current", lambda *args, **kwargs: None)

        with pytest.raises(MembershipStateException) as exc_info:
            service.subscribe(member, packages["Premium"].id, now=NOW)
        assert exc_info.value.code == "MEMBERSHIP_EXISTS"

    def test_cancelled_membership_still_blocks_subscribe(self, service, member, packages):
        service.subscribe(member, packages["Basic"].id, now=NOW)
        service.cancel_membership(member, now=NOW)

        with pytest.raises(MembershipStateException):
            service.subscribe(member, packages["Basic"].id, now=NOW)

    def test_subscribe_after_expiry(self, service, member, packages):
        first, _ = service.subscribe(member, packages["Basic"].id, now=NOW)
        later = first.end_date + timedelta(days=1)

        second, payment = service.subscribe(member, packages["Premium"].id, now=later)

        assert second.id != first.id
        assert first.status == MembershipStatus.EXPIRED.value
        assert payment.amount == Decimal("49.00")
        history = service.get_membership_history(member)
        assert [m.id for m in history] == [second.id, first.id]
        assert len(service.get_payments(member)) == 2

    def test_unknown_package(self, service, member):
        with pytest.raises(NotFoundException):
            service.subscribe(member, "missing", now=NOW)

    def test_only_members_subscribe(self, service, trainer, packages):
        with pytest.raises(ForbiddenException):
            service.subscribe(trainer, packages["Basic"].id, now=NOW)


class TestTransitions:
    @pytest.fixture
    def membership(self, service, member, packages):
        membership, _ = service.subscribe(member, packages["Basic"].id, now=NOW)
        return membership

    def test_cancel_keeps_membership_current(self, service, member, membership):
        ten_days_left = membership.end_date - timedelta(days=10)

        cancelled = service.cancel_membership(member, now=ten_days_left)

        assert cancelled.status == MembershipStatus.CANCELLED.value
        assert cancelled.auto_renew is False
        assert cancelled.cancelled_at == ten_days_left
        current = service.get_current_membership(member, now=ten_days_left)
        assert current is not None
        assert current.id == membership.id

    def test_reactivate(self, service, member, membership):
        service.cancel_membership(member, now=NOW)

        reactivated = service.reactivate_membership(member, now=NOW)

        assert reactivated.status == MembershipStatus.ACTIVE.value
        assert reactivated.auto_renew is True
        assert reactivated.cancelled_at is None

    def test_cancel_twice(self, service, member, membership):
        service.cancel_membership(member, now=NOW)

        with pytest.raises(MembershipStateException) as exc_info:
            service.cancel_membership(member, now=NOW)
        assert exc_info.value.code == "NO_ACTIVE_MEMBERSHIP"

    def test_reactivate_active_membership(self, service, member, membership):
        with pytest.raises(MembershipStateException) as exc_info:
            service.reactivate_membership(member, now=NOW)
        assert exc_info.value.code == "NO_CANCELLED_MEMBERSHIP"

    def test_cannot_reactivate_after_period_ends(self, service, member, membership):
        service.cancel_membership(member, now=NOW)

        with pytest.raises(MembershipStateException):
            service.reactivate_membership(member, now=membership.end_date + timedelta(seconds=1))

    def test_change_package_schedules_next_period(self, service, member, membership, packages):
        end_before = membership.end_date

        changed = service.change_package(member, packages["VIP"].id, now=NOW)

        assert changed.next_package_id == packages["VIP"].id
        assert changed.package_id == packages["Basic"].id
        assert changed.end_date == end_before

    def test_cancel_clears_scheduled_package(self, service, member, membership, packages):
        service.change_package(member, packages["VIP"].id, now=NOW)

        cancelled = service.cancel_membership(member, now=NOW)

        assert cancelled.next_package_id is None

    def test_change_package_requires_membership(self, service, member, packages):
        with pytest.raises(MembershipStateException) as exc_info:
            service.change_package(member, packages["VIP"].id, now=NOW)
        assert exc_info.value.code == "NO_CURRENT_MEMBERSHIP"

    def test_membership_lapses(self, service, member, membership):
        after_end = membership.end_date + timedelta(minutes=1)

        assert service.get_current_membership(member, now=after_end) is None


def test_packages_are_listed_by_price(service, packages):
    assert [package.name for package in service.list_packages()] == ["Basic", "Premium", "VIP"]


def test_cancel_without_membership(service, member):
    with pytest.raises(MembershipStateException) as exc_info:
        service.cancel_membership(member, now=NOW)
    assert exc_info.value.code == "NO_ACTIVE_MEMBERSHIP"
