"""Seeding reference data is idempotent."""

from fitclub.models import GroupClass, MembershipPackage, User
from fitclub.services.availability_service import AvailabilityService
from scripts.seed_data import load_seed_data, seed_packages, seed_people_and_classes


def test_seed_twice(db):
    data = load_seed_data()

    assert seed_packages(db, data) == 3
    first = seed_people_and_classes(db, data)
    assert seed_packages(db, data) == 0
    second = seed_people_and_classes(db, data)

    assert first["trainers"] == 3
    assert first["classes"] == 3
    assert set(second.values()) == {0}
    assert db.query(MembershipPackage).count() == 3
    assert db.query(GroupClass).count() == 3
    assert db.query(User).count() == 5


def test_seeded_trainers_offer_personal_training(db):
    data = load_seed_data()
    seed_people_and_classes(db, data)

    names = [t["full_name"] for t in AvailabilityService(db).list_personal_trainers()]

    assert names == ["Alex Rivera", "Sam Okafor"]
