#!/usr/bin/env python3
"""
Seed reference data for the FitClub booking backend.

Idempotent: rows are matched on their natural key (package name, user email,
class name) and skipped when present.

Usage:
    python scripts/seed_data.py
    python scripts/seed_data.py --packages-only
    python scripts/seed_data.py --database-url postgresql://...
"""

import argparse
from decimal import Decimal
import logging
from pathlib import Path
import sys
from typing import Any, Dict, Optional, Tuple

# Ensure backend/ is importable when called directly
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402
import yaml  # noqa: E402

from fitclub.core.config import settings  # noqa: E402
from fitclub.core.enums import GroupClassStatus, UserRole  # noqa: E402
from fitclub.core.ulid_helper import generate_ulid  # noqa: E402
from fitclub.models import GroupClass, MembershipPackage, TrainerProfile, User  # noqa: E402
from fitclub.repositories.factory import RepositoryFactory  # noqa: E402

logger = logging.getLogger("seed_data")

SEED_FILE = Path(__file__).parent / "seed_data" / "fitclub.yaml"


def load_seed_data(path: Path = SEED_FILE) -> Dict[str, Any]:
    with open(path, "r") as f:
        return yaml.safe_load(f) or {}


def _get_or_create_user(
    db: Session, email: str, full_name: str, role: UserRole
) -> Tuple[User, bool]:
    user = RepositoryFactory.create_user_repository(db).get_by_email(email)
    if user is not None:
        return user, False
    user = User(id=generate_ulid(), email=email, full_name=full_name, role=role.value)
    db.add(user)
    db.flush()
    logger.info("Created %s %s", role.value, email)
    return user, True


def seed_packages(db: Session, data: Dict[str, Any]) -> int:
    packages = RepositoryFactory.create_membership_package_repository(db)
    created = 0
    for entry in data.get("packages", []):
        if packages.find_one_by(name=entry["name"]) is not None:
            continue
        db.add(
            MembershipPackage(
                id=generate_ulid(),
                name=entry["name"],
                price=Decimal(str(entry["price"])),
                description=entry.get("description"),
            )
        )
        created += 1
    db.flush()
    return created


def seed_people_and_classes(db: Session, data: Dict[str, Any]) -> Dict[str, int]:
    stats = {"trainers": 0, "classes": 0, "members": 0, "admins": 0}

    for entry in data.get("trainers", []):
        user, _ = _get_or_create_user(db, entry["email"], entry["full_name"], UserRole.TRAINER)
        if user.trainer_profile is None:
            user.trainer_profile = TrainerProfile(
                id=generate_ulid(),
                hourly_rate=Decimal(str(entry["hourly_rate"])),
                trainer_type=entry.get("trainer_type", "personal"),
                bio=entry.get("bio"),
            )
            stats["trainers"] += 1
    db.flush()

    classes = RepositoryFactory.create_group_class_repository(db)
    users = RepositoryFactory.create_user_repository(db)
    for entry in data.get("classes", []):
        if classes.find_one_by(name=entry["name"]) is not None:
            continue
        trainer = None
        if entry.get("trainer_email"):
            trainer = users.get_by_email(entry["trainer_email"])
        db.add(
            GroupClass(
                id=generate_ulid(),
                name=entry["name"],
                description=entry.get("description"),
                trainer_user_id=trainer.id if trainer else None,
                capacity=int(entry["capacity"]),
                schedule=list(entry.get("schedule", [])),
                status=GroupClassStatus.APPROVED.value,
            )
        )
        stats["classes"] += 1

    for key, role in (("members", UserRole.MEMBER), ("admins", UserRole.ADMIN)):
        for entry in data.get(key, []):
            _, created = _get_or_create_user(db, entry["email"], entry["full_name"], role)
            if created:
                stats[key] += 1

    db.flush()
    return stats


def seed(database_url: Optional[str] = None, packages_only: bool = False) -> Dict[str, int]:
    """Seed the database and return per-kind creation counts."""
    engine = create_engine(database_url or settings.get_database_url())
    session_factory = sessionmaker(bind=engine, expire_on_commit=False)
    data = load_seed_data()

    with session_factory() as db:
        try:
            stats = {"packages": seed_packages(db, data)}
            if not packages_only:
                stats.update(seed_people_and_classes(db, data))
            db.commit()
        except Exception:
            db.rollback()
            raise
    engine.dispose()
    return stats


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed FitClub reference data")
    parser.add_argument("--database-url", help="Override the configured database URL")
    parser.add_argument(
        "--packages-only",
        action="store_true",
        help="Only seed the membership package catalog",
    )
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    stats = seed(args.database_url, packages_only=args.packages_only)
    for kind, count in stats.items():
        logger.info("%s created: %d", kind, count)


if __name__ == "__main__":
    main()
