# backend/tests/conftest.py
"""
Shared fixtures.

Every test runs inside a connection-level transaction that is rolled back at
the end. Sessions join it with ``create_savepoint`` so service-level
``commit()``/``rollback()`` calls only touch a SAVEPOINT.
"""

from datetime import date
from decimal import Decimal
import os
from typing import Any, Callable, Dict, Generator, List, Optional

os.environ.setdefault("IS_TESTING", "true")

from fastapi.testclient import TestClient  # noqa: E402
import pytest  # noqa: E402
from sqlalchemy import create_engine, event  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from fitclub.api.dependencies.database import get_db  # noqa: E402
from fitclub.auth import create_access_token  # noqa: E402
from fitclub.core.enums import GroupClassStatus, TrainerType, UserRole  # noqa: E402
from fitclub.database import Base  # noqa: E402
from fitclub.main import app  # noqa: E402
import fitclub.models  # noqa: E402,F401
from fitclub.models import GroupClass, MembershipPackage, TrainerProfile, User  # noqa: E402
from fitclub.models.group_class import schedule_weekday  # noqa: E402
from tests.utils.clock import CLASS_DAY  # noqa: E402


@pytest.fixture(scope="session")
def engine():
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    # pysqlite only supports SAVEPOINT when SQLAlchemy emits BEGIN itself
    @event.listens_for(engine, "connect")
    def _disable_pysqlite_transactions(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN")

    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db(engine) -> Generator[Session, None, None]:
    connection = engine.connect()
    transaction = connection.begin()
    TestingSession = sessionmaker(
        bind=connection,
        expire_on_commit=False,
        join_transaction_mode="create_savepoint",
    )
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        transaction.rollback()
        connection.close()


# Factories


@pytest.fixture
def make_user(db) -> Callable[..., User]:
    counter = {"n": 0}

    def _make(role: UserRole = UserRole.MEMBER, full_name: Optional[str] = None, **kwargs) -> User:
        counter["n"] += 1
        n = counter["n"]
        user = User(
            email=kwargs.pop("email", f"{role.value}{n}@fitclub.test"),
            full_name=full_name or f"{role.value.title()} {n}",
            role=role.value,
            **kwargs,
        )
        db.add(user)
        db.flush()
        return user

    return _make


@pytest.fixture
def member(db, make_user) -> User:
    user = make_user(UserRole.MEMBER, full_name="Casey Member")
    db.commit()
    return user


@pytest.fixture
def other_member(db, make_user) -> User:
    user = make_user(UserRole.MEMBER, full_name="Robin Member")
    db.commit()
    return user


@pytest.fixture
def admin(db, make_user) -> User:
    user = make_user(UserRole.ADMIN, full_name="Club Admin")
    db.commit()
    return user


@pytest.fixture
def make_trainer(db, make_user) -> Callable[..., User]:
    def _make(
        trainer_type: TrainerType = TrainerType.PERSONAL,
        hourly_rate: str = "60.00",
        full_name: Optional[str] = None,
    ) -> User:
        user = make_user(UserRole.TRAINER, full_name=full_name)
        user.trainer_profile = TrainerProfile(
            hourly_rate=Decimal(hourly_rate),
            trainer_type=trainer_type.value,
            bio="Coach",
        )
        db.flush()
        db.commit()
        return user

    return _make


@pytest.fixture
def trainer(make_trainer) -> User:
    return make_trainer(TrainerType.PERSONAL, full_name="Alex Trainer")


@pytest.fixture
def make_class(db) -> Callable[..., GroupClass]:
    def _make(
        day: date = CLASS_DAY,
        capacity: int = 2,
        start: str = "18:00",
        end: str = "19:00",
        status: GroupClassStatus = GroupClassStatus.APPROVED,
        trainer_user_id: Optional[str] = None,
        name: str = "Spin",
    ) -> GroupClass:
        group_class = GroupClass(
            name=name,
            description="Interval ride",
            trainer_user_id=trainer_user_id,
            capacity=capacity,
            schedule=[
                {"day_of_week": schedule_weekday(day), "start_time": start, "end_time": end}
            ],
            status=status.value,
        )
        db.add(group_class)
        db.flush()
        db.commit()
        return group_class

    return _make


@pytest.fixture
def packages(db) -> Dict[str, MembershipPackage]:
    catalog: List[Dict[str, Any]] = [
        {"name": "Basic", "price": Decimal("29.00")},
        {"name": "Premium", "price": Decimal("49.00")},
        {"name": "VIP", "price": Decimal("79.00")},
    ]
    created = {}
    for entry in catalog:
        package = MembershipPackage(description=f"{entry['name']} plan", **entry)
        db.add(package)
        created[entry["name"]] = package
    db.flush()
    db.commit()
    return created


# HTTP


@pytest.fixture
def client(db) -> Generator[TestClient, None, None]:
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.pop(get_db, None)


@pytest.fixture
def auth_headers() -> Callable[[User], Dict[str, str]]:
    def _headers(user: User) -> Dict[str, str]:
        token = create_access_token({"sub": user.id})
        return {"Authorization": f"Bearer {token}"}

    return _headers
