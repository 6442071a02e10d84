"""Row locking used by group class booking."""

from unittest.mock import MagicMock, patch

import pytest

from fitclub.core.enums import GroupClassStatus
from fitclub.database.session_utils import get_dialect_name, supports_row_locks
from fitclub.repositories.group_class_repository import GroupClassRepository


def test_sqlite_has_no_row_locks(db):
    assert get_dialect_name(db) == "sqlite"
    assert supports_row_locks(db) is False


def test_get_for_update_reads_class(db, make_class):
    group_class = make_class()

    assert GroupClassRepository(db).get_for_update(group_class.id) is group_class
    assert GroupClassRepository(db).get_for_update("missing") is None


@pytest.mark.parametrize("locks", [True, False])
def test_get_for_update_locks_only_where_supported(locks):
    session = MagicMock()
    repository = GroupClassRepository(session)

    with patch(
        "fitclub.repositories.group_class_repository.supports_row_locks", return_value=locks
    ):
        repository.get_for_update("class-1")

    filtered = session.query.return_value.filter.return_value
    assert filtered.with_for_update.called is locks


def test_list_approved_hides_pending(db, make_class):
    make_class(name="Visible")
    make_class(name="Waiting", status=GroupClassStatus.PENDING)

    assert [c.name for c in GroupClassRepository(db).list_approved()] == ["Visible"]
