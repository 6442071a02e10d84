# backend/fitclub/repositories/group_class_repository.py
"""Group class templates."""

from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.enums import GroupClassStatus
from ..core.exceptions import RepositoryException
from ..database.session_utils import supports_row_locks
from ..models.group_class import GroupClass
from .base_repository import BaseRepository


class GroupClassRepository(BaseRepository[GroupClass]):
    def __init__(self, db: Session):
        super().__init__(db, GroupClass)

    def list_approved(self) -> List[GroupClass]:
        try:
            return (
                self.db.query(GroupClass)
                .filter(GroupClass.status == GroupClassStatus.APPROVED.value)
                .order_by(GroupClass.name)
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing classes: {str(e)}")
            raise RepositoryException(f"Failed to list classes: {str(e)}")

    def list_all(self) -> List[GroupClass]:
        """Every class regardless of status, newest first."""
        try:
            return (
                self.db.query(GroupClass)
                .order_by(GroupClass.created_at.desc(), GroupClass.id.desc())
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing all classes: {str(e)}")
            raise RepositoryException(f"Failed to list classes: {str(e)}")

    def get_for_update(self, class_id: str) -> Optional[GroupClass]:
        """
        Load a class and lock its row until the transaction ends.

        Serializes concurrent bookings for the same class so the capacity
        check and the insert see the same seat count. Backends without row
        locks (SQLite) get a plain read.
        """
        try:
            query = self.db.query(GroupClass).filter(GroupClass.id == class_id)
            if supports_row_locks(self.db):
                query = query.with_for_update()
            return query.first()
        except SQLAlchemyError as e:
            self.logger.error(f"Error locking class {class_id}: {str(e)}")
            raise RepositoryException(f"Failed to lock class: {str(e)}")
