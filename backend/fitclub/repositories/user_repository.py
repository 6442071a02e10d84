# backend/fitclub/repositories/user_repository.py
"""User and trainer lookups."""

import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from ..core.enums import TrainerType, UserRole
from ..core.exceptions import RepositoryException
from ..models.trainer_profile import TrainerProfile
from ..models.user import User
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)

_PERSONAL_TRAINER_TYPES = (TrainerType.PERSONAL.value, TrainerType.BOTH.value)
_LISTED_ROLES = (UserRole.MEMBER.value, UserRole.TRAINER.value)


class UserRepository(BaseRepository[User]):
    def __init__(self, db: Session):
        super().__init__(db, User)

    def _apply_eager_loading(self, query):
        return query.options(joinedload(User.trainer_profile))

    def get_by_email(self, email: str) -> Optional[User]:
        try:
            return self.db.query(User).filter(User.email == email.strip().lower()).first()
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting user by email: {str(e)}")
            raise RepositoryException(f"Failed to retrieve user: {str(e)}")

    def get_personal_trainer(self, trainer_id: str) -> Optional[User]:
        """
        Trainer offering personal training, or None.

        Requires role=trainer and a profile of type personal or both.
        """
        try:
            return (
                self.db.query(User)
                .join(TrainerProfile, TrainerProfile.user_id == User.id)
                .options(joinedload(User.trainer_profile))
                .filter(
                    User.id == trainer_id,
                    User.role == UserRole.TRAINER.value,
                    TrainerProfile.trainer_type.in_(_PERSONAL_TRAINER_TYPES),
                )
                .first()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting trainer {trainer_id}: {str(e)}")
            raise RepositoryException(f"Failed to retrieve trainer: {str(e)}")

    def list_personal_trainers(self) -> List[User]:
        """Active trainers offering personal training, by name."""
        try:
            return (
                self.db.query(User)
                .join(TrainerProfile, TrainerProfile.user_id == User.id)
                .options(joinedload(User.trainer_profile))
                .filter(
                    User.role == UserRole.TRAINER.value,
                    User.is_active.is_(True),
                    TrainerProfile.trainer_type.in_(_PERSONAL_TRAINER_TYPES),
                )
                .order_by(User.full_name)
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing trainers: {str(e)}")
            raise RepositoryException(f"Failed to list trainers: {str(e)}")

    def list_members(self) -> List[User]:
        """Members and trainers, newest accounts first. Admins are not listed."""
        try:
            return (
                self.db.query(User)
                .options(joinedload(User.trainer_profile))
                .filter(User.role.in_(_LISTED_ROLES))
                .order_by(User.created_at.desc(), User.id.desc())
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing members: {str(e)}")
            raise RepositoryException(f"Failed to list members: {str(e)}")

    def get_listed_member(self, user_id: str) -> Optional[User]:
        """A member or trainer by ID; admins read as missing."""
        try:
            return (
                self.db.query(User)
                .options(joinedload(User.trainer_profile))
                .filter(User.id == user_id, User.role.in_(_LISTED_ROLES))
                .first()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting member {user_id}: {str(e)}")
            raise RepositoryException(f"Failed to retrieve member: {str(e)}")
