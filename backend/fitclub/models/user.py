# backend/fitclub/models/user.py
"""
User model for the FitClub booking backend.

This module defines the User model shared by members, trainers and admins.
Authentication happens upstream; the backend only needs the identity, the
role and the profile links that gate booking capabilities.

Classes:
    User: Club account with an immutable role
"""

import logging

from sqlalchemy import Boolean, CheckConstraint, Column, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import ulid

from ..core.enums import UserRole
from ..database import Base
from .types import UTCDateTime

logger = logging.getLogger(__name__)


class User(Base):
    """
    Club account.

    Attributes:
        id: ULID primary key
        email: Unique email address
        full_name: Display name shown on bookings and trainer listings
        role: admin, trainer or member; fixed at creation
        is_active: Deactivated accounts cannot authenticate
        created_at: Account creation timestamp
        updated_at: Last update timestamp

    Relationships:
        trainer_profile: One-to-one with TrainerProfile (trainers only)
        memberships: One-to-many with Membership (members only)

    Note:
        There is no stored pointer to the current membership. It is always
        derived from the memberships table (see MembershipRepository.get_current).
    """

    __tablename__ = "users"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    email = Column(String, unique=True, index=True, nullable=False)
    full_name = Column(String(120), nullable=False)
    role = Column(String(20), nullable=False, default=UserRole.MEMBER.value, index=True)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(UTCDateTime, server_default=func.now())
    updated_at = Column(UTCDateTime, onupdate=func.now())

    trainer_profile = relationship(
        "TrainerProfile", back_populates="user", uselist=False, cascade="all, delete-orphan"
    )
    memberships = relationship(
        "Membership",
        back_populates="user",
        order_by="Membership.start_date.desc()",
        foreign_keys="Membership.user_id",
    )

    __table_args__ = (
        CheckConstraint("role IN ('admin', 'trainer', 'member')", name="ck_users_role"),
    )

    def __repr__(self) -> str:
        return f"<User {self.email} ({self.role})>"

    @property
    def is_member(self) -> bool:
        return self.role == UserRole.MEMBER.value

    @property
    def is_trainer(self) -> bool:
        return self.role == UserRole.TRAINER.value

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value

    @property
    def offers_personal_training(self) -> bool:
        """True for trainers whose profile allows one-to-one sessions."""
        profile = self.trainer_profile
        return bool(self.is_trainer and profile is not None and profile.offers_personal_training)
