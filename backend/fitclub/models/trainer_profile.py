# backend/fitclub/models/trainer_profile.py
"""Trainer profile: pricing and the kinds of sessions a trainer runs."""

from sqlalchemy import CheckConstraint, Column, ForeignKey, Numeric, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import ulid

from ..core.enums import TrainerType
from ..database import Base
from .types import UTCDateTime


class TrainerProfile(Base):
    """
    One-to-one extension of a User with role=trainer.

    ``trainer_type`` decides where the trainer shows up: ``personal`` and
    ``both`` trainers are listed for personal training and have a slot grid;
    ``group`` trainers only lead classes.
    """

    __tablename__ = "trainer_profiles"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    user_id = Column(
        String(26),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    hourly_rate = Column(Numeric(10, 2), nullable=False)
    trainer_type = Column(String(20), nullable=False, default=TrainerType.PERSONAL.value)
    bio = Column(Text, nullable=True)

    created_at = Column(UTCDateTime, server_default=func.now())
    updated_at = Column(UTCDateTime, onupdate=func.now())

    user = relationship("User", back_populates="trainer_profile")

    __table_args__ = (
        CheckConstraint("hourly_rate > 0", name="check_trainer_rate_positive"),
        CheckConstraint(
            "trainer_type IN ('personal', 'group', 'both')", name="ck_trainer_profiles_type"
        ),
    )

    @property
    def offers_personal_training(self) -> bool:
        return TrainerType(self.trainer_type).offers_personal_training

    def __repr__(self) -> str:
        return f"<TrainerProfile user={self.user_id} type={self.trainer_type} rate={self.hourly_rate}>"
