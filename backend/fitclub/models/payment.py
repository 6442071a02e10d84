# backend/fitclub/models/payment.py
"""Payment ledger entries. One per subscribe action; settlement is simulated."""

from sqlalchemy import CheckConstraint, Column, ForeignKey, Numeric, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import ulid

from ..core.enums import PaymentStatus
from ..database import Base
from .types import UTCDateTime


class Payment(Base):
    __tablename__ = "payments"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    user_id = Column(String(26), ForeignKey("users.id"), nullable=False, index=True)
    membership_id = Column(String(26), ForeignKey("memberships.id"), nullable=False, index=True)
    amount = Column(Numeric(10, 2), nullable=False)
    status = Column(String(20), nullable=False, default=PaymentStatus.PENDING.value)
    payment_method = Column(String(50), nullable=False)
    payment_date = Column(UTCDateTime, nullable=False)
    description = Column(Text, nullable=True)

    created_at = Column(UTCDateTime, server_default=func.now())

    membership = relationship("Membership", back_populates="payments")

    __table_args__ = (
        CheckConstraint("amount >= 0", name="check_payment_amount_non_negative"),
        CheckConstraint(
            "status IN ('pending', 'completed', 'failed', 'refunded')",
            name="ck_payments_status",
        ),
    )

    def __repr__(self) -> str:
        return f"<Payment {self.id}: {self.amount} {self.status}>"
