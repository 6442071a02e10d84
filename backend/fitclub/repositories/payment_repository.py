# backend/fitclub/repositories/payment_repository.py
"""Payment ledger reads and appends."""

from typing import List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException
from ..models.payment import Payment
from .base_repository import BaseRepository


class PaymentRepository(BaseRepository[Payment]):
    def __init__(self, db: Session):
        super().__init__(db, Payment)

    def get_for_user(self, user_id: str) -> List[Payment]:
        """Payments of a member, newest first."""
        try:
            return (
                self.db.query(Payment)
                .filter(Payment.user_id == user_id)
                .order_by(Payment.payment_date.desc(), Payment.id.desc())
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing payments for {user_id}: {str(e)}")
            raise RepositoryException(f"Failed to list payments: {str(e)}")
