# backend/fitclub/core/exceptions.py
"""
Domain-specific exceptions for the FitClub booking backend.

These exceptions provide clear, business-focused error messages
that can be caught and handled appropriately at the API layer.

Status mapping used by the API:
- NotFoundException      -> 404
- ForbiddenException     -> 403
- ValidationException    -> 400 (invalid argument: bad date, inverted range, past start)
- ConflictException      -> 400 (business-rule conflict: duplicate booking, class full, ...)
- UnauthorizedException  -> 401
- ServiceException       -> 500
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException, status


class DomainException(Exception):
    """Base exception for all domain-specific errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_http_exception(self) -> HTTPException:
        """Convert to an HTTPException carrying the domain payload."""
        return HTTPException(
            status_code=self.status_code,
            detail={
                "message": self.message,
                "code": self.code,
                "details": self.details,
            },
        )


class ValidationException(DomainException):
    """Raised when an argument is malformed or out of range."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundException(DomainException):
    """Raised when a requested resource is not found."""

    status_code = status.HTTP_404_NOT_FOUND


class ConflictException(DomainException):
    """Raised when a request conflicts with current booking or membership state."""

    status_code = status.HTTP_400_BAD_REQUEST


class UnauthorizedException(DomainException):
    """Raised when user is not authenticated."""

    status_code = status.HTTP_401_UNAUTHORIZED


class ForbiddenException(DomainException):
    """Raised when user lacks permission for an action."""

    status_code = status.HTTP_403_FORBIDDEN


class ServiceException(DomainException):
    """Raised when a service operation fails."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=self.status_code,
            detail={
                "message": self.message or "An error occurred processing your request",
                "code": self.code,
                "details": self.details if self.details else {},
            },
        )


# Specific business exceptions


class BookingConflictException(ConflictException):
    """Raised when a booking conflicts with existing bookings."""

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        code: str = "BOOKING_CONFLICT",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message or "This time slot conflicts with an existing booking",
            code=code,
            details=details or {},
        )


class DuplicateBookingException(BookingConflictException):
    """The member already holds a confirmed seat for this class occurrence."""

    def __init__(self, class_id: str, class_date: str):
        super().__init__(
            "You already have a booking for this class on this date",
            code="DUPLICATE_BOOKING",
            details={"class_id": class_id, "class_date": class_date},
        )


class ClassFullException(BookingConflictException):
    def __init__(self, class_id: str, class_date: str, capacity: int):
        super().__init__(
            "This class is fully booked for the selected date",
            code="CLASS_FULL",
            details={"class_id": class_id, "class_date": class_date, "capacity": capacity},
        )


class UserDoubleBookedException(BookingConflictException):
    def __init__(self, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            "You already have a booking at this time",
            code="USER_DOUBLE_BOOKED",
            details=details,
        )


class TrainerUnavailableException(BookingConflictException):
    def __init__(self, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            "The trainer is not available at this time",
            code="TRAINER_UNAVAILABLE",
            details=details,
        )


class MembershipStateException(ConflictException):
    """Raised when a membership transition is not allowed from the current state."""


class ClassHasBookingsException(ConflictException):
    """Raised when deleting a class that bookings still reference."""

    def __init__(self, class_id: str, bookings: int):
        super().__init__(
            f"This class has {bookings} booking(s) and cannot be deleted. Reject it instead.",
            code="CLASS_HAS_BOOKINGS",
            details={"class_id": class_id, "bookings": bookings},
        )


class RepositoryException(Exception):
    """
    Exception raised for repository layer errors.

    This exception is used when data access operations fail,
    such as database connection issues, query failures, or
    constraint violations.
    """
