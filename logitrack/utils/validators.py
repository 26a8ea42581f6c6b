"""
Input validation utilities
"""
from datetime import datetime, timezone
from typing import Annotated, Optional

from pydantic import AfterValidator

MIN_PASSWORD_LENGTH = 8


def validate_password(password: str) -> str:
    """Validate password length"""
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")
    return password


def validate_amount(amount: Optional[int]) -> Optional[int]:
    """Validate a money amount in minor currency units is not negative"""
    if amount is not None and amount < 0:
        raise ValueError("Amount must not be negative")
    return amount


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Timestamps are stored as naive UTC; convert aware values, pass naive through"""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


# Request datetime field that is stored as naive UTC
UTCDateTime = Annotated[datetime, AfterValidator(to_naive_utc)]

# Money in minor currency units
Amount = Annotated[int, AfterValidator(validate_amount)]
