# echochat/core/validators.py
import re
from typing import Optional

PHONE_NUMBER_PATTERN = re.compile(r"^[6-9]\d{9}$")
OTP_PATTERN = re.compile(r"^\d{6}$")

FULLNAME_MIN_LENGTH = 3
FULLNAME_MAX_LENGTH = 50


def validate_phone_number(value: str) -> str:
    """Return the trimmed phone number or raise ValueError."""
    phone = (value or "").strip()
    if not PHONE_NUMBER_PATTERN.match(phone):
        raise ValueError("Please enter a valid 10-digit phone number")
    return phone


def validate_fullname(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    name = value.strip()
    if len(name) < FULLNAME_MIN_LENGTH:
        raise ValueError(f"Full name must be at least {FULLNAME_MIN_LENGTH} characters long")
    if len(name) > FULLNAME_MAX_LENGTH:
        raise ValueError(f"Full name cannot exceed {FULLNAME_MAX_LENGTH} characters")
    return name


def validate_otp(value: str) -> str:
    code = (value or "").strip()
    if not OTP_PATTERN.match(code):
        raise ValueError("Please enter complete 6-digit OTP")
    return code
