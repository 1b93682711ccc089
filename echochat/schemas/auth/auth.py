# echochat/schemas/auth/auth.py
from pydantic import BaseModel, Field
from typing import Optional

# Presence and format checks happen in AuthService so that every
# failure carries the same human-readable message over the wire.

class RegisterRequest(BaseModel):
    phoneNumber: Optional[str] = Field(None, description="10-digit phone number")
    fullname: Optional[str] = Field(None, description="User's full name (3-50 characters)")

class VerifyOTPRequest(BaseModel):
    phoneNumber: Optional[str] = Field(None, description="10-digit phone number")
    otp: Optional[str] = Field(None, description="6-digit OTP")

class LoginRequest(BaseModel):
    phoneNumber: Optional[str] = Field(None, description="10-digit phone number")
