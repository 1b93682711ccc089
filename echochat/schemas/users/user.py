# echochat/schemas/users/user.py
from pydantic import BaseModel
from typing import Optional

class UserSummary(BaseModel):
    id: str
    phoneNumber: str
    isVerified: bool
    fullname: Optional[str] = None

class UserResponse(BaseModel):
    id: str
    fullname: str
    phoneNumber: str
    isVerified: bool
    createdAt: Optional[str] = None
    updatedAt: Optional[str] = None
