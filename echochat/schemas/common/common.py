# echochat/schemas/common/common.py
from pydantic import BaseModel
from typing import Any, Optional

class ApiResponse(BaseModel):
    statusCode: int
    data: Optional[Any] = None
    message: str
    success: bool

class ErrorResponse(BaseModel):
    success: bool = False
    message: str
    statusCode: int
