from fastapi import Request
from starlette.exceptions import HTTPException as StarletteHTTPException
from fastapi import HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import logging

logger = logging.getLogger(__name__)

class APIException(HTTPException):
    status_code_default = 500

    def __init__(self, detail: str, status_code: int = None):
        super().__init__(status_code=status_code or self.status_code_default, detail=detail)

class BadRequestError(APIException):
    status_code_default = 400

class UnauthorizedError(APIException):
    status_code_default = 401

class NotFoundError(APIException):
    status_code_default = 404

class ConflictError(APIException):
    status_code_default = 409

def create_error_response(error_message: str, status_code: int = 400) -> dict:
    """Create a standardized error response"""
    return {
        "success": False,
        "message": error_message,
        "statusCode": status_code,
    }

def create_success_response(data, message: str = "Success", status_code: int = 200) -> dict:
    """Create a standardized success response"""
    return {
        "statusCode": status_code,
        "data": data,
        "message": message,
        "success": status_code < 400,
    }

async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Custom exception handler for HTTPException"""
    # HTTPBearer reports a missing header as 403
    if exc.status_code == 403 and "Not authenticated" in str(exc.detail):
        return JSONResponse(
            status_code=401,
            content=create_error_response("Unauthorized request", 401)
        )

    return JSONResponse(
        status_code=exc.status_code,
        content=create_error_response(str(exc.detail), exc.status_code),
        headers=getattr(exc, "headers", None),
    )

def _first_validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    message = first.get("msg", "Invalid request")
    # pydantic prefixes messages raised from validators
    if message.startswith("Value error, "):
        message = message[len("Value error, "):]
    loc = [str(part) for part in first.get("loc", ()) if part != "body"]
    if first.get("type") == "missing" and loc:
        return f"{loc[-1]} is required"
    return message

async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    message = _first_validation_message(exc)
    logger.info(f"Validation failed on {request.url.path}: {message}")
    return JSONResponse(status_code=400, content=create_error_response(message, 400))
