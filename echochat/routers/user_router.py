from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
import logging

from ..application.ports.user_repo import UserDto
from ..application.services.auth_service import AuthService
from ..dependencies import get_auth_service, get_current_user, get_optional_user
from ..exceptions import create_success_response
from ..schemas import RegisterRequest, VerifyOTPRequest, LoginRequest, UserSummary, UserResponse, ApiResponse, ErrorResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/user", tags=["User"])

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
}

def _auth_payload(user: UserDto, access_token: str, include_fullname: bool) -> dict:
    summary = UserSummary(
        id=user.id,
        phoneNumber=user.phone_number,
        isVerified=user.is_verified,
        fullname=user.fullname if include_fullname else None,
    )
    return {
        "user": summary.model_dump(exclude_none=True),
        "accessToken": access_token,
    }

@router.get("/health", response_model=ApiResponse)
def health_check():
    return create_success_response(None, "Server is running")

@router.post("/register", response_model=ApiResponse, status_code=201, responses=ERROR_RESPONSES)
def register(payload: RegisterRequest, auth_service: AuthService = Depends(get_auth_service)):
    """
    Start (or restart) phone verification. Re-posting for an unverified
    number sends a fresh OTP and invalidates the previous one.
    """
    user = auth_service.register(payload.phoneNumber, payload.fullname)
    return JSONResponse(
        status_code=201,
        content=create_success_response(
            {"phoneNumber": user.phone_number, "fullname": user.fullname},
            "OTP sent successfully. Please verify your phone number.",
            201,
        ),
    )

@router.post("/verify-otp", response_model=ApiResponse, responses=ERROR_RESPONSES)
def verify_otp(payload: VerifyOTPRequest, auth_service: AuthService = Depends(get_auth_service)):
    user, access_token = auth_service.verify_otp(payload.phoneNumber, payload.otp)
    return create_success_response(
        _auth_payload(user, access_token, include_fullname=False),
        "Phone number verified successfully",
    )

@router.post("/login", response_model=ApiResponse, responses=ERROR_RESPONSES)
def login(payload: LoginRequest, auth_service: AuthService = Depends(get_auth_service)):
    user, access_token = auth_service.login(payload.phoneNumber)
    return create_success_response(
        _auth_payload(user, access_token, include_fullname=True),
        "User logged in successfully",
    )

@router.get("/current-user", response_model=ApiResponse, responses=ERROR_RESPONSES)
def current_user(user: UserDto = Depends(get_current_user)):
    data = UserResponse(**user.to_public_dict())
    return create_success_response(data.model_dump(), "User fetched successfully")

@router.post("/logout", response_model=ApiResponse)
def logout(user: UserDto = Depends(get_optional_user), auth_service: AuthService = Depends(get_auth_service)):
    """
    Acknowledge a logout. The token itself stays valid until it expires;
    clients are expected to drop it.
    """
    auth_service.logout(user)
    return create_success_response(None, "User logged out successfully")
