from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
import logging

from ..application.ports.user_repo import UserDto
from ..application.services.message_service import MessageService
from ..dependencies import get_current_user, get_message_service
from ..exceptions import create_success_response
from ..schemas import SendMessageRequest, MessageResponse, ApiResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/message", tags=["Messages"])

@router.post("/send", response_model=ApiResponse, status_code=201)
def send_message(
    payload: SendMessageRequest,
    current_user: UserDto = Depends(get_current_user),
    messages: MessageService = Depends(get_message_service),
):
    sent = messages.send(current_user.id, payload.content)
    return JSONResponse(
        status_code=201,
        content=create_success_response(
            {"sentMessage": MessageResponse(**sent.to_dict()).model_dump()},
            "Message sent successfully",
            201,
        ),
    )

@router.get("", response_model=ApiResponse)
def get_messages(
    current_user: UserDto = Depends(get_current_user),
    messages: MessageService = Depends(get_message_service),
):
    rows = messages.list_for_user(current_user.id)
    return create_success_response(
        {"messages": [MessageResponse(**m.to_dict()).model_dump() for m in rows]},
        "Messages fetched successfully",
    )

@router.delete("/clear-all", response_model=ApiResponse)
def clear_all_messages(
    current_user: UserDto = Depends(get_current_user),
    messages: MessageService = Depends(get_message_service),
):
    removed = messages.clear_all(current_user.id)
    logger.info(f"Cleared {removed} messages for user {current_user.id}")
    return create_success_response(None, "All messages cleared successfully")

@router.delete("/{message_id}", response_model=ApiResponse)
def delete_message(
    message_id: str,
    current_user: UserDto = Depends(get_current_user),
    messages: MessageService = Depends(get_message_service),
):
    messages.delete(current_user.id, message_id)
    return create_success_response(None, "Message deleted successfully")
