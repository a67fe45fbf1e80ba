import logging

from fastapi import APIRouter, status

from ayu.config import settings
from ayu.schemas.chat import ChatReply, ChatRequest
from ayu.services import gemini_service
from ayu.utils.errors import ValidationError
from ayu.utils.response import create_response, handle_exception

router = APIRouter(prefix=settings.API_PREFIX, tags=["Chat"])
logger = logging.getLogger(__name__)


@router.post("/chat")
async def chat(body: ChatRequest):
    try:
        message = (body.message or "").strip()
        if not message:
            raise ValidationError("Message is required")

        logger.info("Chat request received (%s chars, %s history turns)", len(message), len(body.history))
        reply = await gemini_service.generate_reply(
            message, [turn.model_dump() for turn in body.history]
        )
        return create_response(
            message="Reply generated",
            data=ChatReply(reply=reply).model_dump(),
            status_code=status.HTTP_200_OK
        )
    except Exception as exc:
        return handle_exception(exc)
