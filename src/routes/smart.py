import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from src.routes.deps import get_openrouter_client
from src.routes.errors import ApiError
from src.schemas.chat_schemas import (
    MAX_TOTAL_MESSAGE_LENGTH,
    ChatCompletionResponse,
    ChatErrorResponse,
    SmartChatRequest,
)
from src.utils.openrouter_client import OpenRouterClient, OpenRouterError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["smart"])


@router.post("/smart", response_model=ChatCompletionResponse)
def smart_completion(
    payload: SmartChatRequest,
    client: OpenRouterClient = Depends(get_openrouter_client),
):
    """
    Proxy de chat completion para o OpenRouter.
    """
    if payload.total_content_length() > MAX_TOTAL_MESSAGE_LENGTH:
        raise ApiError(
            422,
            "Total message content is too large.",
            f"Maximum total characters allowed is {MAX_TOTAL_MESSAGE_LENGTH}.",
        )

    try:
        return client.create_chat_completion(payload)
    except OpenRouterError as e:
        logger.warning(f"Smart completion failed: {e.message} (status={e.status})")
        body = ChatErrorResponse(message=e.message, status=e.status, code=e.code, details=e.details)
        return JSONResponse(status_code=e.status or 502, content=body.model_dump(exclude_none=True))
