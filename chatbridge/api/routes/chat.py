"""
Chat Routes - Ask questions against an OpenWebUI knowledge collection.

Upstream failures (timeouts, bad status codes) are not HTTP errors here:
they come back as a 200 with a bracketed error string in ``content`` and
the ``status``/``error`` fields set, mirroring the client's result shape.
"""
from fastapi import APIRouter, Depends

from chatbridge.core.exceptions import ConfigurationError, UpstreamUnavailableError
from chatbridge.core.logging_config import get_logger
from chatbridge.models.chat import ChatRequest, ChatResponse, ErrorResponse
from chatbridge.services.chat_service import ChatService, get_chat_service

logger = get_logger(__name__)

router = APIRouter(
    prefix="/chat",
    tags=["Chat"],
    responses={
        503: {"model": ErrorResponse, "description": "Chat service not configured"},
    }
)


def require_chat_service() -> ChatService:
    """Resolve the chat service, reporting missing configuration as 503."""
    try:
        return get_chat_service()
    except ConfigurationError as e:
        logger.error(f"Chat service unavailable: {e.message}")
        raise UpstreamUnavailableError(e.message) from e


@router.post(
    "",
    response_model=ChatResponse,
    summary="Ask a question",
)
def send_message(request: ChatRequest, service: ChatService = Depends(require_chat_service)) -> ChatResponse:
    """Forward the question to OpenWebUI and return content with sources."""
    result = service.ask(request.message, collection_id=request.collection_id, model=request.model)

    return ChatResponse(
        content=result.content,
        sources=[source.to_dict() for source in result.sources],
        formatted_sources=service.format_sources(result),
        status=result.status,
        error=result.error,
    )
