"""
Chat Service - Knowledge-base questions answered through OpenWebUI.

Keeps routes thin: builds the OpenWebUI client from settings once,
forwards questions to it, and formats the sources for display.
"""
from typing import List, Optional

from chatbridge.core.config import get_settings
from chatbridge.core.logging_config import get_logger
from chatbridge.llm.client import ClientConfig, OpenWebUIClient
from chatbridge.llm.results import NormalizedResult

logger = get_logger(__name__)


class ChatService:
    """
    Service for answering questions against a knowledge collection.

    Example:
        >>> service = ChatService()
        >>> result = service.ask("What is covered in week 3?", collection_id="c1")
        >>> print(result.content)
    """

    def __init__(self, client: Optional[OpenWebUIClient] = None):
        """
        Initialize the chat service.

        Args:
            client: Optional client. Built from settings if not provided.

        Raises:
            ConfigurationError: If the OpenWebUI API key is not configured
        """
        self.client = client or OpenWebUIClient(ClientConfig.from_settings(get_settings()))
        logger.info("ChatService initialized")

    def ask(
        self,
        message: str,
        collection_id: Optional[str] = None,
        model: Optional[str] = None,
    ) -> NormalizedResult:
        """Send a question upstream and return the normalized answer."""
        logger.info(f"Processing question: length={len(message)}, collection={collection_id or 'default'}")

        result = self.client.chat(message, collection_id=collection_id, model=model)

        if result.is_error:
            logger.warning(f"Chat request returned an error result: {result.error}")
        return result

    def format_sources(self, result: NormalizedResult) -> List[str]:
        return self.client.format_sources(result.sources)

    def check_upstream(self) -> bool:
        """True if the OpenWebUI instance is reachable."""
        return self.client.test_connection()


# Module-level instance (singleton pattern)
_chat_service: Optional[ChatService] = None


def get_chat_service() -> ChatService:
    """Get or create the chat service instance."""
    global _chat_service
    if _chat_service is None:
        _chat_service = ChatService()
    return _chat_service
