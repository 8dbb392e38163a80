"""
OpenWebUI Client - Chat completions with knowledge-collection retrieval.

This module provides a thin interface to an OpenWebUI instance:
- Sends a user question scoped to a knowledge collection
- Normalizes the response into content + sources
- Converts transport failures into error-shaped results

Only a missing API key raises (at construction). Timeouts, connection
failures and non-200 responses are returned as NormalizedResults with
an ``error`` set, so callers never need a try/except around chat().
"""
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

import requests

from chatbridge.core.config import Settings
from chatbridge.core.exceptions import ConfigurationError
from chatbridge.core.logging_config import get_logger
from chatbridge.llm.formatter import format_sources
from chatbridge.llm.normalizer import normalize_response
from chatbridge.llm.results import NormalizedResult, SourceRecord

logger = get_logger(__name__)

CHAT_COMPLETIONS_PATH = "/api/chat/completions"
MODELS_PATH = "/api/models"

# Connectivity checks should answer quickly
CHECK_TIMEOUT_SECONDS = 10.0

# Error bodies are kept for diagnostics, up to this many characters
ERROR_BODY_LIMIT = 500


@dataclass(frozen=True)
class ClientConfig:
    """
    Immutable configuration for OpenWebUIClient.

    Attributes:
        base_url: OpenWebUI base URL, without trailing slash
        api_key: Bearer token; the client refuses to operate without it
        model: Model identifier sent with every chat request
        default_collection_id: Collection used when chat() is given none
        timeout_seconds: Timeout for chat completion requests
    """
    base_url: str
    api_key: Optional[str]
    model: str
    default_collection_id: Optional[str] = None
    timeout_seconds: float = 60.0

    @classmethod
    def from_settings(cls, settings: Settings) -> "ClientConfig":
        """Build the client configuration from application settings."""
        return cls(
            base_url=settings.openwebui_base_url,
            api_key=settings.openwebui_api_key,
            model=settings.openwebui_model,
            default_collection_id=settings.openwebui_collection_id,
            timeout_seconds=settings.openwebui_timeout_seconds,
        )


def error_result(content: str, error: str, status: Optional[int] = None, raw: Any = None) -> NormalizedResult:
    """Build the uniform error-shaped result returned for failed requests."""
    return NormalizedResult(content=content, sources=(), raw_response=raw, status=status, error=error)


class OpenWebUIClient:
    """
    Client for the OpenWebUI chat completions API.

    Example:
        >>> config = ClientConfig(base_url="http://localhost:3000",
        ...                       api_key="sk-...", model="llama3.1:latest",
        ...                       default_collection_id="c1")
        >>> with OpenWebUIClient(config) as client:
        ...     result = client.chat("What does chapter 2 cover?")
        ...     print(result.content)
        ...     for line in client.format_sources(result.sources):
        ...         print(line)
    """

    def __init__(self, config: ClientConfig, session: Optional[requests.Session] = None):
        """
        Initialize the client.

        Args:
            config: Client configuration
            session: Optional pre-built requests session (for testing)

        Raises:
            ConfigurationError: If no API key is configured
        """
        if not config.api_key:
            raise ConfigurationError(
                "OpenWebUI API key is not set. Set OPENWEBUI_API_KEY in your .env file.",
                setting="OPENWEBUI_API_KEY",
            )

        self.config = config
        self.base_url = config.base_url.rstrip("/")

        self.session = session or requests.Session()
        self.session.headers.update({
            "Authorization": f"Bearer {config.api_key}",
            "Content-Type": "application/json",
        })

        if not config.default_collection_id:
            logger.warning("No default collection configured; chat() calls must pass collection_id")

        logger.info(f"OpenWebUI client initialized: {self.base_url} (model={config.model})")

    def __enter__(self) -> "OpenWebUIClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        """Release pooled HTTP connections."""
        self.session.close()

    def build_payload(self, query: str, collection_id: str, model: Optional[str] = None) -> Dict[str, Any]:
        """Build the chat completion request body."""
        return {
            "model": model or self.config.model,
            "messages": [{"role": "user", "content": query}],
            "files": [{"type": "collection", "id": collection_id}],
        }

    def chat(
        self,
        query: str,
        collection_id: Optional[str] = None,
        model: Optional[str] = None,
    ) -> NormalizedResult:
        """
        Ask a question against a knowledge collection.

        Args:
            query: The user's question
            collection_id: Collection to search; defaults to the configured one
            model: Model override for this request

        Returns:
            NormalizedResult with content and deduplicated sources, or an
            error-shaped result if the request failed
        """
        collection_id = collection_id or self.config.default_collection_id
        if not collection_id:
            logger.error("No collection specified and no default collection configured")
            return error_result("[ERROR: No collection specified]", "missing_collection")

        payload = self.build_payload(query, collection_id, model)
        url = f"{self.base_url}{CHAT_COMPLETIONS_PATH}"

        logger.info(f"Sending chat request: collection={collection_id}, query={query[:50]}...")

        try:
            response = self.session.post(url, json=payload, timeout=self.config.timeout_seconds)
        except requests.exceptions.Timeout:
            logger.error(f"Chat request timed out after {self.config.timeout_seconds}s")
            return error_result("[ERROR: Request timed out]", "timeout")
        except requests.exceptions.ConnectionError as e:
            logger.error(f"Could not connect to OpenWebUI at {self.base_url}: {e}")
            return error_result("[ERROR: Could not connect to API]", "connection_error")
        except requests.exceptions.RequestException as e:
            logger.error(f"Chat request failed: {e}")
            return error_result("[ERROR: Request failed]", "request_error")

        if response.status_code != 200:
            body = response.text[:ERROR_BODY_LIMIT]
            logger.error(f"OpenWebUI returned status {response.status_code}: {body}")
            return error_result(
                f"[ERROR: API returned status {response.status_code}]",
                body,
                status=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"OpenWebUI returned invalid JSON: {e}")
            return error_result(
                "[ERROR: Invalid JSON in API response]",
                "invalid_json",
                status=response.status_code,
                raw=response.text[:ERROR_BODY_LIMIT],
            )

        return normalize_response(data)

    def test_connection(self) -> bool:
        """
        Check that OpenWebUI is reachable and accepts our credentials.

        Returns:
            True if GET /api/models answers 200
        """
        try:
            response = self.session.get(f"{self.base_url}{MODELS_PATH}", timeout=CHECK_TIMEOUT_SECONDS)
        except requests.exceptions.RequestException as e:
            logger.warning(f"OpenWebUI connection check failed: {e}")
            return False

        if response.status_code == 200:
            logger.debug("OpenWebUI connection check: OK")
            return True

        logger.warning(f"OpenWebUI connection check returned status {response.status_code}")
        return False

    def list_models(self) -> List[str]:
        """
        List model identifiers available on the OpenWebUI instance.

        Returns:
            Model ids, or an empty list if the request fails
        """
        try:
            response = self.session.get(f"{self.base_url}{MODELS_PATH}", timeout=CHECK_TIMEOUT_SECONDS)
            response.raise_for_status()
            data = response.json()
        except (requests.exceptions.RequestException, ValueError) as e:
            logger.warning(f"Could not list models: {e}")
            return []

        models = data.get("data", []) if isinstance(data, dict) else data
        if not isinstance(models, list):
            return []
        return [m["id"] for m in models if isinstance(m, dict) and m.get("id")]

    def format_sources(self, sources: Sequence[SourceRecord]) -> List[str]:
        """Format sources for display (see chatbridge.llm.formatter)."""
        return format_sources(sources)
