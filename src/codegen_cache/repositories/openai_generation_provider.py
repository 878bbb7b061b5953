"""OpenAI Responses API generation provider.

Sends one ``POST /responses`` per call with ``{"model": ..., "input": ...}``
and pulls the answer text out of the structured response:

    {"output": [{"content": [{"text": "..."}]}]}

When the body cannot be parsed, or the expected item is missing, the raw
body is returned as the output instead of failing the call.
"""

import json
import logging
from typing import Any

import httpx

from codegen_cache.config import settings
from codegen_cache.errors import UpstreamError

logger = logging.getLogger(__name__)


class OpenAIGenerationProvider:
    """OpenAI implementation of GenerationProvider protocol.

    This class satisfies the GenerationProvider protocol through structural
    typing - no explicit inheritance needed.

    Calls are single-attempt: transport errors and non-2xx answers surface
    as UpstreamError and are never retried here.

    Example:
        ```python
        provider = OpenAIGenerationProvider.create()
        text = await provider.generate("blink an LED on pin 13")
        await provider.close()
        ```
    """

    def __init__(
        self,
        api_key: str | None = None,
        model_name: str | None = None,
        base_url: str | None = None,
        organization: str | None = None,
        project: str | None = None,
        output_index: int | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the OpenAI generation provider.

        Args:
            api_key: Bearer credential. Defaults to settings.openai_api_key.
            model_name: Model identifier. Defaults to settings.openai_model.
            base_url: API base URL. Defaults to settings.openai_base_url.
            organization: Optional OpenAI-Organization header value.
            project: Optional OpenAI-Project header value.
            output_index: Index of the output item holding the answer text.
            timeout: Request timeout in seconds.
            client: Pre-built async client (mainly for tests).
        """
        self._api_key = api_key if api_key is not None else settings.openai_api_key
        self._model_name = model_name or settings.openai_model
        self._base_url = (base_url or settings.openai_base_url).rstrip("/")
        self._organization = organization if organization is not None else settings.openai_organization
        self._project = project if project is not None else settings.openai_project
        self._output_index = settings.openai_output_index if output_index is None else output_index
        self._timeout = timeout or settings.openai_timeout
        self._client = client

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-load the async HTTP client.

        Returns:
            The httpx.AsyncClient instance
        """
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                limits=httpx.Limits(max_connections=100, max_keepalive_connections=20),
            )
        return self._client

    @classmethod
    def create(
        cls,
        api_key: str | None = None,
        model_name: str | None = None,
        base_url: str | None = None,
    ) -> "OpenAIGenerationProvider":
        """Factory method to create OpenAIGenerationProvider with defaults.

        Args:
            api_key: API key. If None, uses settings.
            model_name: Model name. If None, uses settings.
            base_url: API base URL. If None, uses settings.

        Returns:
            Configured OpenAIGenerationProvider
        """
        return cls(api_key=api_key, model_name=model_name, base_url=base_url)

    @property
    def model_name(self) -> str:
        return self._model_name

    def _headers(self) -> dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self._api_key or ''}",
            "Content-Type": "application/json",
        }
        if self._organization:
            headers["OpenAI-Organization"] = self._organization
        if self._project:
            headers["OpenAI-Project"] = self._project
        return headers

    async def generate(self, prompt: str) -> str:
        """Generate text for a prompt.

        Args:
            prompt: The input text

        Returns:
            The trimmed answer text, or the raw response body if the
            expected structure is absent

        Raises:
            UpstreamError: If the request fails in transport or the
                provider answers with a non-2xx status
        """
        url = f"{self._base_url}/responses"
        payload = {
            "model": self._model_name,
            "input": prompt,
        }

        logger.info("Calling generation provider (model=%s)", self._model_name)
        try:
            response = await self.client.post(url, json=payload, headers=self._headers())
        except httpx.HTTPError as e:
            raise UpstreamError(str(e) or type(e).__name__) from e

        body = response.text
        if response.is_error:
            raise UpstreamError(
                f"Generation provider returned HTTP {response.status_code}: {body}",
                status_code=response.status_code,
            )

        text = self.extract_text(body)
        if text is None:
            logger.warning("Unexpected provider response shape, returning raw body")
            return body
        return text

    def extract_text(self, body: str) -> str | None:
        """Pull the answer text out of a Responses API body.

        Args:
            body: Raw response body

        Returns:
            ``output[output_index].content[0].text`` stripped of surrounding
            whitespace, or None if the body is not JSON or the path is absent
        """
        try:
            data: Any = json.loads(body)
        except ValueError:
            return None

        try:
            text = data["output"][self._output_index]["content"][0]["text"]
        except (KeyError, IndexError, TypeError):
            return None

        if not isinstance(text, str):
            return None
        return text.strip()

    async def is_available(self) -> bool:
        """Check if the provider has a credential configured.

        Returns:
            True if an API key is set, False otherwise
        """
        return bool(self._api_key)

    async def close(self) -> None:
        """Close the async HTTP client.

        Should be called when shutting down the application.
        """
        if self._client is not None:
            await self._client.aclose()
            self._client = None
