"""HTTP client for OpenAI-compatible chat completion endpoints.

Works with OpenAI itself, Ollama, vLLM, LM Studio and anything else serving
``/chat/completions``.
"""

from __future__ import annotations

import asyncio
from typing import Any

import httpx

from scenarios.config import ScenariosSettings, get_logger
from scenarios.exceptions import LLMProviderError
from scenarios.llm.models import CompletionRequest, CompletionResponse

logger = get_logger(__name__)

DEFAULT_MODEL = "gpt-4o-mini"
MAX_CONCURRENT_REQUESTS = 4
ERROR_BODY_LIMIT = 500


class OpenAICompatibleProvider:
    """Sends completion requests with bearer authentication.

    The provider owns its ``httpx.AsyncClient``; close it with ``aclose`` or
    use the provider as an async context manager.
    """

    def __init__(
        self,
        endpoint: str | None = None,
        api_key: str | None = None,
        timeout: float = 60.0,
    ) -> None:
        self.base_url = (endpoint or "").rstrip("/")
        self.api_key = api_key or ""
        self.timeout = timeout
        self.client = httpx.AsyncClient(timeout=httpx.Timeout(timeout))
        self._slots = asyncio.Semaphore(MAX_CONCURRENT_REQUESTS)

    @classmethod
    def from_settings(cls, settings: ScenariosSettings) -> OpenAICompatibleProvider:
        return cls(
            endpoint=settings.llm_endpoint,
            api_key=settings.llm_api_key,
            timeout=settings.llm_timeout,
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.base_url and self.api_key)

    @property
    def completions_url(self) -> str:
        return f"{self.base_url}/chat/completions"

    async def __aenter__(self) -> OpenAICompatibleProvider:
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.client.aclose()

    async def _post(self, payload: dict[str, Any]) -> httpx.Response:
        async with self._slots:
            try:
                return await self.client.post(
                    self.completions_url,
                    headers={"Authorization": f"Bearer {self.api_key}"},
                    json=payload,
                )
            except httpx.HTTPError as e:
                logger.warning(
                    "Completion endpoint unreachable",
                    url=self.completions_url,
                    error=str(e),
                )
                raise LLMProviderError(
                    message=f"Completion endpoint unreachable: {e}",
                    details={"url": self.completions_url},
                ) from e

    async def complete(self, request: CompletionRequest) -> CompletionResponse:
        """Run one chat completion.

        Raises:
            LLMProviderError: When no endpoint is configured, the request
                fails, the server answers with a non-200 status, or the body
                is not a completion
        """
        if not self.is_configured:
            raise LLMProviderError(
                message="LLM endpoint is not configured",
                hint="Set SCENARIOS_LLM_ENDPOINT and SCENARIOS_LLM_API_KEY",
            )

        logger.debug(
            "Requesting completion",
            url=self.completions_url,
            model=request.model,
            messages=len(request.messages),
        )
        response = await self._post(request.to_payload())

        if response.status_code != 200:
            body = response.text[:ERROR_BODY_LIMIT]
            logger.warning(
                "Completion endpoint returned an error",
                status=response.status_code,
                body=body,
            )
            raise LLMProviderError(
                message=f"API error {response.status_code}",
                details={"url": self.completions_url, "body": body},
            )

        try:
            data = response.json()
            result = CompletionResponse(
                id=data.get("id") or "",
                model=data.get("model") or request.model,
                choices=data.get("choices") or [],
                usage=data.get("usage") or {},
            )
        except (ValueError, AttributeError) as e:
            raise LLMProviderError(
                message=f"Invalid API response: {e}",
                details={"url": self.completions_url},
            ) from e

        logger.debug("Completion received", model=result.model, usage=result.usage)
        return result
