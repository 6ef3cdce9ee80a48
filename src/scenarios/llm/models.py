"""Chat completion request and response shapes (OpenAI wire format)."""

from typing import Any

from pydantic import BaseModel, Field
from typing_extensions import TypedDict


class ResponseFormat(TypedDict, total=False):
    type: str  # "json_object" or "text"


class CompletionRequest(BaseModel):
    """One chat completion call.

    ``system`` is sent as a leading system message rather than a top-level
    field, which is what OpenAI-compatible servers expect.
    """

    model: str
    messages: list[dict[str, str]]
    temperature: float = 0.0
    max_tokens: int | None = None
    system: str | None = None
    response_format: ResponseFormat | None = None

    def to_payload(self) -> dict[str, Any]:
        """JSON body for ``POST /chat/completions``."""
        messages = list(self.messages)
        if self.system:
            messages.insert(0, {"role": "system", "content": self.system})

        payload: dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": self.temperature,
        }
        if self.max_tokens:
            payload["max_tokens"] = self.max_tokens
        if self.response_format:
            payload["response_format"] = dict(self.response_format)
        return payload


class CompletionResponse(BaseModel):
    """Parsed completion body; only the first choice is ever read."""

    id: str = ""
    model: str
    choices: list[dict[str, Any]] = Field(default_factory=list)
    usage: dict[str, Any] = Field(default_factory=dict)

    @property
    def content(self) -> str:
        """Text of the first choice, ``""`` when the server sent null.

        Raises:
            IndexError: If the response has no choices
            KeyError: If the first choice has no message content
        """
        if not self.choices:
            raise IndexError("Completion response has no choices")
        content = self.choices[0]["message"]["content"]
        return "" if content is None else str(content)
