"""Anthropic Claude text generation used for listing copy."""

import logging
from typing import Any, Optional, Protocol

import anthropic

logger = logging.getLogger(__name__)


class GenerationError(RuntimeError):
    """Raised when the generation service returns no usable text."""


class TextGenerator(Protocol):
    def generate(self, prompt: str, max_tokens: int) -> str:
        ...


class AnthropicTextGenerator:
    """Single-prompt completion against the Anthropic Messages API."""

    def __init__(self, api_key: str, model: str, client: Optional[Any] = None) -> None:
        if client is None:
            if not api_key:
                raise ValueError("ANTHROPIC_API_KEY is required for content generation")
            client = anthropic.Anthropic(api_key=api_key)
        self._client = client
        self.model = model

    def generate(self, prompt: str, max_tokens: int) -> str:
        logger.debug("Sending prompt to Anthropic API (%s, max_tokens=%d)", self.model, max_tokens)
        message = self._client.messages.create(
            model=self.model,
            max_tokens=max_tokens,
            messages=[{"role": "user", "content": prompt}],
        )
        for block in message.content or []:
            text = getattr(block, "text", None)
            if text:
                return text
        raise GenerationError("Anthropic response contained no text block")
