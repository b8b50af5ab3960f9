"""
Anthropic LLM client for short business-text generation.

Usage:
    client = LLMClient()
    response = client.generate(
        [{"role": "user", "content": "Draft a payment reminder for ..."}],
        max_tokens=300,
    )
    print(response.content)
"""

import logging
from typing import Any

import anthropic
from pydantic import BaseModel

from clients.vault_client import get_llm_config

logger = logging.getLogger(__name__)


# === Response Types ===


class LLMResponse(BaseModel):
    """Non-streaming response."""

    content: str
    raw_response: dict[str, Any] | None = None
    usage: dict[str, int] | None = None


# === Errors ===


class LLMError(Exception):
    """LLM operation error."""


# === Client ===


class LLMClient:
    """Anthropic API client."""

    DEFAULT_MODEL = "claude-haiku-4-5"

    def __init__(self, api_key: str | None = None, model: str | None = None):
        """
        Initialize Anthropic client.

        Args:
            api_key: Anthropic API key. If None, fetched from Vault.
            model: Model name. If None, uses Vault's model_name or DEFAULT_MODEL.

        Raises:
            ValueError: If no API key could be found
        """
        if api_key is None:
            config = get_llm_config()
            api_key = config["api_key"]
            model = model or config.get("model_name") or None

        if not api_key:
            raise ValueError("api_key is required")

        self.model = model or self.DEFAULT_MODEL
        self._client = anthropic.Anthropic(api_key=api_key)
        logger.info(f"LLM client initialized with model: {self.model}")

    def generate(
        self,
        messages: list[dict],
        temperature: float = 0.7,
        max_tokens: int = 512,
        model: str | None = None,
    ) -> LLMResponse:
        """
        Single-shot text generation.

        Args:
            messages: [{"role": "system"|"user"|"assistant", "content": str}]
            temperature: Sampling temperature (0-1)
            max_tokens: Maximum output tokens
            model: Override model for this call

        Returns:
            LLMResponse with content, raw_response, and usage stats

        Raises:
            LLMError: If API call fails or returns no text
        """
        system_prompt, api_messages = self._prepare_messages(messages)

        try:
            params = {
                "model": model or self.model,
                "messages": api_messages,
                "max_tokens": max_tokens,
                "temperature": temperature,
            }
            if system_prompt:
                params["system"] = system_prompt

            response = self._client.messages.create(**params)
        except anthropic.APIError as e:
            logger.error(f"Anthropic API error: {e}")
            raise LLMError(f"LLM API call failed: {e}")

        content = self._extract_text(response)
        if not content.strip():
            raise LLMError("LLM returned an empty response")

        return LLMResponse(
            content=content,
            raw_response={"id": response.id, "model": response.model},
            usage=self._extract_usage(response),
        )

    # === Private ===

    def _prepare_messages(
        self, messages: list[dict]
    ) -> tuple[str | None, list[dict]]:
        """Extract system prompt and prepare for Anthropic API."""
        system_content = None
        api_messages = []

        for msg in messages:
            if msg["role"] == "system":
                system_content = msg["content"]
            else:
                api_messages.append(msg)

        return system_content, api_messages

    def _extract_text(self, response) -> str:
        """Extract text content from response."""
        return "".join(b.text for b in response.content if b.type == "text")

    def _extract_usage(self, response) -> dict[str, int] | None:
        """Extract token usage from response."""
        if not response.usage:
            return None
        return {
            "input_tokens": response.usage.input_tokens,
            "output_tokens": response.usage.output_tokens,
        }
