"""
HTTP wrapper for OpenAI-compatible /v1/chat/completions endpoints.

Used by the chat classifier backend. The default base URL points at a
server on localhost, so user text stays on the machine unless configured
otherwise.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import requests

from .config import ModelConfig

logger = logging.getLogger(__name__)


class ChatAPIError(Exception):
    """Raised when the chat endpoint returns an error."""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        super().__init__(f"Chat API error {status_code}: {message}")


@dataclass
class ChatClient:
    """
    Minimal client for an OpenAI-compatible chat completion endpoint.

    Retries transient failures (timeouts, connection errors, 5xx) with
    exponential backoff; client errors (4xx) fail immediately.
    """

    base_url: str
    model: str
    api_key: str = ""
    timeout: float = 30.0
    max_retries: int = 2

    @classmethod
    def from_config(cls, config: ModelConfig) -> "ChatClient":
        return cls(
            base_url=config.chat_base_url,
            model=config.chat_model,
            api_key=config.chat_api_key,
            timeout=config.classify_timeout,
        )

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def _do_request(self, url: str, body: Dict[str, Any]) -> str:
        """Make a single chat completion request. Returns content or raises."""
        resp = requests.post(
            url,
            headers=self._headers(),
            json=body,
            timeout=self.timeout,
        )

        if resp.status_code == 200:
            data = resp.json()
            message = data["choices"][0]["message"]
            return message.get("content") or ""

        if resp.status_code == 429:
            retry_after = resp.headers.get("Retry-After", "?")
            raise ChatAPIError(429, f"Rate limited (Retry-After: {retry_after}s)")

        raise ChatAPIError(resp.status_code, resp.text)

    def chat_completion(
        self,
        messages: List[Dict[str, str]],
        temperature: float = 0.1,
        max_tokens: int = 512,
        response_format: Optional[Dict[str, str]] = None,
    ) -> str:
        """
        Call /chat/completions and return the assistant's content.
        Raises ChatAPIError on failure.
        """
        body: Dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        if response_format is not None:
            body["response_format"] = response_format

        url = f"{self.base_url}/chat/completions"

        last_error: Optional[ChatAPIError] = None
        for attempt in range(self.max_retries + 1):
            try:
                return self._do_request(url, body)
            except ChatAPIError as e:
                if 400 <= e.status_code < 500:
                    raise
                last_error = e
            except requests.exceptions.Timeout:
                logger.warning(f"[ChatClient] Request timed out (attempt {attempt + 1}/{self.max_retries + 1})")
                last_error = ChatAPIError(408, "Request timed out")
            except requests.exceptions.ConnectionError as e:
                logger.warning(f"[ChatClient] Connection error: {e}")
                last_error = ChatAPIError(0, f"Connection error: {e}")

            if attempt < self.max_retries:
                time.sleep(2 ** attempt)

        raise last_error  # type: ignore

    def ping(self) -> None:
        """Check the endpoint answers /models. Raises ChatAPIError if not."""
        try:
            resp = requests.get(
                f"{self.base_url}/models", headers=self._headers(), timeout=self.timeout
            )
        except requests.exceptions.RequestException as e:
            raise ChatAPIError(0, f"Connection error: {e}") from e
        if resp.status_code != 200:
            raise ChatAPIError(resp.status_code, resp.text)
