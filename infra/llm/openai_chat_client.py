"""OpenAI-compatible chat completion client.

Uses ``urllib.request`` for HTTP calls (no external HTTP library needed).
The blocking request runs in a worker thread so the event loop stays free
while the model answers.
"""

from __future__ import annotations

import asyncio
import json
import urllib.error
import urllib.request
from typing import Any


class LLMRequestError(RuntimeError):
    """The chat completion endpoint returned an error or an unusable body."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class OpenAIChatClient:
    """Implements ``LLMClientPort`` using the OpenAI chat/completions API."""

    def __init__(
        self,
        *,
        api_key: str,
        base_url: str = "https://api.openai.com/v1",
        model: str = "gpt-4o-mini",
        timeout: int = 30,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._model = model
        self._timeout = timeout

    async def complete(
        self,
        prompt: str,
        *,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> str:
        payload: dict[str, Any] = {
            "model": self._model,
            "messages": [{"role": "user", "content": prompt}],
        }
        if max_tokens is not None:
            payload["max_tokens"] = max_tokens
        if temperature is not None:
            payload["temperature"] = temperature

        data = await asyncio.to_thread(self._post_chat_completions, payload)
        return self._extract_content(data)

    # -- internal helpers ---------------------------------------------------

    def _post_chat_completions(self, payload: dict[str, Any]) -> dict[str, Any]:
        url = f"{self._base_url}/chat/completions"
        body = json.dumps(payload).encode("utf-8")
        req = urllib.request.Request(url, data=body, method="POST")
        req.add_header("Authorization", f"Bearer {self._api_key}")
        req.add_header("Content-Type", "application/json")
        try:
            with urllib.request.urlopen(req, timeout=self._timeout) as resp:
                return json.loads(resp.read().decode("utf-8"))
        except urllib.error.HTTPError as exc:
            raise LLMRequestError(
                f"chat completion failed: {exc.code} {exc.reason}",
                status=exc.code,
            ) from exc

    @staticmethod
    def _extract_content(data: dict[str, Any]) -> str:
        try:
            message = data["choices"][0]["message"]
        except (KeyError, IndexError, TypeError) as exc:
            raise LLMRequestError(f"unexpected chat completion body: {data!r}") from exc
        return message.get("content") or ""
