"""Chat-completion client that always returns parsed JSON or raises LLMError."""

import json
import logging
import re
import time
from typing import Any

from openai import OpenAI, OpenAIError

from config import LLM_MODEL, OPENAI_API_KEY, OPENAI_BASE_URL

logger = logging.getLogger(__name__)

# Pause between completions to avoid hammering the provider
_MIN_INTERVAL = 1.0


class LLMError(Exception):
    """The model call failed or its content was not usable JSON."""


def extract_json(text: str) -> Any:
    """Extract a JSON object or array from text that may contain prose or markdown."""
    text = text.strip()
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass

    m = re.search(r"```(?:json)?\s*\n(.*?)```", text, re.DOTALL)
    if m:
        try:
            return json.loads(m.group(1).strip())
        except json.JSONDecodeError:
            pass

    for pattern in (r"\{[\s\S]*\}", r"\[[\s\S]*\]"):
        m = re.search(pattern, text)
        if m:
            try:
                return json.loads(m.group(0))
            except json.JSONDecodeError:
                pass

    raise json.JSONDecodeError("No JSON found in response", text, 0)


class LLMClient:
    """Thin wrapper over the OpenAI chat completions API in JSON mode."""

    def __init__(
        self,
        model: str = LLM_MODEL,
        api_key: str | None = None,
        base_url: str | None = None,
        client: OpenAI | None = None,
    ) -> None:
        self.model = model
        self._client = client
        self._api_key = api_key or OPENAI_API_KEY
        self._base_url = base_url or OPENAI_BASE_URL
        self._last_call = 0.0

    @property
    def client(self) -> OpenAI:
        if self._client is None:
            self._client = OpenAI(api_key=self._api_key or None, base_url=self._base_url)
        return self._client

    def _rate_limit(self) -> None:
        elapsed = time.time() - self._last_call
        if elapsed < _MIN_INTERVAL:
            time.sleep(_MIN_INTERVAL - elapsed)
        self._last_call = time.time()

    def complete_json(self, system: str, user: str, max_tokens: int) -> Any:
        """Run one completion and return its content parsed as JSON.

        The result is untrusted: callers validate shape and types themselves.
        """
        self._rate_limit()
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system},
                    {"role": "user", "content": user},
                ],
                response_format={"type": "json_object"},
                max_completion_tokens=max_tokens,
            )
        except OpenAIError as e:
            raise LLMError(f"completion request failed: {e}") from e

        content = response.choices[0].message.content if response.choices else None
        if not content or not content.strip():
            raise LLMError("empty completion")

        try:
            return extract_json(content)
        except json.JSONDecodeError as e:
            raise LLMError(f"completion was not JSON: {e}") from e
