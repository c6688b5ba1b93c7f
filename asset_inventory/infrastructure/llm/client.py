"""Hosted LLM client for the advisory chat"""
import logging
from typing import Optional

import httpx

from asset_inventory.infrastructure.config.settings import settings

logger = logging.getLogger(__name__)


class LLMError(Exception):
    """The hosted model could not produce an answer"""


class GeminiClient:
    """Calls the Gemini generateContent REST endpoint"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        api_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.LLM_API_KEY
        self.model = model or settings.LLM_MODEL
        self.api_url = (api_url or settings.LLM_API_URL).rstrip("/")
        self.timeout = timeout or settings.LLM_TIMEOUT_SECONDS
        self.transport = transport

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    async def generate(self, prompt: str) -> str:
        """Send a single prompt and return the model's text"""
        if not self.enabled:
            raise LLMError("LLM API key not configured")

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(
                    f"{self.api_url}/models/{self.model}:generateContent",
                    params={"key": self.api_key},
                    json={"contents": [{"role": "user", "parts": [{"text": prompt}]}]},
                )
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPError as e:
            raise LLMError(f"LLM request failed: {e}") from e
        except ValueError as e:
            raise LLMError("LLM returned a non-JSON body") from e

        try:
            parts = data["candidates"][0]["content"]["parts"]
        except (KeyError, IndexError, TypeError) as e:
            raise LLMError("LLM response had no candidates") from e
        text = "".join(part.get("text", "") for part in parts if isinstance(part, dict))
        if not text.strip():
            raise LLMError("LLM returned an empty answer")
        return text
