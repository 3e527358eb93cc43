# student_hub/services/gemini_client.py
import base64
import logging
from typing import Any, Dict, List, Optional, Tuple

import httpx

from student_hub.config import settings
from student_hub.core.exceptions import ExternalServiceError

logger = logging.getLogger(__name__)

# (raw bytes, mime type)
ImageAttachment = Tuple[bytes, str]


class GeminiClient:
    """Thin async client for the Gemini ``generateContent`` endpoint"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        *,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None
    ):
        self.api_key = api_key or settings.GEMINI_API_KEY
        self.model = model or settings.GEMINI_MODEL
        self.url = f"{base_url or settings.GEMINI_BASE_URL}/{self.model}:generateContent"
        self._client = http_client or httpx.AsyncClient(timeout=settings.GEMINI_TIMEOUT_SECONDS)

    async def generate(
        self,
        prompt: str,
        *,
        image: Optional[ImageAttachment] = None,
        web_search: bool = False,
        response_schema: Optional[Dict[str, Any]] = None
    ) -> str:
        """
        Send a prompt and return the concatenated text of the first candidate.

        ``response_schema`` requests structured JSON output. Gemini does not
        combine structured output with the search tool, so web-search calls
        always come back as free text.
        """
        if not self.api_key:
            raise ExternalServiceError("GEMINI_API_KEY is not configured")

        parts: List[Dict[str, Any]] = [{"text": prompt}]
        if image is not None:
            data, mime_type = image
            parts.append({
                "inlineData": {
                    "mimeType": mime_type,
                    "data": base64.b64encode(data).decode("ascii")
                }
            })

        payload: Dict[str, Any] = {"contents": [{"parts": parts}]}
        if web_search:
            payload["tools"] = [{"google_search": {}}]
        elif response_schema is not None:
            payload["generationConfig"] = {
                "responseMimeType": "application/json",
                "responseSchema": response_schema
            }

        try:
            r = await self._client.post(
                self.url,
                headers={"x-goog-api-key": self.api_key},
                json=payload
            )
            r.raise_for_status()
        except httpx.HTTPStatusError as http_err:
            logger.error(f"Gemini returned {http_err.response.status_code}: {http_err.response.text[:200]}")
            raise ExternalServiceError(
                f"AI service error: {http_err.response.status_code} {http_err.response.reason_phrase}"
            ) from http_err
        except httpx.RequestError as net_err:
            logger.error(f"Gemini request failed: {net_err}")
            raise ExternalServiceError("AI service is unreachable, please try again") from net_err

        try:
            data = r.json()
            candidate_parts = data["candidates"][0]["content"]["parts"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise ExternalServiceError("AI service returned an unexpected response") from e

        text = "".join(part.get("text", "") for part in candidate_parts)
        if not text.strip():
            raise ExternalServiceError("AI did not return any content")
        return text

    async def aclose(self):
        await self._client.aclose()
