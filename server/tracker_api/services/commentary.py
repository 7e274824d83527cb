"""Weekly coach summary via an external text-generation service.

The service receives the structured weekly context and answers with
``{"text": "..."}``. Any failure yields no summary; the weekly review is
still returned.
"""
import logging
from typing import Optional

import httpx

from ..config import get_settings

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a supportive personal time coach. Write a brief weekly reflection "
    "(3-4 sentences max): what went well, what to watch, and one specific, "
    "actionable suggestion for next week. Be warm but direct and use 'you' "
    "language. For reduction goals like less distraction, celebrate decreases "
    "and gently note increases."
)


class CommentaryClient:
    """Thin async client for the text-generation collaborator."""

    def __init__(
        self,
        url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        settings = get_settings()
        self.url = settings.commentary_url if url is None else url
        self.timeout = timeout or settings.commentary_timeout
        self.transport = transport

    @property
    def enabled(self) -> bool:
        return bool(self.url)

    async def generate(self, context: dict) -> Optional[str]:
        """Return the generated reflection, or None if unavailable."""
        if not self.enabled:
            return None

        try:
            async with httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout), transport=self.transport
            ) as client:
                response = await client.post(
                    self.url,
                    json={"system": SYSTEM_PROMPT, "context": context},
                )
                response.raise_for_status()
                payload = response.json()
        except httpx.TimeoutException:
            logger.warning("Commentary request timed out")
            return None
        except httpx.HTTPError as e:
            logger.warning(f"Commentary request failed: {e}")
            return None
        except ValueError as e:
            logger.warning(f"Commentary response was not JSON: {e}")
            return None

        text = payload.get("text") if isinstance(payload, dict) else None
        if not isinstance(text, str) or not text.strip():
            logger.warning("Commentary response had no text")
            return None
        return text.strip()


def get_commentary_client() -> CommentaryClient:
    """FastAPI dependency returning a client built from settings."""
    return CommentaryClient()
