"""Client for the upstream OpenAI-compatible chat-completion API."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx
import openai
from openai import AsyncOpenAI
from openai.types.chat import ChatCompletion

from .config import Settings, get_settings
from .errors import AuthError, RateLimitError, UpstreamError

logger = logging.getLogger(__name__)


class CompletionClient:
    """Thin wrapper around ``chat.completions.create`` with error classification.

    Retries are disabled; every failure is surfaced exactly once.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        settings = settings or get_settings()
        self._base_url = settings.upstream_base_url.rstrip("/")
        self._model = settings.model_id
        self._temperature = settings.temperature
        self._max_tokens = settings.max_tokens
        self._timeout = settings.upstream_timeout
        self._http_client = http_client

    async def complete(self, messages: List[Dict[str, str]], api_key: str) -> Optional[str]:
        client = AsyncOpenAI(
            base_url=self._base_url,
            api_key=api_key,
            timeout=self._timeout,
            max_retries=0,
            http_client=self._http_client,
        )
        try:
            response = await client.chat.completions.create(
                model=self._model,
                messages=messages,
                temperature=self._temperature,
                max_tokens=self._max_tokens,
            )
        except openai.AuthenticationError as exc:
            logger.error("Upstream rejected credential: %s", _describe(exc))
            raise AuthError() from exc
        except openai.RateLimitError as exc:
            logger.warning("Upstream rate limit hit: %s", _describe(exc))
            raise RateLimitError() from exc
        except openai.APIError as exc:
            detail = _describe(exc)
            logger.error("Error calling AI API: %s", detail)
            raise UpstreamError(details=detail) from exc
        except ValueError as exc:
            # body declared JSON but did not decode
            logger.error("Malformed upstream response: %s", exc)
            raise UpstreamError(details=f"Malformed upstream response: {exc}") from exc
        finally:
            if self._http_client is None:
                await client.close()
        return _first_content(response)


def _first_content(response: Any) -> Optional[str]:
    # non-JSON bodies come back from the SDK as plain text, JSON arrays as lists
    if not isinstance(response, ChatCompletion):
        logger.error("Malformed upstream response: %s", type(response).__name__)
        raise UpstreamError(details="Malformed upstream response")
    choices = getattr(response, "choices", None)
    if choices is None:
        return None
    if not isinstance(choices, list):
        logger.error("Malformed upstream response: choices is %s", type(choices).__name__)
        raise UpstreamError(details="Malformed upstream response")
    if not choices:
        return None
    message = getattr(choices[0], "message", None)
    content = getattr(message, "content", None)
    if not isinstance(content, str):
        return None
    return content


def _describe(exc: openai.APIError) -> str:
    status_code = getattr(exc, "status_code", None)
    if status_code is not None:
        return f"status {status_code}: {exc.message}"
    return exc.message or exc.__class__.__name__
