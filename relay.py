"""relay.py – HTTP client for the AI relay endpoint.

The relay is a single URL accepting `POST {"messages": [...], "model"?: str}`
and answering with an OpenAI-shaped completion or some other JSON/text body.
This module knows nothing about sessions, selections or prompts.
"""
from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Dict, List, Optional

import requests
from tenacity import Retrying, retry_if_exception, stop_after_attempt, wait_exponential_jitter

from config import config
from errors import RelayConfigurationError, RelayRequestError

RETRY_DELAY_BASE = 1.0
MAX_RETRY_DELAY = 20.0
RETRYABLE_STATUS = (429, 502, 503, 504)

logger = logging.getLogger(__name__)


def _is_retryable_error(error: BaseException) -> bool:
    if not isinstance(error, RelayRequestError):
        return False
    # transport failures carry no status code
    return error.status_code is None or error.status_code in RETRYABLE_STATUS


def _error_reason(resp: requests.Response) -> str:
    text = resp.text
    try:
        parsed = json.loads(text)
    except ValueError:
        parsed = text
    if isinstance(parsed, dict) and parsed.get("error"):
        error = parsed["error"]
        if isinstance(error, dict):
            return str(error.get("message") or json.dumps(error))
        return str(error)
    if isinstance(parsed, str) and parsed.strip():
        return parsed.strip()
    return resp.reason or json.dumps(parsed)


def extract_content(data: Any) -> str:
    """Assistant text from a relay body: message content, then legacy text, else the body itself."""
    if isinstance(data, dict):
        choices = data.get("choices")
        if isinstance(choices, list) and choices and isinstance(choices[0], dict):
            first = choices[0]
            message = first.get("message")
            if isinstance(message, dict) and message.get("content"):
                return str(message["content"])
            if first.get("text"):
                return str(first["text"])
    if isinstance(data, str):
        return data
    return json.dumps(data, ensure_ascii=False)


class RelayGateway:
    """Thin request/response boundary to the AI backend."""

    def __init__(
        self,
        url: Optional[str] = None,
        timeout: float = config.RELAY_TIMEOUT_S,
        max_retries: int = config.RELAY_MAX_RETRIES,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.url = (url if url is not None else config.RELAY_URL).strip()
        self.timeout = timeout
        self.max_retries = max(0, max_retries)
        self._session = session or requests.Session()

    @property
    def configured(self) -> bool:
        return bool(self.url)

    def ensure_configured(self) -> None:
        if not self.configured:
            raise RelayConfigurationError("RELAY_URL not configured. Set the relay URL to enable the assistant.")

    async def complete(self, messages: List[Dict[str, str]], model: Optional[str] = None) -> str:
        self.ensure_configured()
        payload: Dict[str, Any] = {"messages": messages}
        if model:
            payload["model"] = model
        logger.debug("RelayGateway: posting %d messages model=%s", len(messages), model)
        data = await asyncio.to_thread(self._post_with_retry, payload)
        return extract_content(data)

    # ------------------------------------------------------------------
    # internals
    # ------------------------------------------------------------------

    def _post_with_retry(self, payload: Dict[str, Any]) -> Any:
        retryer = Retrying(
            retry=retry_if_exception(_is_retryable_error),
            stop=stop_after_attempt(self.max_retries + 1),
            wait=wait_exponential_jitter(RETRY_DELAY_BASE, MAX_RETRY_DELAY),
            reraise=True,
        )
        return retryer(self._post, payload)

    def _post(self, payload: Dict[str, Any]) -> Any:
        try:
            resp = self._session.post(self.url, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning("Relay transport error: %s", e)
            raise RelayRequestError(f"Relay request failed: {e}") from e

        if not resp.ok:
            reason = _error_reason(resp)
            logger.warning("Relay returned %s: %s", resp.status_code, reason)
            raise RelayRequestError(reason, status_code=resp.status_code)

        if "application/json" in resp.headers.get("content-type", ""):
            try:
                return resp.json()
            except ValueError:
                return resp.text
        try:
            return json.loads(resp.text)
        except ValueError:
            return resp.text
