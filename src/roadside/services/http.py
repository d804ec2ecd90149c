"""Shared retrying JSON-over-HTTP plumbing for upstream service clients."""

from __future__ import annotations

import logging
import time
from typing import Any

import httpx

from ..config import settings
from ..errors import NetworkError, UpstreamStatusError

logger = logging.getLogger(__name__)


class ServiceClient:
    """Base for the Google and Kakao clients.

    Each request opens its own ``httpx.Client``. Timeouts and connection errors
    are retried with exponential backoff, 5xx answers with linear backoff, and
    4xx answers fail at once.
    """

    service_name = "upstream"

    def __init__(
        self,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_seconds: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.timeout = timeout if timeout is not None else settings.http_timeout_seconds
        self.max_retries = max_retries if max_retries is not None else settings.http_max_retries
        self.backoff_seconds = backoff_seconds if backoff_seconds is not None else settings.http_backoff_seconds
        self.transport = transport

    def _get_client(self) -> httpx.Client:
        return httpx.Client(
            timeout=httpx.Timeout(self.timeout, connect=min(self.timeout, 10.0)),
            transport=self.transport,
        )

    def _request_json(self, method: str, url: str, **kwargs: Any) -> Any:
        client = self._get_client()
        try:
            attempt = 0
            while True:
                try:
                    response = client.request(method, url, **kwargs)
                    response.raise_for_status()
                    return response.json()
                except httpx.HTTPStatusError as e:
                    code = e.response.status_code
                    # 4xx, auth included, never heals on retry.
                    if code < 500:
                        raise UpstreamStatusError(f"HTTP {code}", e.response.text[:200]) from e
                    attempt += 1
                    if attempt > self.max_retries:
                        raise UpstreamStatusError(f"HTTP {code}", e.response.text[:200]) from e
                    time.sleep(self.backoff_seconds * attempt)
                except httpx.TimeoutException as e:
                    attempt += 1
                    if attempt > self.max_retries:
                        logger.warning(f"{self.service_name} request timed out after {attempt} attempts: {e}")
                        raise NetworkError(f"{self.service_name} request timed out: {e}") from e
                    wait_time = self.backoff_seconds * (2 ** (attempt - 1))
                    logger.debug(f"{self.service_name} timeout, retrying in {wait_time:.1f}s (attempt {attempt}/{self.max_retries})")
                    time.sleep(wait_time)
                except httpx.TransportError as e:
                    attempt += 1
                    if attempt > self.max_retries:
                        raise NetworkError(f"Failed to connect to {self.service_name} at {url}: {e}") from e
                    wait_time = self.backoff_seconds * (2 ** (attempt - 1))
                    logger.debug(f"{self.service_name} network error, retrying in {wait_time:.1f}s (attempt {attempt}/{self.max_retries}): {e}")
                    time.sleep(wait_time)
                except ValueError as e:
                    raise UpstreamStatusError("INVALID_RESPONSE", f"Response body is not JSON: {e}") from e
        finally:
            client.close()
