"""Inline place photos as base64 data URIs so a page works offline."""

from __future__ import annotations

import base64
import logging
import re
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Optional, Sequence

import httpx

from ...config import settings
from ...models.domain import Place

logger = logging.getLogger(__name__)

_MAX_WIDTH_PARAM = re.compile(r"maxwidth=\d+")


def thumbnail_url(url: str, width: int) -> str:
    if _MAX_WIDTH_PARAM.search(url):
        return _MAX_WIDTH_PARAM.sub(f"maxwidth={width}", url)
    return url


class PhotoFetcher:
    def __init__(
        self,
        timeout: float | None = None,
        thumbnail_width: int | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.timeout = timeout if timeout is not None else settings.http_timeout_seconds
        self.thumbnail_width = thumbnail_width or settings.photo_thumbnail_width
        self.transport = transport

    def fetch_data_uri(self, url: str) -> Optional[str]:
        """Download a thumbnail of ``url``; ``None`` on any HTTP or network failure."""
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport, follow_redirects=True) as client:
                response = client.get(thumbnail_url(url, self.thumbnail_width))
                response.raise_for_status()
        except httpx.HTTPError as e:
            logger.debug(f"Photo download failed: {type(e).__name__}")
            return None
        content_type = response.headers.get("content-type", "image/jpeg").split(";")[0].strip() or "image/jpeg"
        encoded = base64.b64encode(response.content).decode("ascii")
        return f"data:{content_type};base64,{encoded}"


def embed_photos(
    places: Sequence[Place],
    fetcher: PhotoFetcher | None = None,
    max_workers: int | None = None,
) -> list[Place]:
    """Return copies of ``places`` with photo URLs replaced by data URIs.

    Downloads run in parallel. A failed download leaves that place's URL as it
    was and does not affect the others.
    """
    fetcher = fetcher or PhotoFetcher()
    result = list(places)
    pending = [(index, place.photo_url) for index, place in enumerate(result) if place.photo_url]
    if not pending:
        return result

    workers = max(1, min(max_workers or settings.photo_max_workers, len(pending)))
    embedded = 0
    with ThreadPoolExecutor(max_workers=workers) as executor:
        future_to_index = {executor.submit(fetcher.fetch_data_uri, url): index for index, url in pending}
        for future in as_completed(future_to_index):
            index = future_to_index[future]
            try:
                data_uri = future.result()
            except Exception as e:
                logger.warning(f"Photo embedding failed for place {result[index].id}: {type(e).__name__}")
                continue
            if data_uri:
                result[index] = result[index].evolve(photo_url=data_uri)
                embedded += 1

    logger.info(f"Embedded {embedded}/{len(pending)} photos")
    return result
