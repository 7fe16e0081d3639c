"""HTTP client for the read-only remote origin."""

from __future__ import annotations

import time

import requests
from loguru import logger
from pydantic import TypeAdapter, ValidationError

from .errors import RemoteFetchError, StoreParseError
from .models import Collection

USER_AGENT = "folio/0.1"

_RECORDS = TypeAdapter(list[Collection])


class RemoteOriginClient:
    """Fetches the published collection document from the remote origin."""

    def __init__(
        self,
        timeout: float = 10.0,
        max_retries: int = 1,
        retry_delay: float = 1.0,
        session: requests.Session | None = None,
    ):
        self.timeout = timeout
        self.max_retries = max(1, max_retries)
        self.retry_delay = retry_delay
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": USER_AGENT})

    def fetch(self, url: str) -> list[Collection]:
        """Download and validate the JSON array published at ``url``.

        Raises:
            RemoteFetchError: the origin could not be reached or returned a
                non-success status on every attempt.
            StoreParseError: the body is not a JSON array of collections.
        """
        response = self._get(url)
        logger.info("Remote projects data size: {} bytes", len(response.content))
        try:
            records = _RECORDS.validate_json(response.content)
        except ValidationError as exc:
            logger.error("Remote projects data structure is incorrect: {}", exc)
            raise StoreParseError(f"Remote document at {url} is not a collection list") from exc
        logger.info("Loaded {} records from remote origin {}", len(records), url)
        return records

    def _get(self, url: str) -> requests.Response:
        last_error: requests.RequestException | None = None
        for attempt in range(1, self.max_retries + 1):
            try:
                response = self.session.get(url, timeout=self.timeout)
                response.raise_for_status()
                return response
            except requests.RequestException as exc:
                last_error = exc
                logger.warning(
                    "Remote request failed (attempt {}/{}): {}",
                    attempt,
                    self.max_retries,
                    exc,
                )
                if attempt < self.max_retries:
                    time.sleep(self.retry_delay)
        raise RemoteFetchError(f"Failed to fetch {url}: {last_error}") from last_error


__all__ = ["RemoteOriginClient", "USER_AGENT"]
