"""HTTP client for remote record sources.

Fetches a URL as a streamed response. There are no retries: a failed
request aborts the import.
"""

from __future__ import annotations

import requests

from ConceptSearch.utils.log import log

DEFAULT_TIMEOUT = 60.0

HEADERS = {
    "User-Agent": "concept-search/0.1",
    "Accept": "application/x-ndjson,application/json;q=0.9,*/*;q=0.8",
}


class RecordHttpClient:
    """Low-level HTTP client returning streamed responses.

    Responsible only for making network requests. Decoding records is
    handled by the reader.
    """

    def __init__(self, *, timeout: float = DEFAULT_TIMEOUT) -> None:
        self._timeout = timeout
        self._session = requests.Session()

    def close(self) -> None:
        """Close the underlying HTTP session and release pooled connections."""
        self._session.close()

    def __enter__(self) -> RecordHttpClient:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def get(self, url: str) -> requests.Response:
        """Issue a streamed GET request.

        Args:
            url: Source URL.

        Returns:
            The response, with the body not yet consumed.

        Raises:
            requests.exceptions.RequestException: On connection errors,
                timeouts, and non-2xx status codes.
        """
        log.debug("Fetching records: url=%s timeout=%s", url, self._timeout)
        resp = self._session.get(url, headers=HEADERS, timeout=self._timeout, stream=True)
        resp.raise_for_status()
        if not resp.encoding:
            resp.encoding = "utf-8"
        log.debug(
            "Record source response ok: status=%s content_type=%s",
            resp.status_code,
            resp.headers.get("Content-Type", ""),
        )
        return resp
