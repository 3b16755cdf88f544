"""Read concept records from a local file or a URL.

Two formats are understood: NDJSON (one JSON object per line) and plain
JSON (an array of objects or a single object). With ``fmt="auto"`` the
format is taken from the file extension, or for URLs from the content
type when the extension says nothing.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable, Iterator
from urllib.parse import urlparse

import requests

from ConceptSearch.core.models import Record
from ConceptSearch.sources.client import RecordHttpClient
from ConceptSearch.utils.log import log

_NDJSON_SUFFIXES = {".ndjson", ".jsonl", ".jsonld-stream"}
_JSON_SUFFIXES = {".json", ".jsonld"}
_NDJSON_CONTENT_TYPES = {"application/x-ndjson", "application/ndjson", "application/jsonl"}


class RecordSourceError(RuntimeError):
    """Raised when the record source cannot be read or decoded."""


def is_url(source: str) -> bool:
    """Return whether ``source`` is an http(s) URL."""
    return urlparse(source).scheme in {"http", "https"}


def read_records(
    source: str,
    *,
    fmt: str = "auto",
    timeout: float = 60.0,
    client: RecordHttpClient | None = None,
) -> Iterator[Record]:
    """Yield records from a file path or URL.

    Records are produced lazily: an NDJSON source is never held in memory
    as a whole.

    Args:
        source: Local path or http(s) URL.
        fmt: ``auto``, ``ndjson`` or ``json``.
        timeout: HTTP timeout in seconds for URL sources.
        client: Optional HTTP client; one is created and closed otherwise.

    Yields:
        Decoded JSON values, normally mappings.

    Raises:
        RecordSourceError: If the source cannot be opened, fetched, or decoded.
    """
    if is_url(source):
        own_client = client is None
        http = client or RecordHttpClient(timeout=timeout)
        try:
            yield from _read_url(http, source, fmt)
        finally:
            if own_client:
                http.close()
        return
    yield from _read_file(Path(source), fmt)


def detect_format(name: str, content_type: str = "") -> str:
    """Guess ``ndjson`` or ``json`` from a file name and content type."""
    suffix = Path(urlparse(name).path).suffix.lower()
    if suffix in _NDJSON_SUFFIXES:
        return "ndjson"
    if suffix in _JSON_SUFFIXES:
        return "json"
    mime = content_type.split(";", 1)[0].strip().lower()
    if mime in _NDJSON_CONTENT_TYPES:
        return "ndjson"
    return "json"


def _read_file(path: Path, fmt: str) -> Iterator[Record]:
    resolved = detect_format(path.name) if fmt == "auto" else fmt
    log.debug("Reading records: path=%s format=%s", path, resolved)
    try:
        with path.open("r", encoding="utf-8") as handle:
            if resolved == "ndjson":
                yield from _decode_lines(handle, str(path))
            else:
                yield from _iter_document(_load_json(handle.read(), str(path)))
    except OSError as e:
        raise RecordSourceError(f"Cannot read {path}: {e}") from e


def _read_url(client: RecordHttpClient, url: str, fmt: str) -> Iterator[Record]:
    try:
        resp = client.get(url)
    except requests.exceptions.RequestException as e:
        raise RecordSourceError(f"Cannot fetch {url}: {e}") from e
    try:
        resolved = detect_format(url, resp.headers.get("Content-Type", "")) if fmt == "auto" else fmt
        log.debug("Reading records: url=%s format=%s", url, resolved)
        try:
            if resolved == "ndjson":
                yield from _decode_lines(resp.iter_lines(decode_unicode=True), url)
            else:
                yield from _iter_document(_load_json(resp.text, url))
        except requests.exceptions.RequestException as e:
            raise RecordSourceError(f"Reading {url} failed: {e}") from e
    finally:
        resp.close()


def _decode_lines(lines: Iterable[str | bytes], origin: str) -> Iterator[Any]:
    for lineno, line in enumerate(lines, start=1):
        if isinstance(line, bytes):
            line = line.decode("utf-8")
        line = line.strip()
        if not line:
            continue
        try:
            yield json.loads(line)
        except json.JSONDecodeError as e:
            raise RecordSourceError(f"Invalid JSON in {origin} at line {lineno}: {e.msg}") from e


def _load_json(text: str, origin: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise RecordSourceError(f"Invalid JSON in {origin}: {e.msg} (line {e.lineno})") from e


def _iter_document(data: Any) -> Iterator[Any]:
    if isinstance(data, list):
        yield from data
    else:
        yield data
