from __future__ import annotations

import logging
import re
from typing import Iterable

import httpx

LOGGER = logging.getLogger(__name__)

ALLOWED_SCHEMES = {"http", "https"}

# Checked against the encoded host: IDNA names are punycode there; percent escapes and IPv6 zone ids do not pass.
_HOST_RE = re.compile(r"^[0-9a-z._:-]+$")


def parse_url(raw: str) -> str:
    """Normalize a user-supplied URL, prepending ``http://`` when no scheme is given."""

    value = raw.strip()
    if not value:
        raise ValueError("empty url")
    if value.startswith("//"):
        value = "http:" + value
    elif "://" not in value:
        value = "http://" + value

    try:
        parsed = httpx.URL(value)
    except httpx.InvalidURL as exc:
        raise ValueError(str(exc)) from exc

    if parsed.scheme not in ALLOWED_SCHEMES:
        raise ValueError(f"unsupported scheme {parsed.scheme!r}")
    host = parsed.raw_host.decode("ascii").lower()
    if not host:
        raise ValueError("missing host")
    if not _HOST_RE.match(host):
        raise ValueError(f"invalid host {parsed.host!r}")

    normalized = str(parsed)
    if normalized.endswith("/"):
        normalized = normalized[:-1]
    return normalized


def parse_urls(raws: Iterable[str]) -> list[str]:
    raws = list(raws)
    if not raws:
        raise ValueError("no url provided")

    urls: list[str] = []
    for raw in raws:
        try:
            urls.append(parse_url(raw))
        except ValueError as exc:
            LOGGER.warning("%s is invalid (%s)", raw, exc)

    if not urls:
        raise ValueError("no valid url provided")
    return urls
