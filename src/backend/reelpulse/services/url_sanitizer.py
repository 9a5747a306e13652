from __future__ import annotations

import html
import re
from urllib.parse import unquote, urlsplit, urlunsplit

ALLOWED_DOMAINS = (
    "tiktok.com",
    "vm.tiktok.com",
    "instagram.com",
    "youtube.com",
    "m.youtube.com",
    "youtu.be",
)

HTML_TAG_PATTERN = re.compile(r"<[^>]+>")
CONTROL_CHAR_PATTERN = re.compile(r"[\x00-\x1f\x7f]")


class UnsafeUrlError(ValueError):
    """Submitted URL is malformed, not HTTPS, or points outside the supported platforms."""


def _host_allowed(hostname: str) -> bool:
    return any(hostname == domain or hostname.endswith("." + domain) for domain in ALLOWED_DOMAINS)


def sanitize_url(url: str) -> str:
    """Return a normalized HTTPS URL on a supported video platform or raise ``UnsafeUrlError``."""
    if not isinstance(url, str) or not url.strip():
        raise UnsafeUrlError("Invalid URL: empty value")

    decoded = html.unescape(unquote(url.strip()))
    cleaned = CONTROL_CHAR_PATTERN.sub("", HTML_TAG_PATTERN.sub("", decoded)).strip()

    try:
        parts = urlsplit(cleaned)
        hostname = (parts.hostname or "").lower()
        port = parts.port
    except ValueError as exc:
        raise UnsafeUrlError(f"Invalid URL: {exc}") from exc

    if parts.scheme.lower() != "https":
        raise UnsafeUrlError("Invalid URL: only HTTPS URLs are allowed")
    if not hostname:
        raise UnsafeUrlError("Invalid URL: missing host")
    if not _host_allowed(hostname):
        raise UnsafeUrlError(f"Invalid URL: domain not allowed: {hostname}")

    netloc = hostname if port in (None, 443) else f"{hostname}:{port}"
    return urlunsplit(("https", netloc, parts.path or "/", parts.query, parts.fragment))
