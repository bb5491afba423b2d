"""Redaction helpers for backend URLs, forwarded cookies and error text."""

from __future__ import annotations

import re
from typing import Mapping

_URL_USERINFO_RE = re.compile(r"([a-z][a-z0-9+.-]*://)([^@/]+)@", re.IGNORECASE)
_QUERY_SECRET_RE = re.compile(
    r"(?i)\b(token|secret|password|api_key|apikey|access_token|refresh_token|session|sessionid|jwt)=([^&;\s]+)"
)
_BEARER_RE = re.compile(r"(?i)(bearer\s+)([A-Za-z0-9._~-]+)")
_COOKIE_HEADER_RE = re.compile(r"(?i)((?:set-)?cookie:\s*)([^\r\n]+)")
_COOKIE_PAIR_RE = re.compile(r"([^=;\s]+)=([^;]*)")


def redact_secrets(text: str) -> str:
    """Redact credentials in URLs, secret query values, bearer tokens and cookie headers."""
    if not text:
        return text
    redacted = _URL_USERINFO_RE.sub(r"\1***@", text)
    redacted = _COOKIE_HEADER_RE.sub(lambda match: match.group(1) + _mask_cookie_header(match.group(2)), redacted)
    redacted = _QUERY_SECRET_RE.sub(r"\1=***", redacted)
    redacted = _BEARER_RE.sub(r"\1***", redacted)
    return redacted


def _mask_cookie_header(value: str) -> str:
    return _COOKIE_PAIR_RE.sub(r"\1=***", value)


def redact_cookies(cookies: Mapping[str, str] | None) -> str:
    """Render forwarded cookies for logs: names are kept, values never are."""
    if not cookies:
        return "none"
    return ", ".join(f"{name}=***" for name in sorted(cookies))
