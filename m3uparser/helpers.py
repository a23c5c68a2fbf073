"""Small helpers shared by the playlist parser."""

from __future__ import annotations

import re
import string
import urllib.error
import urllib.request
from urllib.parse import urlsplit

_SCHEME_CHARS = frozenset(string.ascii_letters + string.digits + "+-.")


def get_by_regex(pattern: str | re.Pattern[str], content: str) -> str:
    """Return the first capture group of ``pattern`` in ``content``, or ``""``."""
    match = re.search(pattern, content)
    if match is None:
        return ""
    return match.group(1) or ""


def _has_control_chars(text: str) -> bool:
    return any(ord(ch) < 0x20 or ord(ch) == 0x7F for ch in text)


def _valid_scheme(scheme: str) -> bool:
    return bool(scheme) and scheme[0].isascii() and scheme[0].isalpha() and all(
        ch in _SCHEME_CHARS for ch in scheme
    )


def _valid_port(netloc: str) -> bool:
    hostport = netloc.rpartition("@")[2]
    if hostport.startswith("["):
        closing = hostport.find("]")
        if closing < 0:
            return False
        rest = hostport[closing + 1 :]
        if not rest:
            return True
        if not rest.startswith(":"):
            return False
        port = rest[1:]
    elif ":" in hostport:
        port = hostport.rpartition(":")[2]
    else:
        return True
    return port == "" or (port.isascii() and port.isdigit())


def is_valid_url(candidate: str) -> bool:
    """Tell whether ``candidate`` is an absolute URL with a scheme and a host."""
    if not candidate or _has_control_chars(candidate):
        return False
    scheme, sep, _ = candidate.partition(":")
    if not sep or not _valid_scheme(scheme):
        return False
    try:
        parts = urlsplit(candidate)
    except ValueError:
        return False
    if not parts.scheme or not parts.netloc:
        return False
    if any(ch.isspace() for ch in parts.netloc):
        return False
    return _valid_port(parts.netloc)


def fetch(url: str, user_agent: str, timeout: float) -> int:
    """Issue a GET request to ``url`` and return the HTTP status code.

    A response with an error status still counts as a response; only a
    failure to reach the server (or a malformed URL) raises.
    """
    request = urllib.request.Request(
        url, method="GET", headers={"User-Agent": user_agent}
    )
    try:
        with urllib.request.urlopen(request, timeout=timeout) as response:
            return response.status
    except urllib.error.HTTPError as exc:
        exc.close()
        return exc.code