"""Parsing, filtering, sorting and saving of M3U playlists."""

from __future__ import annotations

import http.client
import json
import logging
import os
import random
import re
import urllib.request
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any, Iterator

from .countries import country_name
from .helpers import fetch, get_by_regex, is_valid_url

logger = logging.getLogger(__name__)

Channel = dict[str, Any]

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/86.0.4240.198 Safari/537.36"
)
DEFAULT_TIMEOUT = 5

_FILE_RE = re.compile(
    r"^[a-zA-Z]:\\((?:.*?\\)*).*.[\d\w]{3,5}$|^(/[^/]*)+/?.[\d\w]{3,5}$",
    re.MULTILINE | re.ASCII,
)
_TVG_NAME_RE = re.compile(r'tvg-name="(.*?)"')
_TVG_ID_RE = re.compile(r'tvg-id="(.*?)"')
_TVG_URL_RE = re.compile(r'tvg-url="(.*?)"')
_LOGO_RE = re.compile(r'tvg-logo="(.*?)"')
_CATEGORY_RE = re.compile(r'group-title="(.*?)"')
_TITLE_RE = re.compile(r"[,](.*?)$")
_COUNTRY_RE = re.compile(r'tvg-country="(.*?)"')
_LANGUAGE_RE = re.compile(r'tvg-language="(.*?)"')

_HTML_ESCAPES = {
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}


def _escape_html(text: str) -> str:
    for raw, escaped in _HTML_ESCAPES.items():
        text = text.replace(raw, escaped)
    return text


def _as_str(value: Any) -> str:
    return value if isinstance(value, str) else ""


class M3uParser:
    """A parser for M3U playlists holding the parsed stream information."""

    def __init__(self, user_agent: str | None = None, timeout: int = DEFAULT_TIMEOUT):
        self.user_agent = user_agent or DEFAULT_USER_AGENT
        self.timeout = timeout or DEFAULT_TIMEOUT
        self.check_live = False
        self.enforce_schema = False
        self._streams: list[Channel] = []
        self._backup: list[Channel] = []

    # ----------------------------------------------------------------- parsing

    def parse_m3u(
        self, source: str, check_live: bool = False, enforce_schema: bool = False
    ) -> None:
        """Parse a playlist from a URL, a local file path or raw M3U content.

        With ``check_live`` every stream URL is requested and marked with a
        ``status`` of ``GOOD`` or ``BAD``. With ``enforce_schema`` empty fields
        are kept instead of dropped.
        """
        self.check_live = check_live
        self.enforce_schema = enforce_schema
        content = self._load(source)
        lines = [line.strip() for line in content.split("\n") if line.strip()]
        if lines:
            streams = self._parse_lines(lines)
        else:
            logger.info("No content to parse!!!")
            streams = []
        self._streams = streams
        self._backup = list(streams)

    def _load(self, source: str) -> str:
        trimmed = source.strip()
        if trimmed.startswith("#EXTM3U") or not trimmed or "\n" in source:
            logger.info("Started parsing m3u from raw content...")
            return source
        if is_valid_url(source):
            logger.info("Started parsing m3u URL...")
            request = urllib.request.Request(
                source, headers={"User-Agent": self.user_agent}
            )
            with urllib.request.urlopen(request, timeout=self.timeout) as response:
                return response.read().decode("utf-8", errors="replace")
        logger.info("Started parsing m3u file...")
        return Path(source).read_text(encoding="utf-8", errors="replace")

    def _parse_lines(self, lines: list[str]) -> list[Channel]:
        streams: list[Channel] = []
        pending: list[tuple[Channel, str]] = []
        for number, line in enumerate(lines):
            if "#EXTINF" not in line:
                continue
            parsed = self._parse_entry(line, lines[number : number + 2])
            if parsed is None:
                continue
            channel, link, is_file = parsed
            streams.append(channel)
            if self.check_live and not is_file:
                pending.append((channel, link))
        if pending:
            with ThreadPoolExecutor(max_workers=min(32, len(pending))) as pool:
                statuses = pool.map(self._status_of, [link for _, link in pending])
                for (channel, _), status in zip(pending, statuses):
                    channel["status"] = status
        return streams

    def _parse_entry(
        self, info: str, candidates: list[str]
    ) -> tuple[Channel, str, bool] | None:
        link = ""
        is_file = False
        for candidate in candidates:
            if is_valid_url(candidate):
                link = candidate
                break
            if _FILE_RE.search(candidate):
                link = candidate
                is_file = True
                break
        if not info or not link:
            return None

        keep = self.enforce_schema
        channel: Channel = {}
        if self.check_live and is_file:
            channel["status"] = "GOOD"
        fields = (
            ("title", _TITLE_RE),
            ("logo", _LOGO_RE),
            ("category", _CATEGORY_RE),
            ("language", _LANGUAGE_RE),
        )
        for name, pattern in fields:
            value = get_by_regex(pattern, info)
            if value or keep:
                channel[name] = value
        tvg = {
            "name": get_by_regex(_TVG_NAME_RE, info),
            "id": get_by_regex(_TVG_ID_RE, info),
            "url": get_by_regex(_TVG_URL_RE, info),
        }
        if any(tvg.values()) or keep:
            channel["tvg"] = {k: v for k, v in tvg.items() if v or keep}
        code = get_by_regex(_COUNTRY_RE, info)
        if code or keep:
            channel["country"] = {"code": code, "name": country_name(code)}
        channel["url"] = link
        return channel, link, is_file

    def _status_of(self, url: str) -> str:
        try:
            fetch(url, self.user_agent, self.timeout)
        except (OSError, ValueError, http.client.HTTPException):
            return "BAD"
        return "GOOD"

    # -------------------------------------------------------------- operations

    @staticmethod
    def _split_key(key: str) -> list[str] | None:
        parts = key.split("-")
        if len(parts) > 2:
            logger.warning("Nested key is seperated by multiple key seperator -")
            return None
        return parts

    def filter_by(self, key: str, filters: list[str], retrieve: bool = True) -> None:
        """Keep (``retrieve``) or drop streams whose ``key`` contains any filter word.

        ``key`` may be nested with a dash, e.g. ``tvg-id``. Matching ignores case,
        and streams without the key are dropped either way.
        """
        if not self._streams:
            logger.info("No streams info to filter.")
            return
        if not filters:
            logger.warning("Filter word/s missing!!!")
            return
        parts = self._split_key(key)
        if parts is None:
            return

        def value_of(stream: Channel) -> str | None:
            if len(parts) == 2:
                outer = stream.get(parts[0])
                if isinstance(outer, dict) and parts[1] in outer:
                    return str(outer[parts[1]])
                return None
            if key in stream:
                return str(stream[key])
            return None

        needles = [word.lower() for word in filters]
        kept = []
        for stream in self._streams:
            value = value_of(stream)
            if value is None:
                continue
            hit = any(needle in value.lower() for needle in needles)
            if hit == retrieve:
                kept.append(stream)
        self._streams = kept

    def reset_operations(self) -> None:
        """Restore the streams as they were right after parsing."""
        self._streams = list(self._backup)

    def remove_by_extension(self, extension: list[str]) -> None:
        """Drop streams whose URL contains any of the given extensions."""
        self.filter_by("url", extension, False)

    def retrieve_by_extension(self, extension: list[str]) -> None:
        """Keep only streams whose URL contains any of the given extensions."""
        self.filter_by("url", extension, True)

    def remove_by_category(self, category: list[str]) -> None:
        """Drop streams whose category contains any of the given words."""
        self.filter_by("category", category, False)

    def retrieve_by_category(self, category: list[str]) -> None:
        """Keep only streams whose category contains any of the given words."""
        self.filter_by("category", category, True)

    def sort_by(self, key: str, asc: bool = True) -> None:
        """Sort streams by a single or dash-nested key, if the first stream has it."""
        if not self._streams:
            logger.info("No streams info to sort.")
            return
        parts = self._split_key(key)
        if parts is None:
            return
        first = self._streams[0]
        if len(parts) == 2:
            outer_key, inner_key = parts
            outer = first.get(outer_key)
            if not isinstance(outer, dict) or inner_key not in outer:
                return

            def sort_key(stream: Channel) -> str:
                inner = stream.get(outer_key)
                return _as_str(inner.get(inner_key)) if isinstance(inner, dict) else ""

        else:
            if key not in first:
                return

            def sort_key(stream: Channel) -> str:
                return _as_str(stream.get(key))

        self._streams.sort(key=sort_key, reverse=not asc)

    # ------------------------------------------------------------------ output

    def get_streams(self) -> list[Channel]:
        """Return the current list of stream information."""
        return list(self._streams)

    def get_streams_json(self) -> str:
        """Return the current streams as compact JSON."""
        text = json.dumps(
            self._streams, sort_keys=True, ensure_ascii=False, separators=(",", ":")
        )
        return _escape_html(text)

    def get_random_stream(self, shuffle: bool = False) -> Channel:
        """Return a random stream, shuffling the list first if asked; ``{}`` if none."""
        if not self._streams:
            logger.info("No streams info for random selection.")
            return {}
        if shuffle:
            random.shuffle(self._streams)
        return random.choice(self._streams)

    def _m3u_lines(self) -> Iterator[str]:
        yield "#EXTM3U"
        for stream in self._streams:
            line = "#EXTINF:-1"
            for key, value in (stream.get("tvg") or {}).items():
                if value:
                    line += f' tvg-{key}="{value}"'
            if stream.get("logo"):
                line += f' tvg-logo="{stream["logo"]}"'
            code = (stream.get("country") or {}).get("code")
            if code:
                line += f' tvg-country="{code}"'
            if stream.get("language"):
                line += f' tvg-language="{stream["language"]}"'
            if stream.get("category"):
                line += f' group-title="{stream["category"]}"'
            if stream.get("title"):
                line += f',{stream["title"]}'
            yield line
            yield stream["url"]

    def to_file(self, filename: str | os.PathLike[str]) -> None:
        """Save the streams as JSON or M3U, chosen by the file name's extension."""
        if not self._streams:
            logger.info("No streams info to save.")
            return
        name = os.fspath(filename)
        parts = name.split(".")
        fmt = parts[1].lower() if len(parts) > 1 else ""
        logger.info("Saving to file: %s", name)
        if fmt == "json":
            text = json.dumps(self._streams, indent=4, sort_keys=True, ensure_ascii=False)
            text = _escape_html(text).replace(': ""', ": null")
            if "json" not in name:
                name += ".json"
            Path(name).write_text(text, encoding="utf-8")
        elif fmt == "m3u":
            Path(name).write_text("\n".join(self._m3u_lines()), encoding="utf-8")
        else:
            logger.info("File extension not present/supported !!!")