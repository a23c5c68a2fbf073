import re
import threading
import urllib.error
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest

from m3uparser.helpers import fetch, get_by_regex, is_valid_url

LINE = '#EXTINF:-1 tvg-id="CapitalTVHD.np",Capital TV (1080p)'


def test_get_by_regex_title():
    assert get_by_regex(r"[,](.*?)$", LINE) == "Capital TV (1080p)"


def test_get_by_regex_attribute_with_compiled_pattern():
    pattern = re.compile('tvg-id="(.*?)"')
    assert get_by_regex(pattern, LINE) == "CapitalTVHD.np"


def test_get_by_regex_missing_returns_empty():
    assert get_by_regex('tvg-name="(.*?)"', LINE) == ""


@pytest.mark.parametrize(
    "url",
    [
        "https://streaming.tvnepal.com:19360/capitaltv/capitaltv.m3u8",
        "http://live.divyadarshantv.com/hls/stream.m3u8",
        "http://150.107.205.212:1935/live/mithila/playlist.m3u8?DVR=",
    ],
)
def test_valid_urls(url):
    assert is_valid_url(url) is True


@pytest.mark.parametrize(
    "candidate",
    [
        "",
        "np_test.m3u",
        "/home/user/streams/np.m3u",
        "C:\\videos\\clip.mp4",
        "#EXTINF:-1 tvg-id=\"x\",Title",
        "http://",
        "http://host:abc/path",
        "1http://host/path",
        "http://host/pa\tth",
    ],
)
def test_invalid_urls(candidate):
    assert is_valid_url(candidate) is False


class _Handler(BaseHTTPRequestHandler):
    seen_agents: list = []

    def do_GET(self):
        _Handler.seen_agents.append(self.headers.get("User-Agent"))
        self.send_response(200 if self.path == "/" else 404)
        self.send_header("Content-Length", "0")
        self.end_headers()

    def log_message(self, format, *args):
        pass


@pytest.fixture
def server_url():
    _Handler.seen_agents = []
    server = ThreadingHTTPServer(("127.0.0.1", 0), _Handler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield f"http://127.0.0.1:{server.server_address[1]}"
    finally:
        server.shutdown()
        server.server_close()


def test_fetch_ok_and_sends_user_agent(server_url):
    assert fetch(server_url + "/", "agent-under-test", 5) == 200
    assert _Handler.seen_agents == ["agent-under-test"]


def test_fetch_error_status_is_returned(server_url):
    assert fetch(server_url + "/missing", "agent", 5) == 404


def test_fetch_invalid_url_raises():
    with pytest.raises(ValueError):
        fetch("not a url", "agent", 1)


def test_fetch_unreachable_raises():
    with pytest.raises(urllib.error.URLError):
        fetch("http://127.0.0.1:1/", "agent", 1)