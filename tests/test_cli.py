import json
import urllib.error
from unittest import mock

from m3uparser.cli import main
from m3uparser.parser import M3uParser

PLAYLIST = """#EXTM3U
#EXTINF:-1 tvg-id="b.np" group-title="Sports",Beta
http://example.com/beta.m3u8
#EXTINF:-1 tvg-id="a.np" group-title="News",Alpha
http://example.com/alpha.m3u8
#EXTINF:-1 tvg-id="c.np" group-title="Movies",Gamma
http://bad.example.com/gamma.m3u8
"""


class _Response:
    status = 200

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


def _write_playlist(tmp_path):
    path = tmp_path / "list.m3u"
    path.write_text(PLAYLIST, encoding="utf-8")
    return path


def test_saves_json_and_m3u(tmp_path, capsys):
    source = _write_playlist(tmp_path)
    json_out = tmp_path / "out.json"
    m3u_out = tmp_path / "out.m3u"
    status = main([str(source), "-o", str(json_out), "-o", str(m3u_out)])
    assert status == 0
    assert "Saved stream information:  3" in capsys.readouterr().out
    saved = json.loads(json_out.read_text(encoding="utf-8"))
    categories = [s["category"] for s in saved]
    assert categories == sorted(categories)
    reparsed = M3uParser()
    reparsed.parse_m3u(str(m3u_out))
    assert reparsed.get_streams() == saved


def test_sort_descending_by_title(tmp_path):
    source = _write_playlist(tmp_path)
    json_out = tmp_path / "out.json"
    assert main([str(source), "--sort-by", "title", "--desc", "-o", str(json_out)]) == 0
    titles = [s["title"] for s in json.loads(json_out.read_text(encoding="utf-8"))]
    assert titles == sorted(titles, reverse=True)


def test_check_live_keeps_only_good_streams(tmp_path):
    source = _write_playlist(tmp_path)
    json_out = tmp_path / "out.json"

    def opener(request, timeout=None):
        if "bad" in request.full_url:
            raise urllib.error.URLError("unreachable")
        return _Response()

    with mock.patch("urllib.request.urlopen", side_effect=opener):
        assert main([str(source), "--check-live", "-o", str(json_out)]) == 0
    saved = json.loads(json_out.read_text(encoding="utf-8"))
    assert {s["url"] for s in saved} == {
        "http://example.com/beta.m3u8",
        "http://example.com/alpha.m3u8",
    }
    assert all(s["status"] == "GOOD" for s in saved)


def test_missing_file_reports_error(tmp_path, capsys):
    status = main([str(tmp_path / "missing.m3u")])
    assert status == 1
    assert "m3uparser:" in capsys.readouterr().err