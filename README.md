# m3uparser

Read M3U playlists of IPTV streams into plain Python dictionaries, then
filter, sort, sample and save them as M3U or JSON. Only the standard
library is used.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Use as a library

```python
from m3uparser.parser import M3uParser

parser = M3uParser(user_agent="Mozilla/5.0", timeout=5)

# The source may be a URL, a local file path, or raw M3U text.
parser.parse_m3u("playlist.m3u", check_live=False, enforce_schema=True)

parser.filter_by("category", ["news"], retrieve=True)
parser.sort_by("title", asc=True)

streams = parser.get_streams()       # list of dicts
text = parser.get_streams_json()     # compact JSON string
one = parser.get_random_stream(shuffle=True)

parser.to_file("out.m3u")
parser.to_file("out.json")
```

`M3uParser(user_agent=None, timeout=5)` uses a desktop browser User-Agent
when none is given, and a timeout of 5 seconds when the timeout is 0.

### Sources

`parse_m3u(source, check_live=False, enforce_schema=False)` treats the
source as raw M3U text when it starts with `#EXTM3U`, is blank, or contains
a newline; otherwise as a URL when it is an absolute URL with a scheme and a
host; otherwise as a path to a local file. A file that cannot be read or a
URL that cannot be fetched raises `OSError`.

Each `#EXTINF` line is paired with a stream link on the same line or the one
after it: either a URL, or something that looks like a local file path.
Entries without a link are skipped.

### Streams

Each stream is a dictionary with keys such as `title`, `logo`, `category`,
`language`, `url`, a nested `tvg` dictionary (`id`, `name`, `url`) and a
nested `country` dictionary (`code`, `name`). When `enforce_schema` is false,
fields with empty values are left out.

With `check_live=True` every stream URL is requested with a GET request in a
thread pool, and each stream gets a `status` of `"GOOD"` (any HTTP response,
error statuses included) or `"BAD"` (no response). Local file entries are
always `"GOOD"`.

### Filtering and sorting

Keys can be plain (`"category"`) or nested with one dash (`"tvg-id"`,
`"country-code"`); keys with more than one dash are ignored with a warning.
Filters match case-insensitively on substrings.

- `filter_by(key, filters, retrieve=True)` keeps (`retrieve=True`) or drops
  (`retrieve=False`) streams matching any filter word. Streams without the
  key are dropped either way; an empty filter list changes nothing.
- `retrieve_by_extension([...])` / `remove_by_extension([...])` filter on the URL.
- `retrieve_by_category([...])` / `remove_by_category([...])` filter on the category.
- `sort_by(key, asc=True)` sorts by a plain or nested key, provided the first
  stream has that key.
- `reset_operations()` goes back to the streams as first parsed.

### Saving

`to_file(filename)` picks the format from the part of the name after the
first dot:

- `json`: indented JSON with sorted keys, empty strings written as `null`;
- `m3u`: an `#EXTM3U` playlist rebuilt from the stream fields.

Any other name is not saved, and nothing is saved when there are no streams.

### Helpers

`m3uparser.helpers` offers `get_by_regex(pattern, content)`,
`is_valid_url(candidate)` and `fetch(url, user_agent, timeout)` (returns the
HTTP status code). Country names come from
`m3uparser.countries.country_name(code)`, which returns `""` for unknown codes.

## Command line

```
m3uparser SOURCE [--user-agent UA] [--timeout SECONDS] [--check-live]
          [--enforce-schema] [--sort-by KEY] [--desc] [-o FILE ...]
```

The command parses the playlist, keeps only the `GOOD` streams when
`--check-live` is given, sorts by `--sort-by` (default `category`,
descending with `--desc`), prints the number of streams, and writes them to
each `-o`/`--output` file (`.json` or `.m3u`; the option may be repeated).
It exits with status 1 when the source or an output file cannot be read or
written.