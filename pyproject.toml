[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "m3uparser"
version = "0.1.0"
description = "Parse, filter, sort and save M3U playlists of IPTV streams"
requires-python = ">=3.10"
dependencies = []
keywords = ["m3u", "iptv", "playlist", "parser", "streams"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Video",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
m3uparser = "m3uparser.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["m3uparser"]

[tool.pytest.ini_options]
addopts = "-ra"
