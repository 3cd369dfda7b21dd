"""Constants used across the markline package."""

from __future__ import annotations

import re

from .config import MarklineConfig

DEFAULT_CONFIG = MarklineConfig()

DEFAULT_EMBEDDED_MARKER = DEFAULT_CONFIG.embedded_marker

# Block markers
BREAK_LINES = ("", "***", "---")
LIST_MARKERS = ("-", "+", "x")
QUOTE_MARKERS = (">", "|")
COMMENT_MARKER = "//"
# Setext underline character -> heading marker
SETEXT_UNDERLINES = {"=": "#", "-": "##"}
KEY_VALUE_SEPARATOR = ":"
KEY_VALUE_MIN_SPACES = 3

# Inline patterns, applied in this order
ANGLE_LINK_PATTERN = re.compile(r"<(?P<url>[^<>\s]+)>")
WRAPPED_IMAGE_PATTERN = re.compile(
    r"\[!\[(?P<alt>[^\]]+)\]\((?P<src>[^)#\s]+)(?:#(?P<width>\d*)x(?P<height>\d*))?\)\]"
    r"\((?P<url>[^()\s]+)\)"
)
IMAGE_PATTERN = re.compile(
    r"!\[(?P<alt>[^\]]+)\]\((?P<src>[^)#\s]+)(?:#(?P<width>\d*)x(?P<height>\d*))?\)"
    r"(?:\((?P<url>[^()\s]+)\))?"
)
LINK_PATTERN = re.compile(
    r"(?<!!)\[(?P<text>[^\]]+)\](?:\((?P<url>[^()\s]+)\)|:[ \t]*(?P<reference>\S+))"
)
FORMAT_PATTERN = re.compile(
    r"(?P<stars>\*{1,2})(?=\S)(?P<starred>.+?)(?<=\S)(?P=stars)"
    r"|(?<!\w)(?P<underscores>_{1,3})(?=\S)(?P<underlined>.+?)(?<=\S)(?P=underscores)(?!\w)"
)
AUTOLINK_PATTERN = re.compile(
    r"\b(?:https?|ftp|file)://[-A-Z0-9+&@#/%?=~_|!:,.;]*[-A-Z0-9+&@#/%=~_|]", re.IGNORECASE
)
WWW_PATTERN = re.compile(r"(?<![/\w.])www\.[^\s<>]*[\w/]", re.IGNORECASE)
KEYWORD_PATTERN = re.compile(r"\[(?P<bracket>[^\]]+)\]|\{(?P<brace>[^}]+)\}")

# URL policy
SCHEME_PATTERN = re.compile(r"^[a-z][a-z0-9+.\-]*:(?!\d)", re.IGNORECASE)
DEFAULT_SCHEME = "http://"
LINK_TRAILING_PUNCTUATION = ",. "
