"""Inline rewriting of links, images, emphasis, autolinks and keywords."""

from __future__ import annotations

from operator import attrgetter

from .constants import (
    ANGLE_LINK_PATTERN,
    AUTOLINK_PATTERN,
    DEFAULT_SCHEME,
    FORMAT_PATTERN,
    IMAGE_PATTERN,
    KEYWORD_PATTERN,
    LINK_PATTERN,
    LINK_TRAILING_PUNCTUATION,
    SCHEME_PATTERN,
    WRAPPED_IMAGE_PATTERN,
    WWW_PATTERN,
)
from .models import Substitution
from .renderers import Renderer


def normalize_url(url: str) -> str:
    """Prefix `url` with ``http://`` unless it already has a scheme.

    Args:
        url: URL as written in the document.

    Returns:
        str: URL suitable for an ``href`` attribute.

    Examples:
        normalize_url("www.example.com")  # "http://www.example.com"
        normalize_url("https://example.com")  # unchanged
        normalize_url("/docs/index.html")  # "http:///docs/index.html"
    """
    if SCHEME_PATTERN.match(url):
        return url
    return DEFAULT_SCHEME + url


class SubstitutionTable:
    """Replacements claimed over one fragment of text.

    Every pass matches against the untouched source text and records the
    replacement for the matched span. A span already claimed can never be
    matched again, so generated markup is never rewritten twice. Spans never
    overlap; `render` writes them into the text in a single pass.

    Attributes:
        text: The source fragment.
    """

    def __init__(self, text: str):
        self.text = text
        self._spans: list[Substitution] = []

    def __len__(self) -> int:
        return len(self._spans)

    def is_free(self, start: int, end: int) -> bool:
        """Return True when no claimed span intersects ``text[start:end]``."""
        return all(span.end <= start or span.start >= end for span in self._spans)

    def encloses(self, start: int, end: int, inner_start: int, inner_end: int) -> bool:
        """Return True when every span intersecting ``text[start:end]`` lies
        entirely within ``text[inner_start:inner_end]``."""
        return all(
            span.end <= start
            or span.start >= end
            or (inner_start <= span.start and span.end <= inner_end)
            for span in self._spans
        )

    def claim(self, start: int, end: int, value: str, absorb: bool = False) -> bool:
        """Record `value` as the replacement of ``text[start:end]``.

        Args:
            start: Start of the span (inclusive).
            end: End of the span (exclusive).
            value: Replacement text.
            absorb: When True, spans lying inside the new one are dropped
                instead of rejecting the claim. The caller is expected to have
                folded them into `value`.

        Returns:
            bool: True when the span was recorded.
        """
        if absorb:
            if not self.encloses(start, end, start, end):
                return False
            self._spans = [span for span in self._spans if span.end <= start or span.start >= end]
        elif not self.is_free(start, end):
            return False

        self._spans.append(Substitution(start, end, value))
        return True

    def render(self, start: int = 0, end: int | None = None) -> str:
        """Return ``text[start:end]`` with every span inside it replaced."""
        if end is None:
            end = len(self.text)

        parts = []
        cursor = start
        for span in sorted(self._spans, key=attrgetter("start")):
            if span.start < start or span.end > end:
                continue
            parts.append(self.text[cursor : span.start])
            parts.append(span.value)
            cursor = span.end
        parts.append(self.text[cursor:end])
        return "".join(parts)


class InlineRewriter:
    """Rewrite inline markup of a single fragment through renderer callbacks.

    Passes run in a fixed order: angle-bracket links, images, links, emphasis,
    bare autolinks and, when enabled, keywords. An inline callback returning
    None leaves the matched source text in place.

    Args:
        renderer: Callbacks producing the replacement fragments.
        keywords: Whether `rewrite` also renders ``[...]`` and ``{...}`` spans.

    Examples:
        InlineRewriter(HtmlRenderer()).rewrite("[Google](www.google.com)")
    """

    def __init__(self, renderer: Renderer, keywords: bool = False):
        self.renderer = renderer
        self.render_keywords = keywords

    def rewrite(self, text: str) -> str:
        """Run every inline pass over `text` and return the rendered result."""
        table = SubstitutionTable(text)
        self._angle_links(table)
        self._images(table)
        self._links(table)
        self._emphasis(table)
        self._autolinks(table)
        if self.render_keywords:
            self._keywords(table)
        return table.render()

    def format_text(self, text: str) -> str:
        """Render only the emphasis spans of `text`."""
        table = SubstitutionTable(text)
        self._emphasis(table)
        return table.render()

    def keywords(self, text: str) -> str:
        """Render only the ``[...]`` and ``{...}`` keyword spans of `text`."""
        table = SubstitutionTable(text)
        self._keywords(table)
        return table.render()

    def _link(self, text: str, url: str) -> str | None:
        return self.renderer.on_link(text, normalize_url(url))

    def _angle_links(self, table: SubstitutionTable) -> None:
        for match in ANGLE_LINK_PATTERN.finditer(table.text):
            url = match.group("url")
            value = self._link(url, url)
            if value is not None:
                table.claim(match.start(), match.end(), value)

    def _images(self, table: SubstitutionTable) -> None:
        # Wrapped images first so the outer brackets are never taken for a link
        for pattern in (WRAPPED_IMAGE_PATTERN, IMAGE_PATTERN):
            for match in pattern.finditer(table.text):
                if not table.is_free(match.start(), match.end()):
                    continue
                url = match.group("url")
                value = self.renderer.on_image(
                    match.group("alt").strip(),
                    match.group("src"),
                    int(match.group("width") or 0),
                    int(match.group("height") or 0),
                    normalize_url(url) if url else "",
                )
                if value is not None:
                    table.claim(match.start(), match.end(), value)

    def _links(self, table: SubstitutionTable) -> None:
        for match in LINK_PATTERN.finditer(table.text):
            if not table.is_free(match.start(), match.end()):
                continue
            raw_url = match.group("url") or match.group("reference")
            url = raw_url.rstrip(LINK_TRAILING_PUNCTUATION)
            if not url:
                continue
            label = self.format_text(match.group("text").strip())
            value = self._link(label, url)
            if value is not None:
                # Punctuation trailing the URL stays after the anchor
                table.claim(match.start(), match.end(), value + raw_url[len(url) :])

    def _emphasis(self, table: SubstitutionTable) -> None:
        for match in FORMAT_PATTERN.finditer(table.text):
            if match.group("stars"):
                kind = match.group("stars")
                group = "starred"
            else:
                kind = "_" if len(match.group("underscores")) == 1 else "__"
                group = "underlined"

            inner_start, inner_end = match.span(group)
            if not table.encloses(match.start(), match.end(), inner_start, inner_end):
                continue
            value = self.renderer.on_format(kind, table.render(inner_start, inner_end))
            if value is not None:
                table.claim(match.start(), match.end(), value, absorb=True)

    def _autolinks(self, table: SubstitutionTable) -> None:
        for pattern in (AUTOLINK_PATTERN, WWW_PATTERN):
            for match in pattern.finditer(table.text):
                if not table.is_free(match.start(), match.end()):
                    continue
                token = match.group()
                value = self._link(token, token)
                if value is not None:
                    table.claim(match.start(), match.end(), value)

    def _keywords(self, table: SubstitutionTable) -> None:
        for match in KEYWORD_PATTERN.finditer(table.text):
            if not table.is_free(match.start(), match.end()):
                continue
            if match.group("bracket") is not None:
                kind, text = "[]", match.group("bracket")
            else:
                kind, text = "{}", match.group("brace")
            value = self.renderer.on_keyword(kind, text)
            if value is not None:
                table.claim(match.start(), match.end(), value)
