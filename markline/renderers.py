"""Renderer callbacks mapping parsed constructs to output fragments.

A renderer has one method per construct. Returning ``None`` marks the
callback as absent: block constructs then contribute nothing to the output
and inline constructs keep their source text unchanged.

Replace any subset of behaviors by subclassing and overriding methods:

    class PlainLinks(HtmlRenderer):
        def on_link(self, text, url):
            return text

    Markdown(renderer=PlainLinks()).load("see <example.com>")
"""

from __future__ import annotations

from collections.abc import Sequence

from .constants import DEFAULT_SCHEME
from .models import BreakKind, KeyValue, ListItem


class Renderer:
    """Renderer with every callback absent."""

    def on_title(self, marker: str, text: str) -> str | None:
        return None

    def on_paragraph(self, command: str, lines: Sequence[str]) -> str | None:
        return None

    def on_list(self, items: Sequence[ListItem]) -> str | None:
        return None

    def on_key_value(self, entries: Sequence[KeyValue]) -> str | None:
        return None

    def on_embedded(self, command: str, lines: Sequence[str]) -> str | None:
        return None

    def on_break(self, kind: BreakKind) -> str | None:
        return None

    def on_line(self, line: str) -> str | None:
        return None

    def on_link(self, text: str, url: str) -> str | None:
        return None

    def on_image(self, alt: str, src: str, width: int, height: int, url: str) -> str | None:
        return None

    def on_format(self, kind: str, text: str) -> str | None:
        return None

    def on_keyword(self, kind: str, text: str) -> str | None:
        return None


class HtmlRenderer(Renderer):
    """Default renderer producing HTML fragments.

    Text is emitted as-is; no escaping is performed.
    """

    HEADING_TAGS = {
        "#": "h1",
        "##": "h2",
        "###": "h3",
        "####": "h4",
        "#####": "h5",
    }
    PARAGRAPH_CLASSES = {">": "quote", "|": "quote", "//": "comment"}
    FORMAT_TAGS = {"**": "em", "*": "i", "__": "strong", "_": "b"}

    def on_title(self, marker, text):
        tag = self.HEADING_TAGS.get(marker)
        if tag is None:
            return f"{marker} {text}"
        return f"<{tag}>{text}</{tag}>"

    def on_paragraph(self, command, lines):
        css_class = self.PARAGRAPH_CLASSES.get(command, "")
        return f'<p class="{css_class}">' + "<br />".join(lines) + "</p>"

    def on_list(self, items):
        return "<ul>" + "".join(f"<li>{item.value}</li>" for item in items) + "</ul>"

    def on_key_value(self, entries):
        body = "".join(f"<dt>{entry.key}</dt><dd>{entry.value}</dd>" for entry in entries)
        return f"<dl>{body}</dl>"

    def on_embedded(self, command, lines):
        return "<pre>" + "\n".join(lines) + "</pre>"

    def on_break(self, kind):
        if kind is BreakKind.RULE:
            return "<hr />"
        return "<br />"

    def on_line(self, line):
        return f'<p class="line">{line}</p>'

    def on_link(self, text, url):
        return f'<a href="{url}">{text}</a>'

    def on_image(self, alt, src, width, height, url):
        tag = f'<img src="{src}"'
        if width:
            tag += f' width="{width}"'
        if height:
            tag += f' height="{height}"'
        tag += f' alt="{alt}" border="0" />'
        if url:
            return f'<a href="{url}">{tag}</a>'
        return tag

    def on_format(self, kind, text):
        tag = self.FORMAT_TAGS.get(kind)
        if tag is None:
            return text
        return f"<{tag}>{text}</{tag}>"

    def on_keyword(self, kind, text):
        return f"<span>{text}</span>"


class TextRenderer(Renderer):
    """Renderer producing plain text, one construct per line."""

    def on_title(self, marker, text):
        return f"{text}\n"

    def on_paragraph(self, command, lines):
        return "\n".join(lines) + "\n"

    def on_list(self, items):
        return "".join(f"{item.marker} {item.value}\n" for item in items)

    def on_key_value(self, entries):
        return "".join(f"{entry.key}: {entry.value}\n" for entry in entries)

    def on_embedded(self, command, lines):
        return "".join(f"{line}\n" for line in lines)

    def on_break(self, kind):
        return "\n"

    def on_line(self, line):
        return f"{line}\n"

    def on_link(self, text, url):
        # Autolinks carry the URL as text already
        if url in (text, DEFAULT_SCHEME + text):
            return text
        return f"{text} ({url})"

    def on_image(self, alt, src, width, height, url):
        return alt

    def on_format(self, kind, text):
        return text

    def on_keyword(self, kind, text):
        return text


RENDERERS: dict[str, type[Renderer]] = {
    "html": HtmlRenderer,
    "text": TextRenderer,
}


def get_renderer(name: str) -> Renderer:
    """Instantiate a renderer by its configuration name.

    Args:
        name: Renderer name, ``"html"`` or ``"text"``.

    Returns:
        Renderer: A fresh renderer instance.

    Raises:
        KeyError: If no renderer is registered under `name`.

    Examples:
        get_renderer("text").on_line("hello")  # "hello\\n"
    """
    return RENDERERS[name]()
