"""Block-level parsing of markline documents."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from .config import MarklineConfig, validate_config
from .constants import (
    BREAK_LINES,
    COMMENT_MARKER,
    DEFAULT_EMBEDDED_MARKER,
    KEY_VALUE_MIN_SPACES,
    KEY_VALUE_SEPARATOR,
    LIST_MARKERS,
    QUOTE_MARKERS,
    SETEXT_UNDERLINES,
)
from .exceptions import LineTooLongError
from .filesystem import collect_file_stat, enforce_file_size, get_max_file_size, safe_read
from .inline import InlineRewriter
from .log import get_logger
from .models import BlockStatus, BreakKind, KeyValue, ListItem, ParserContext
from .renderers import HtmlRenderer, Renderer, get_renderer

logger = get_logger(__name__)

Rewrite = Callable[[str], str]


def _emit(ctx: ParserContext, fragment: str | None) -> None:
    if fragment:
        ctx.output.append(fragment)


def flush(ctx: ParserContext, renderer: Renderer) -> None:
    """Hand the open block to its renderer callback and clear the buffer.

    The status is left untouched; callers set the next status themselves.

    Args:
        ctx: Parser context holding the open block.
        renderer: Callbacks receiving the buffered construct.

    Examples:
        ctx = ParserContext(status=BlockStatus.LIST, buffer=[ListItem("-", "a")])
        flush(ctx, HtmlRenderer())  # ctx.output == ["<ul><li>a</li></ul>"]
    """
    status = ctx.status
    if status is BlockStatus.EMBEDDED:
        _emit(ctx, renderer.on_embedded(ctx.command, list(ctx.buffer)))
    elif status is BlockStatus.LIST:
        _emit(ctx, renderer.on_list(list(ctx.buffer)))
    elif status is BlockStatus.KEYVALUE:
        _emit(ctx, renderer.on_key_value(list(ctx.buffer)))
    elif status is BlockStatus.PARAGRAPH:
        _emit(ctx, renderer.on_paragraph(ctx.command, list(ctx.buffer)))

    if status is not BlockStatus.EMPTY:
        logger.debug("Flushed %s block with %d item(s)", status.name, len(ctx.buffer))

    ctx.buffer = []
    ctx.command = ""


def _open(ctx: ParserContext, status: BlockStatus, renderer: Renderer) -> None:
    """Switch to `status`, flushing first unless that block is already open."""
    if ctx.status is not status:
        flush(ctx, renderer)
        ctx.status = status


def _close(ctx: ParserContext, renderer: Renderer) -> None:
    flush(ctx, renderer)
    ctx.status = BlockStatus.EMPTY


def _try_embedded(ctx: ParserContext, line: str, fence: str, renderer: Renderer) -> bool:
    """Open, fill, or close a verbatim embedded block.

    Args:
        ctx: Parser context to update.
        line: Current line.
        fence: Marker opening (followed by a space and a tag) and closing
            (alone on its line) the block.
        renderer: Callbacks used when a block is flushed.

    Returns:
        bool: True when the line belongs to an embedded block.

    Examples:
        _try_embedded(ParserContext(), "=== js", "===", HtmlRenderer())  # True
    """
    if ctx.status is BlockStatus.EMBEDDED:
        if line.rstrip() == fence:
            _close(ctx, renderer)
        else:
            ctx.buffer.append(line)
        return True

    opener = fence + " "
    if not line.startswith(opener):
        return False

    _open(ctx, BlockStatus.EMBEDDED, renderer)
    ctx.command = line[len(opener) :]
    return True


def _try_break(ctx: ParserContext, line: str, renderer: Renderer) -> bool:
    """Close the open block on an empty line or a horizontal rule.

    Examples:
        _try_break(ParserContext(), "---", HtmlRenderer())  # True
    """
    if line not in BREAK_LINES:
        return False

    _close(ctx, renderer)
    _emit(ctx, renderer.on_break(BreakKind.LINE if line == "" else BreakKind.RULE))
    return True


def _try_list(ctx: ParserContext, line: str, rewrite: Rewrite, renderer: Renderer) -> bool:
    """Collect a list item written as ``-``, ``+`` or ``x`` followed by a space.

    Examples:
        _try_list(ParserContext(), "- item", str, HtmlRenderer())  # True
    """
    if len(line) < 2 or line[0] not in LIST_MARKERS or line[1] != " ":
        return False

    _open(ctx, BlockStatus.LIST, renderer)
    ctx.buffer.append(ListItem(marker=line[0], value=rewrite(line[2:].strip())))
    return True


def _is_key_indented(key: str) -> bool:
    """Return True when `key` holds a tab or a run of at least three spaces."""
    spaces = 0
    for character in key:
        if character == "\t":
            return True
        if character == " ":
            spaces += 1
            if spaces >= KEY_VALUE_MIN_SPACES:
                return True
        else:
            spaces = 0
    return False


def _try_key_value(
    ctx: ParserContext, line: str, rewrite: Rewrite, renderer: Renderer
) -> bool:
    """Collect a ``key   : value`` definition entry.

    The text before the first ``:`` must contain a tab or three consecutive
    spaces.

    Examples:
        _try_key_value(ParserContext(), "name    : value", str, HtmlRenderer())  # True
        _try_key_value(ParserContext(), "name: value", str, HtmlRenderer())  # False
    """
    key, separator, value = line.partition(KEY_VALUE_SEPARATOR)
    if not separator or not _is_key_indented(key):
        return False

    _open(ctx, BlockStatus.KEYVALUE, renderer)
    ctx.buffer.append(KeyValue(key=rewrite(key.strip()), value=rewrite(value.strip())))
    return True


def _paragraph_marker(line: str) -> str | None:
    if line[:1] in QUOTE_MARKERS and line[1:2] == " ":
        return line[0]
    if line.startswith(COMMENT_MARKER + " "):
        return COMMENT_MARKER
    return None


def _try_paragraph(
    ctx: ParserContext, line: str, rewrite: Rewrite, renderer: Renderer
) -> bool:
    """Collect a quote (``> ``, ``| ``) or comment (``// ``) paragraph line.

    A change of marker closes the previous paragraph.

    Examples:
        _try_paragraph(ParserContext(), "> quoted", str, HtmlRenderer())  # True
    """
    marker = _paragraph_marker(line)
    if marker is None:
        return False

    if ctx.status is BlockStatus.PARAGRAPH and ctx.command != marker:
        flush(ctx, renderer)
    _open(ctx, BlockStatus.PARAGRAPH, renderer)
    ctx.command = marker
    ctx.buffer.append(rewrite(line[len(marker) :].strip()))
    return True


def _setext_marker(line: str, next_line: str | None) -> str | None:
    if not line or not line[0].isupper() or not next_line:
        return None

    underline = next_line[0]
    if underline not in SETEXT_UNDERLINES or next_line.strip(underline):
        return None
    if len(next_line) != len(line):
        return None
    return SETEXT_UNDERLINES[underline]


def _try_title(
    ctx: ParserContext,
    line: str,
    next_line: str | None,
    rewrite: Rewrite,
    renderer: Renderer,
) -> bool:
    """Emit an ATX (``## Title``) or Setext (underlined) heading.

    For a Setext heading the underline is marked to be skipped.

    Args:
        ctx: Parser context to update.
        line: Current line.
        next_line: Following line, or None at the end of the document.
        rewrite: Inline rewriting applied to the heading text.
        renderer: Callbacks receiving the heading.

    Returns:
        bool: True when a heading was emitted.

    Examples:
        _try_title(ParserContext(), "# Title", None, str, HtmlRenderer())  # True
        _try_title(ParserContext(), "Title", "=====", str, HtmlRenderer())  # True
    """
    if line.startswith("#"):
        marker, space, text = line.partition(" ")
        if not space:
            return False
    else:
        marker = _setext_marker(line, next_line)
        if marker is None:
            return False
        text = line
        ctx.skip = True

    _close(ctx, renderer)
    _emit(ctx, renderer.on_title(marker, rewrite(text)))
    return True


def convert(
    content: str,
    renderer: Renderer | None = None,
    embedded_marker: str = DEFAULT_EMBEDDED_MARKER,
    keywords: bool = False,
) -> str:
    """Convert a markline document into output markup.

    Each line is offered to the detectors in a fixed order: embedded fence,
    break, list, key-value, paragraph, title. The first that matches claims
    the line; otherwise the line is inline-processed and passed to
    ``on_line``. Malformed input never raises; exceptions raised by renderer
    callbacks propagate.

    Args:
        content: The whole document.
        renderer: Callbacks producing output fragments. Defaults to a new
            `HtmlRenderer`.
        embedded_marker: Fence marker for verbatim embedded blocks. Not
            validated; an empty marker makes every line starting with a space
            open a block.
        keywords: Whether ``[...]`` and ``{...}`` spans go through ``on_keyword``.

    Returns:
        str: Concatenated fragments in document order.

    Examples:
        convert("# Title\\n- a\\n- b")  # "<h1>Title</h1><ul><li>a</li><li>b</li></ul>"
    """
    renderer = renderer if renderer is not None else HtmlRenderer()
    rewrite = InlineRewriter(renderer, keywords=keywords).rewrite
    lines = content.split("\n") if content else []
    ctx = ParserContext()

    for index, line in enumerate(lines):
        if ctx.skip:
            ctx.skip = False
            continue

        if _try_embedded(ctx, line, embedded_marker, renderer):
            continue

        if _try_break(ctx, line, renderer):
            continue

        if _try_list(ctx, line, rewrite, renderer):
            continue

        if _try_key_value(ctx, line, rewrite, renderer):
            continue

        if _try_paragraph(ctx, line, rewrite, renderer):
            continue

        next_line = lines[index + 1] if index + 1 < len(lines) else None
        if _try_title(ctx, line, next_line, rewrite, renderer):
            continue

        _close(ctx, renderer)
        _emit(ctx, renderer.on_line(rewrite(line)))

    if ctx.status is BlockStatus.EMBEDDED:
        logger.debug("Embedded block %r still open at end of document", ctx.command)
    _close(ctx, renderer)

    return "".join(ctx.output)


class Markdown:
    """Reusable converter bound to a renderer and a fence marker.

    Args:
        renderer: Callbacks producing output fragments. Defaults to a new
            `HtmlRenderer`.
        embedded_marker: Fence marker for verbatim embedded blocks.
        keywords: Whether ``[...]`` and ``{...}`` spans go through ``on_keyword``.

    Examples:
        md = Markdown()
        md.load("> quoted\\n> lines")  # '<p class="quote">quoted<br />lines</p>'
    """

    def __init__(
        self,
        renderer: Renderer | None = None,
        embedded_marker: str = DEFAULT_EMBEDDED_MARKER,
        keywords: bool = False,
    ):
        self.renderer = renderer if renderer is not None else HtmlRenderer()
        self.embedded_marker = embedded_marker
        self.keywords = keywords

    @classmethod
    def from_config(cls, config: MarklineConfig, renderer: Renderer | None = None) -> Markdown:
        """Build a converter from configuration, using its named renderer by default."""
        return cls(
            renderer=renderer if renderer is not None else get_renderer(config.renderer),
            embedded_marker=config.embedded_marker,
            keywords=config.keywords,
        )

    def load(self, text: str, document_id: object = None) -> str:
        """Convert `text`; `document_id` is accepted for caller bookkeeping and ignored."""
        return convert(
            text,
            renderer=self.renderer,
            embedded_marker=self.embedded_marker,
            keywords=self.keywords,
        )

    def parse_inline(self, text: str) -> str:
        """Apply inline rewriting to a single fragment."""
        return InlineRewriter(self.renderer, keywords=self.keywords).rewrite(text)

    def parse_keywords(self, text: str) -> str:
        """Render only the keyword spans of `text`."""
        return InlineRewriter(self.renderer).keywords(text)


class ConvertFileError(Exception):
    """Raised when converting a markline file fails."""


def _check_line_lengths(content: str, max_line_length: int) -> None:
    for line_number, line in enumerate(content.split("\n"), start=1):
        if len(line.rstrip("\r")) > max_line_length:
            raise LineTooLongError(line_number, max_line_length)


def convert_file(
    filepath: Path,
    config: MarklineConfig | None = None,
    renderer: Renderer | None = None,
) -> str:
    """Read and convert a markline file.

    Args:
        filepath: Path to the document.
        config: Configuration controlling conversion and limits; defaults to a
            new `MarklineConfig` when omitted.
        renderer: Overrides the renderer named in the configuration.

    Returns:
        str: The converted output.

    Raises:
        ConvertFileError: If configuration is invalid, the file is too large,
            cannot be read or decoded, or holds a line exceeding the limit.

    Examples:
        html = convert_file(Path("notes.md"), MarklineConfig(keywords=True))
    """
    config = config or MarklineConfig()
    try:
        validate_config(config)
        max_file_size = get_max_file_size(default=config.max_file_size)
    except ValueError as error:
        raise ConvertFileError(str(error)) from error

    try:
        enforce_file_size(collect_file_stat(filepath), max_file_size, filepath)
        with safe_read(filepath) as file:
            content = file.read()
    except UnicodeDecodeError as error:
        error_message = f"Invalid UTF-8 sequence in {filepath}: {error}"
        raise ConvertFileError(error_message) from error
    except IOError as error:
        raise ConvertFileError(str(error)) from error

    try:
        _check_line_lengths(content, config.max_line_length)
    except LineTooLongError as error:
        error_message = (
            f"{filepath} contains a line at line {error.line_number} "
            f"exceeding the maximum allowed length of {error.max_line_length} characters."
        )
        raise ConvertFileError(error_message) from error
    logger.debug("Converting %s with the %s renderer", filepath, config.renderer)
    return Markdown.from_config(config, renderer=renderer).load(content, document_id=str(filepath))
