import pytest

from markline.models import BlockStatus, KeyValue, ListItem, ParserContext
from markline.parser import (
    _is_key_indented,
    _try_break,
    _try_embedded,
    _try_key_value,
    _try_list,
    _try_paragraph,
    _try_title,
    flush,
)
from markline.renderers import HtmlRenderer

RENDERER = HtmlRenderer()


def test_flush_clears_buffer_and_command_but_keeps_status():
    ctx = ParserContext(status=BlockStatus.PARAGRAPH, command=">", buffer=["a", "b"])

    flush(ctx, RENDERER)

    assert ctx.output == ['<p class="quote">a<br />b</p>']
    assert ctx.buffer == []
    assert ctx.command == ""
    assert ctx.status is BlockStatus.PARAGRAPH


def test_flush_without_open_block_emits_nothing():
    ctx = ParserContext()

    flush(ctx, RENDERER)

    assert ctx.output == []


def test_try_embedded_opens_buffers_and_closes():
    ctx = ParserContext()

    assert _try_embedded(ctx, "=== js", "===", RENDERER) is True
    assert ctx.status is BlockStatus.EMBEDDED
    assert ctx.command == "js"

    assert _try_embedded(ctx, "var link = [a](b);", "===", RENDERER) is True
    assert _try_embedded(ctx, "", "===", RENDERER) is True
    assert ctx.buffer == ["var link = [a](b);", ""]

    assert _try_embedded(ctx, "===", "===", RENDERER) is True
    assert ctx.status is BlockStatus.EMPTY
    assert ctx.output == ["var link = [a](b);\n"]


def test_try_embedded_ignores_bare_fence_outside_block():
    ctx = ParserContext()

    assert _try_embedded(ctx, "===", "===", RENDERER) is False
    assert _try_embedded(ctx, "====", "===", RENDERER) is False
    assert ctx.status is BlockStatus.EMPTY


def test_try_embedded_flushes_open_block():
    ctx = ParserContext(status=BlockStatus.LIST, buffer=[ListItem("-", "a")])

    assert _try_embedded(ctx, "=== sh", "===", RENDERER) is True
    assert ctx.output == ["<ul><li>a</li></ul>"]
    assert ctx.status is BlockStatus.EMBEDDED
    assert ctx.buffer == []


def test_try_embedded_keeps_fence_with_text_inside_block():
    ctx = ParserContext(status=BlockStatus.EMBEDDED, command="md")

    assert _try_embedded(ctx, "=== nested", "===", RENDERER) is True
    assert ctx.status is BlockStatus.EMBEDDED
    assert ctx.buffer == ["=== nested"]


def test_try_embedded_closes_on_fence_with_carriage_return():
    ctx = ParserContext(status=BlockStatus.EMBEDDED, command="js", buffer=["x\r"])

    assert _try_embedded(ctx, "===\r", "===", RENDERER) is True
    assert ctx.status is BlockStatus.EMPTY
    assert ctx.output == ["x\r"]


@pytest.mark.parametrize(
    ("line", "fragment"),
    [("", "<br />"), ("---", "<hr />"), ("***", "<hr />")],
)
def test_try_break_closes_block_and_emits(line, fragment):
    ctx = ParserContext(status=BlockStatus.PARAGRAPH, command="//", buffer=["note"])

    assert _try_break(ctx, line, RENDERER) is True
    assert ctx.output == ['<p class="comment">note</p>', fragment]
    assert ctx.status is BlockStatus.EMPTY
    assert ctx.command == ""


def test_try_break_rejects_other_lines():
    ctx = ParserContext()

    assert _try_break(ctx, " ", RENDERER) is False
    assert _try_break(ctx, "----", RENDERER) is False
    assert ctx.output == []


def test_try_list_accumulates_items():
    ctx = ParserContext()

    assert _try_list(ctx, "-a", str, RENDERER) is False
    assert _try_list(ctx, "- a", str, RENDERER) is True
    assert _try_list(ctx, "+ b", str, RENDERER) is True
    assert _try_list(ctx, "x  c ", str, RENDERER) is True

    assert ctx.status is BlockStatus.LIST
    assert ctx.buffer == [ListItem("-", "a"), ListItem("+", "b"), ListItem("x", "c")]
    assert ctx.output == []


def test_try_list_rejects_other_markers():
    ctx = ParserContext()

    assert _try_list(ctx, "* a", str, RENDERER) is False
    assert _try_list(ctx, "-", str, RENDERER) is False
    assert _try_list(ctx, "", str, RENDERER) is False


@pytest.mark.parametrize(
    ("key", "expected"),
    [
        ("key   ", True),
        ("key    ", True),
        ("\tkey", True),
        ("a   b", True),
        ("key  ", False),
        ("a b c d", False),
        (" a  b  ", False),
        ("", False),
    ],
)
def test_is_key_indented(key, expected):
    assert _is_key_indented(key) is expected


def test_try_key_value_collects_trimmed_entries():
    ctx = ParserContext()

    assert _try_key_value(ctx, "key    : value", str, RENDERER) is True
    assert _try_key_value(ctx, "\tport: 8000 ", str, RENDERER) is True

    assert ctx.status is BlockStatus.KEYVALUE
    assert ctx.buffer == [KeyValue("key", "value"), KeyValue("port", "8000")]


def test_try_key_value_splits_on_first_colon():
    ctx = ParserContext()

    assert _try_key_value(ctx, "url   : http://example.com", str, RENDERER) is True
    assert ctx.buffer == [KeyValue("url", "http://example.com")]


def test_try_key_value_requires_indented_key():
    ctx = ParserContext()

    assert _try_key_value(ctx, "key: value", str, RENDERER) is False
    assert _try_key_value(ctx, "no colon   here", str, RENDERER) is False
    assert ctx.status is BlockStatus.EMPTY


def test_try_paragraph_records_marker():
    ctx = ParserContext()

    assert _try_paragraph(ctx, "> first", str, RENDERER) is True
    assert _try_paragraph(ctx, ">  second ", str, RENDERER) is True

    assert ctx.status is BlockStatus.PARAGRAPH
    assert ctx.command == ">"
    assert ctx.buffer == ["first", "second"]


def test_try_paragraph_flushes_on_marker_change():
    ctx = ParserContext()

    _try_paragraph(ctx, "> quote line", str, RENDERER)
    assert _try_paragraph(ctx, "// comment line", str, RENDERER) is True

    assert ctx.output == ['<p class="quote">quote line</p>']
    assert ctx.command == "//"
    assert ctx.buffer == ["comment line"]


def test_try_paragraph_flushes_other_block():
    ctx = ParserContext(status=BlockStatus.LIST, buffer=[ListItem("-", "a")])

    assert _try_paragraph(ctx, "| piped", str, RENDERER) is True
    assert ctx.output == ["<ul><li>a</li></ul>"]
    assert ctx.command == "|"


@pytest.mark.parametrize("line", [">quote", "/x comment", "//comment", "/ / comment", "|"])
def test_try_paragraph_rejects_markers_without_space(line):
    ctx = ParserContext()

    assert _try_paragraph(ctx, line, str, RENDERER) is False


def test_try_title_atx():
    ctx = ParserContext(status=BlockStatus.LIST, buffer=[ListItem("-", "a")])

    assert _try_title(ctx, "## Section", None, str, RENDERER) is True
    assert ctx.output == ["<ul><li>a</li></ul>", "<h2>Section</h2>"]
    assert ctx.status is BlockStatus.EMPTY
    assert ctx.skip is False


def test_try_title_atx_requires_space():
    ctx = ParserContext()

    assert _try_title(ctx, "#hashtag", None, str, RENDERER) is False
    assert ctx.output == []


def test_try_title_atx_unknown_marker_uses_fallback_rendering():
    ctx = ParserContext()

    assert _try_title(ctx, "###### Deep", None, str, RENDERER) is True
    assert ctx.output == ["###### Deep"]


@pytest.mark.parametrize(("underline", "fragment"), [("=====", "<h1>Title</h1>"), ("-----", "<h2>Title</h2>")])
def test_try_title_setext_marks_underline_skipped(underline, fragment):
    ctx = ParserContext()

    assert _try_title(ctx, "Title", underline, str, RENDERER) is True
    assert ctx.skip is True
    assert ctx.output == [fragment]


@pytest.mark.parametrize(
    ("line", "next_line"),
    [
        ("Title", "===="),
        ("Title", "======"),
        ("title", "====="),
        ("Title", "==-=="),
        ("Title", "*****"),
        ("Title", None),
        ("Title", ""),
    ],
)
def test_try_title_setext_rejections(line, next_line):
    ctx = ParserContext()

    assert _try_title(ctx, line, next_line, str, RENDERER) is False
    assert ctx.skip is False
    assert ctx.output == []
