"""
markline: line-oriented lightweight markup converter.

This package can be used both as a CLI tool and as a library.

CLI Usage:
    markline notes.md -o notes.html

Library Usage:
    from markline import Markdown, TextRenderer

    html = Markdown().load("# Title\n- first\n- second")
    text = Markdown(renderer=TextRenderer()).load("> quoted *text*")
"""

from .config import ConfigError, MarklineConfig
from .exceptions import DocumentError, LineTooLongError
from .inline import InlineRewriter, normalize_url
from .models import BlockStatus, BreakKind, KeyValue, ListItem
from .parser import ConvertFileError, Markdown, convert, convert_file
from .renderers import HtmlRenderer, Renderer, TextRenderer, get_renderer

__version__ = "0.1.0"

__all__ = [
    # Core functionality
    "Markdown",
    "convert",
    "convert_file",
    "InlineRewriter",
    "normalize_url",
    # Renderers
    "Renderer",
    "HtmlRenderer",
    "TextRenderer",
    "get_renderer",
    # Data models
    "BlockStatus",
    "BreakKind",
    "KeyValue",
    "ListItem",
    "MarklineConfig",
    # Exceptions
    "ConfigError",
    "ConvertFileError",
    "DocumentError",
    "LineTooLongError",
    # Version
    "__version__",
]
