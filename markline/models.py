"""Data models for markline."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto


class BlockStatus(Enum):
    """Kind of block currently open while walking a document.

    Exactly one block kind is open at a time; ``EMPTY`` means none.

    Attributes:
        EMPTY: No block is open.
        PARAGRAPH: Quote or comment paragraph lines are being collected.
        EMBEDDED: Verbatim lines between two fences are being collected.
        LIST: List items are being collected.
        KEYVALUE: Definition entries are being collected.
    """

    EMPTY = auto()
    PARAGRAPH = auto()
    EMBEDDED = auto()
    LIST = auto()
    KEYVALUE = auto()


class BreakKind(Enum):
    """Normalized kind of a break line."""

    LINE = "\n"
    RULE = "---"


@dataclass(frozen=True)
class ListItem:
    """One list entry: the marker character and its inline-processed text."""

    marker: str
    value: str


@dataclass(frozen=True)
class KeyValue:
    """One definition entry with inline-processed key and value."""

    key: str
    value: str


@dataclass(frozen=True)
class Substitution:
    """Replacement of ``text[start:end]`` by ``value`` in an inline fragment."""

    start: int
    end: int
    value: str


@dataclass
class ParserContext:
    """Encapsulate block state while walking a document.

    Attributes:
        status: Kind of the open block.
        command: Qualifier of the open block (paragraph marker or embedded tag).
        buffer: Items collected for the open block. Non-empty only while
            `status` is not ``EMPTY``.
        skip: When True the next input line is consumed without processing.
        output: Fragments emitted so far, in document order.
    """

    status: BlockStatus = BlockStatus.EMPTY
    command: str = ""
    buffer: list = field(default_factory=list)
    skip: bool = False
    output: list[str] = field(default_factory=list)
