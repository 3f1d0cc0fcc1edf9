"""Snippet model and the uri-list snippet builder."""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Union

from .anchor import EMPTY_WORKSPACE, DocumentIndex, TextDocument, get_document_dir
from .classify import is_image_uri
from .locators import Locator
from .relativize import get_markdown_path

_ESCAPE_RE = re.compile(r"[$}\\]")

DEFAULT_IMAGE_PLACEHOLDER = "Alt text"
DEFAULT_LINK_PLACEHOLDER = "label"
DEFAULT_SEPARATOR = " "


def _log(message: str) -> None:
    from .runtime import log

    log("snippet", message)


def escape_snippet_text(value: str) -> str:
    return _ESCAPE_RE.sub(lambda m: "\\" + m.group(0), value)


@dataclass(frozen=True)
class Text:
    value: str

    def render(self) -> str:
        return escape_snippet_text(self.value)


@dataclass(frozen=True)
class Separator(Text):
    pass


@dataclass(frozen=True)
class Placeholder:
    value: str
    index: int

    def render(self) -> str:
        return f"${{{self.index}:{escape_snippet_text(self.value)}}}"


@dataclass(frozen=True)
class Tabstop:
    index: int

    def render(self) -> str:
        return f"${self.index}"


Fragment = Union[Text, Separator, Placeholder, Tabstop]


class SnippetString:
    """Ordered literal text and tab stops, rendered in TextMate snippet syntax.

    Tab stops without an explicit number take the next free index, starting at
    1. Explicit numbers push the counter past themselves, so automatic stops
    never collide with them. Index 0 is the final cursor position.
    """

    def __init__(self) -> None:
        self.fragments: list[Fragment] = []
        self._tabstop = 1

    @property
    def next_tabstop(self) -> int:
        return self._tabstop

    def _claim(self, number: int | None) -> int:
        if number is None:
            number = self._tabstop
        if number < 0:
            raise ValueError(f"tab stop index must be >= 0, got {number}")
        self._tabstop = max(self._tabstop, number + 1)
        return number

    def append_text(self, value: str) -> "SnippetString":
        self.fragments.append(Text(value))
        return self

    def append_separator(self, value: str) -> "SnippetString":
        self.fragments.append(Separator(value))
        return self

    def append_placeholder(
        self, value: str, number: int | None = None
    ) -> "SnippetString":
        self.fragments.append(Placeholder(value, self._claim(number)))
        return self

    def append_tabstop(self, number: int | None = None) -> "SnippetString":
        self.fragments.append(Tabstop(self._claim(number)))
        return self

    @property
    def placeholders(self) -> list[Placeholder]:
        return [f for f in self.fragments if isinstance(f, Placeholder)]

    @property
    def separators(self) -> list[Separator]:
        return [f for f in self.fragments if isinstance(f, Separator)]

    @property
    def value(self) -> str:
        """The snippet in insertable syntax, e.g. ``[${1:label}](a.md)``."""
        return "".join(f.render() for f in self.fragments)

    @property
    def text(self) -> str:
        """The text as it reads once every placeholder keeps its default."""
        return "".join(
            f.value for f in self.fragments if isinstance(f, (Text, Placeholder))
        )

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return f"SnippetString({self.value!r})"


@dataclass(frozen=True)
class SnippetOptions:
    placeholder_text: str | None = None
    placeholder_start_index: int | None = None
    # None means "infer from the file extension"
    insert_as_image: bool | None = None
    separator: str | None = None


def build_uri_list_snippet(
    uris: Sequence[Locator],
    anchor: Locator | None,
    options: SnippetOptions | None = None,
) -> SnippetString | None:
    """Build the snippet for ``uris`` against an already resolved anchor."""
    if not uris:
        return None
    opts = options or SnippetOptions()
    start = opts.placeholder_start_index
    if start is not None and start < 0:
        _log(f"negative placeholder start index {start}, using 0")
        start = 0

    snippet = SnippetString()
    for i, uri in enumerate(uris):
        md_path = get_markdown_path(anchor, uri)
        insert_as_image = is_image_uri(uri, opts.insert_as_image)

        snippet.append_text("![" if insert_as_image else "[")

        placeholder_text = opts.placeholder_text
        if placeholder_text is None:
            placeholder_text = (
                DEFAULT_IMAGE_PLACEHOLDER if insert_as_image else DEFAULT_LINK_PLACEHOLDER
            )
        placeholder_index = start + i if start is not None else None
        snippet.append_placeholder(placeholder_text, placeholder_index)

        snippet.append_text(f"]({md_path})")

        if i < len(uris) - 1:
            snippet.append_separator(
                opts.separator if opts.separator is not None else DEFAULT_SEPARATOR
            )
    return snippet


def create_uri_list_snippet(
    document: TextDocument,
    uris: Sequence[Locator],
    options: SnippetOptions | None = None,
    *,
    index: DocumentIndex = EMPTY_WORKSPACE,
) -> SnippetString | None:
    """Markdown links (or images) for ``uris`` dropped into ``document``.

    Returns ``None`` when there is nothing to insert.
    """
    if not uris:
        return None
    return build_uri_list_snippet(uris, get_document_dir(document, index), options)
