"""Drop handling: uri-list payload in, Markdown snippet out."""

from __future__ import annotations

import inspect
from collections.abc import Awaitable
from typing import Protocol, Union

from .anchor import EMPTY_WORKSPACE, DocumentIndex, TextDocument
from .config import DropSettings
from .locators import parse_uri_list
from .snippet import SnippetOptions, SnippetString, create_uri_list_snippet

URI_LIST_MIME = "text/uri-list"


def _log(message: str) -> None:
    from .runtime import log

    log("drop", message)


class CancellationToken:
    def __init__(self) -> None:
        self._cancelled = False

    @property
    def is_cancellation_requested(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True


class DataTransferItem(Protocol):
    def as_string(self) -> Union[str, Awaitable[str]]: ...


class DataTransfer(Protocol):
    def get(self, mime_type: str) -> DataTransferItem | None: ...


class StaticDataTransfer:
    """In-memory transfer holding already-available payloads keyed by MIME type."""

    class _Item:
        def __init__(self, value: str) -> None:
            self._value = value

        def as_string(self) -> str:
            return self._value

    def __init__(self, payloads: dict[str, str] | None = None) -> None:
        self._payloads = dict(payloads or {})

    def get(self, mime_type: str) -> "StaticDataTransfer._Item | None":
        if mime_type not in self._payloads:
            return None
        return self._Item(self._payloads[mime_type])


def uri_list_snippet_from_text(
    document: TextDocument,
    url_list: str | None,
    token: CancellationToken | None = None,
    *,
    index: DocumentIndex = EMPTY_WORKSPACE,
    options: SnippetOptions | None = None,
) -> SnippetString | None:
    if not url_list:
        return None
    if token is not None and token.is_cancellation_requested:
        _log("cancelled before parsing the uri list")
        return None
    uris = parse_uri_list(url_list)
    if not uris:
        _log("no usable uris in payload")
    return create_uri_list_snippet(document, uris, options, index=index)


async def try_get_uri_list_snippet(
    document: TextDocument,
    data_transfer: DataTransfer,
    token: CancellationToken | None = None,
    *,
    index: DocumentIndex = EMPTY_WORKSPACE,
    options: SnippetOptions | None = None,
) -> SnippetString | None:
    item = data_transfer.get(URI_LIST_MIME)
    if item is None:
        return None
    url_list = item.as_string()
    if inspect.isawaitable(url_list):
        url_list = await url_list
    return uri_list_snippet_from_text(
        document, url_list, token, index=index, options=options
    )


async def provide_document_drop_snippet(
    document: TextDocument,
    data_transfer: DataTransfer,
    token: CancellationToken | None = None,
    *,
    settings: DropSettings | None = None,
    index: DocumentIndex = EMPTY_WORKSPACE,
) -> SnippetString | None:
    """Entry point for an editor drop handler; honours ``settings.enabled``."""
    settings = settings or DropSettings()
    if not settings.enabled:
        return None
    return await try_get_uri_list_snippet(
        document, data_transfer, token, index=index, options=settings.to_options()
    )
