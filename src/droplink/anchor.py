"""Resolve the directory a dropped link should be written relative to.

A document normally anchors on its own parent directory. Two cases need more
care:

* a notebook cell has a synthetic ``vscode-notebook-cell:`` identity, so the
  notebook that owns it is used instead;
* an untitled buffer has no directory at all, so the first workspace root is
  used, or no anchor when nothing is open.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from .locators import Locator

SCHEME_UNTITLED = "untitled"
SCHEME_NOTEBOOK_CELL = "vscode-notebook-cell"

CHILD_SCHEMES = frozenset({SCHEME_NOTEBOOK_CELL})


def _log(message: str) -> None:
    from .runtime import log

    log("anchor", message)


@dataclass(frozen=True)
class TextDocument:
    uri: Locator
    language_id: str = "markdown"


@dataclass(frozen=True)
class CompositeDocument:
    uri: Locator
    children: tuple[TextDocument, ...] = ()


@runtime_checkable
class DocumentIndex(Protocol):
    def find_composite_owner(self, document: TextDocument) -> Locator | None: ...
    def workspace_roots(self) -> Sequence[Locator]: ...


@dataclass(frozen=True)
class Workspace:
    """Read-only snapshot of open composite documents and workspace roots."""

    composites: tuple[CompositeDocument, ...] = ()
    roots: tuple[Locator, ...] = ()

    def find_composite_owner(self, document: TextDocument) -> Locator | None:
        for composite in self.composites:
            for child in composite.children:
                if child == document:
                    return composite.uri
        return None

    def workspace_roots(self) -> Sequence[Locator]:
        return self.roots


EMPTY_WORKSPACE = Workspace()


def get_parent_document_uri(
    document: TextDocument, index: DocumentIndex = EMPTY_WORKSPACE
) -> Locator:
    if document.uri.scheme in CHILD_SCHEMES:
        owner = index.find_composite_owner(document)
        if owner is not None:
            _log(f"{document.uri} belongs to {owner}")
            return owner
        _log(f"no open composite owns {document.uri}")
    return document.uri


def get_document_dir(
    document: TextDocument, index: DocumentIndex = EMPTY_WORKSPACE
) -> Locator | None:
    doc_uri = get_parent_document_uri(document, index)
    if doc_uri.scheme == SCHEME_UNTITLED:
        roots = index.workspace_roots()
        if not roots:
            _log("untitled document and no workspace root; links stay absolute")
            return None
        return roots[0]
    return doc_uri.dirname()
