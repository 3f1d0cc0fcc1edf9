from __future__ import annotations

from pathlib import Path

# Load the submodule first so the function below, not the module, owns the name.
from . import snippet as _snippet_module  # noqa: F401


def snippet(
    uri_list: str,
    document: str | Path,
    *,
    workspace: list[str | Path] | None = None,
    insert_as_image: bool | None = None,
    placeholder_text: str | None = None,
    placeholder_start_index: int | None = None,
    separator: str | None = None,
    syntax: bool = False,
) -> str | None:
    from .anchor import TextDocument, Workspace
    from .locators import as_locator
    from .drop import uri_list_snippet_from_text
    from .snippet import SnippetOptions

    roots = tuple(as_locator(root) for root in workspace or [])

    result = uri_list_snippet_from_text(
        TextDocument(uri=as_locator(document)),
        uri_list,
        index=Workspace(roots=roots),
        options=SnippetOptions(
            placeholder_text=placeholder_text,
            placeholder_start_index=placeholder_start_index,
            insert_as_image=insert_as_image,
            separator=separator,
        ),
    )
    if result is None:
        return None
    return result.value if syntax else result.text


def links(paths: list[str | Path], document: str | Path, **kwargs) -> str | None:
    from .locators import Locator

    uri_list = "\n".join(Locator.from_path(p).to_string() for p in paths)
    return snippet(uri_list, document, **kwargs)


__all__ = [
    "snippet",
    "links",
]
