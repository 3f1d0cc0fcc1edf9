from __future__ import annotations

import posixpath
from urllib.parse import quote

from .locators import Locator

# characters encodeURI leaves alone besides letters, digits and "-_.~"
_ENCODE_URI_SAFE = ";,/?:@&=+$!*'()#"


def encode_uri(value: str) -> str:
    return quote(value, safe=_ENCODE_URI_SAFE)


def _rooted(path: str) -> str:
    return path if path.startswith("/") else "/" + path


def shares_origin(anchor: Locator, locator: Locator) -> bool:
    return anchor.scheme == locator.scheme and anchor.authority == locator.authority


def get_markdown_path(anchor: Locator | None, locator: Locator) -> str:
    """Path to write inside ``(...)``: relative to the anchor when possible."""
    if anchor is not None and shares_origin(anchor, locator):
        relative = posixpath.relpath(_rooted(locator.path), _rooted(anchor.path))
        return encode_uri(relative)
    return locator.to_string()
