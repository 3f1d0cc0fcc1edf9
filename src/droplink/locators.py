"""Locator values and the tolerant ``text/uri-list`` parser."""

from __future__ import annotations

import os
import posixpath
import re
from dataclasses import dataclass, replace
from pathlib import Path
from urllib.parse import quote, unquote

_URI_RE = re.compile(r"^(([^:/?#]+?):)?(//([^/?#]*))?([^?#]*)(\?([^#]*))?(#(.*))?$")
_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*$")
_DRIVE_PATH_RE = re.compile(r"^/[A-Za-z]:")
# schemes whose paths are always absolute
_ROOTED_SCHEMES = frozenset({"file", "http", "https"})


def _log(message: str) -> None:
    from .runtime import log

    log("locators", message)


@dataclass(frozen=True)
class Locator:
    scheme: str
    authority: str = ""
    path: str = ""
    query: str = ""
    fragment: str = ""

    @classmethod
    def from_path(cls, fs_path: str | os.PathLike[str]) -> "Locator":
        """Build a ``file:`` locator from a local filesystem path."""
        resolved = Path(fs_path).expanduser().absolute().as_posix()
        if not resolved.startswith("/"):
            resolved = "/" + resolved
        return cls(scheme="file", path=resolved)

    def with_path(self, path: str) -> "Locator":
        return replace(self, path=path)

    def dirname(self) -> "Locator":
        if not self.path:
            return self
        parent = posixpath.dirname(self.path)
        if parent == ".":
            parent = ""
        return self.with_path(parent)

    def extname(self) -> str:
        return posixpath.splitext(self.path)[1]

    def to_string(self) -> str:
        out = ""
        if self.scheme:
            out += self.scheme + ":"
        path = self.path
        if self.authority or self.scheme == "file":
            out += "//"
            if path and not path.startswith("/"):
                path = "/" + path
        if self.authority:
            out += quote(self.authority, safe=":@[]")
        if path:
            out += _encode_path(path)
        if self.query:
            out += "?" + quote(self.query, safe="=&/")
        if self.fragment:
            out += "#" + quote(self.fragment, safe="")
        return out

    def __str__(self) -> str:
        return self.to_string()


def _encode_path(path: str) -> str:
    # keep the colon of a windows drive letter readable
    match = _DRIVE_PATH_RE.match(path)
    if match:
        head = match.group(0)
        return head + quote(path[len(head):], safe="/")
    return quote(path, safe="/")


def parse_locator(line: str) -> Locator | None:
    """Parse one uri-list line, returning ``None`` if it is not a valid URI."""
    match = _URI_RE.match(line)
    if not match:
        return None
    scheme = match.group(2) or ""
    authority = match.group(4)
    path = match.group(5) or ""
    if not _SCHEME_RE.match(scheme):
        return None
    if authority:
        if path and not path.startswith("/"):
            return None
    elif path.startswith("//"):
        return None
    if scheme.lower() in _ROOTED_SCHEMES and not path.startswith("/"):
        path = "/" + path
    try:
        return Locator(
            scheme=scheme,
            authority=unquote(authority or "", errors="strict"),
            path=unquote(path, errors="strict"),
            query=unquote(match.group(7) or "", errors="strict"),
            fragment=unquote(match.group(9) or "", errors="strict"),
        )
    except UnicodeDecodeError:
        return None


def parse_uri_list(text: str | None) -> list[Locator]:
    """Split a ``text/uri-list`` payload into locators, dropping bad lines."""
    if not text:
        return []
    locators: list[Locator] = []
    for raw in text.split("\n"):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        locator = parse_locator(line)
        if locator is None:
            _log(f"dropping unparsable line: {line!r}")
            continue
        locators.append(locator)
    return locators


def resolve_reference(base: Locator, href: str) -> Locator:
    """Resolve a relative, encoded href against a directory locator."""
    base_path = base.path if base.path.startswith("/") else "/" + base.path
    joined = posixpath.normpath(posixpath.join(base_path, unquote(href)))
    if joined.startswith("//"):
        joined = "/" + joined.lstrip("/")
    return Locator(scheme=base.scheme, authority=base.authority, path=joined)


def as_locator(value: str | os.PathLike[str]) -> Locator:
    """Accept either a URI (``untitled:Untitled-1``) or a filesystem path."""
    text = os.fspath(value)
    locator = parse_locator(text)
    # a single-letter scheme is a windows drive, not a URI
    if locator is not None and len(locator.scheme) > 1:
        return locator
    return Locator.from_path(text)
