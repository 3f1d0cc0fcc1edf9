from __future__ import annotations

import pytest

from droplink.anchor import TextDocument, Workspace
from droplink.classify import IMAGE_FILE_EXTENSIONS, is_image_uri
from droplink.locators import Locator, parse_locator, resolve_reference
from droplink.relativize import get_markdown_path
from droplink.snippet import (
    Placeholder,
    Separator,
    SnippetOptions,
    SnippetString,
    build_uri_list_snippet,
    create_uri_list_snippet,
)


def _doc(uri: str) -> TextDocument:
    loc = parse_locator(uri)
    assert loc is not None
    return TextDocument(uri=loc)


def _uris(*values: str) -> list[Locator]:
    out = []
    for value in values:
        loc = parse_locator(value)
        assert loc is not None
        out.append(loc)
    return out


def test_image_next_to_document_is_relative() -> None:
    snippet = create_uri_list_snippet(
        _doc("file:///a/b/notes.md"), _uris("file:///a/b/c.png")
    )

    assert snippet is not None
    assert snippet.text == "![Alt text](c.png)"
    assert snippet.value == "![${1:Alt text}](c.png)"


def test_untitled_document_without_workspace_uses_absolute_uri() -> None:
    snippet = create_uri_list_snippet(
        _doc("untitled:Untitled-1"), _uris("file:///a/b/c.png"), index=Workspace()
    )

    assert snippet is not None
    assert snippet.text == "![Alt text](file:///a/b/c.png)"


def test_two_links_get_one_separator_and_increasing_tabstops() -> None:
    snippet = create_uri_list_snippet(
        _doc("file:///x/doc.md"), _uris("file:///x/one.txt", "file:///x/two.txt")
    )

    assert snippet is not None
    assert snippet.text == "[label](one.txt) [label](two.txt)"
    assert snippet.value == "[${1:label}](one.txt) [${2:label}](two.txt)"
    assert [p.index for p in snippet.placeholders] == [1, 2]
    assert len(snippet.separators) == 1
    assert not isinstance(snippet.fragments[-1], Separator)
    assert snippet.next_tabstop == 3


@pytest.mark.parametrize("count", [1, 2, 3, 7])
def test_placeholder_and_separator_counts(count: int) -> None:
    uris = [Locator(scheme="file", path=f"/x/f{i}.md") for i in range(count)]

    snippet = build_uri_list_snippet(uris, Locator(scheme="file", path="/x"))

    assert snippet is not None
    assert len(snippet.placeholders) == count
    assert len(snippet.separators) == count - 1
    indices = [p.index for p in snippet.placeholders]
    assert indices == sorted(set(indices))


def test_each_placeholder_is_wrapped_by_its_link_syntax() -> None:
    uris = _uris("file:///x/a.png", "file:///x/b.md")

    snippet = build_uri_list_snippet(uris, Locator(scheme="file", path="/x"))

    assert snippet is not None
    fragments = snippet.fragments
    assert [type(f).__name__ for f in fragments] == [
        "Text",
        "Placeholder",
        "Text",
        "Separator",
        "Text",
        "Placeholder",
        "Text",
    ]
    assert fragments[0].value == "!["
    assert fragments[2].value == "](a.png)"
    assert fragments[4].value == "["
    assert fragments[6].value == "](b.md)"


def test_nothing_to_insert_returns_none() -> None:
    assert build_uri_list_snippet([], None) is None
    assert create_uri_list_snippet(_doc("file:///x/doc.md"), []) is None


def test_explicit_start_index_numbers_from_it() -> None:
    snippet = build_uri_list_snippet(
        _uris("file:///x/a.md", "file:///x/b.md", "file:///x/c.md"),
        Locator(scheme="file", path="/x"),
        SnippetOptions(placeholder_start_index=5),
    )

    assert snippet is not None
    assert [p.index for p in snippet.placeholders] == [5, 6, 7]
    assert snippet.next_tabstop == 8


def test_insert_as_image_override_beats_extension() -> None:
    anchor = Locator(scheme="file", path="/x")

    as_link = build_uri_list_snippet(
        _uris("file:///x/c.png"), anchor, SnippetOptions(insert_as_image=False)
    )
    as_image = build_uri_list_snippet(
        _uris("file:///x/one.txt"), anchor, SnippetOptions(insert_as_image=True)
    )

    assert as_link is not None and as_link.text == "[label](c.png)"
    assert as_image is not None and as_image.text == "![Alt text](one.txt)"


def test_custom_placeholder_and_separator() -> None:
    snippet = build_uri_list_snippet(
        _uris("file:///x/a.png", "file:///x/b.md"),
        Locator(scheme="file", path="/x"),
        SnippetOptions(placeholder_text="todo", separator="\n"),
    )

    assert snippet is not None
    assert snippet.text == "![todo](a.png)\n[todo](b.md)"


def test_single_item_never_gets_a_separator() -> None:
    snippet = build_uri_list_snippet(
        _uris("file:///x/a.md"),
        Locator(scheme="file", path="/x"),
        SnippetOptions(separator=" | "),
    )

    assert snippet is not None
    assert snippet.separators == []
    assert snippet.text == "[label](a.md)"


def test_relative_paths_walk_up_and_get_encoded() -> None:
    anchor = Locator(scheme="file", path="/a/b")

    assert get_markdown_path(anchor, Locator(scheme="file", path="/a/c/d.png")) == "../c/d.png"
    assert (
        get_markdown_path(anchor, Locator(scheme="file", path="/a/b/my image.png"))
        == "my%20image.png"
    )
    assert get_markdown_path(anchor, Locator(scheme="file", path="/a/b/é.md")) == "%C3%A9.md"


def test_relative_path_round_trips_through_the_anchor() -> None:
    anchor = Locator(scheme="file", path="/a/b")
    original = Locator(scheme="file", path="/a/other dir/ü.png")

    href = get_markdown_path(anchor, original)

    assert resolve_reference(anchor, href) == original


def test_different_origin_falls_back_to_absolute() -> None:
    anchor = Locator(scheme="file", path="/x")
    remote = Locator(scheme="https", authority="example.com", path="/a.png")
    share = Locator(scheme="file", authority="server", path="/x/a.png")

    assert get_markdown_path(anchor, remote) == "https://example.com/a.png"
    assert get_markdown_path(anchor, share) == "file://server/x/a.png"
    assert get_markdown_path(None, Locator(scheme="file", path="/x/a.png")) == "file:///x/a.png"


def test_snippet_syntax_characters_are_escaped() -> None:
    snippet = build_uri_list_snippet(
        [Locator(scheme="file", path="/x/$cost.md")],
        Locator(scheme="file", path="/x"),
        SnippetOptions(placeholder_text="a}b"),
    )

    assert snippet is not None
    assert snippet.text == "[a}b]($cost.md)"
    assert snippet.value == "[${1:a\\}b}](\\$cost.md)"


def test_snippet_string_tabstops() -> None:
    snippet = SnippetString()
    snippet.append_placeholder("a", 3).append_placeholder("b").append_text(" ")
    snippet.append_tabstop(0)

    assert snippet.placeholders == [Placeholder("a", 3), Placeholder("b", 4)]
    assert snippet.value == "${3:a}${4:b} $0"
    assert snippet.text == "ab "

    with pytest.raises(ValueError):
        SnippetString().append_placeholder("x", -1)


def test_image_classification() -> None:
    assert IMAGE_FILE_EXTENSIONS == {
        "bmp", "gif", "ico", "jpe", "jpeg", "jpg", "png",
        "psd", "svg", "tga", "tif", "tiff", "webp",
    }  # fmt: skip
    assert is_image_uri(Locator(scheme="file", path="/x/Photo.JPG"))
    assert is_image_uri(Locator(scheme="https", authority="h", path="/logo.svg"))
    assert not is_image_uri(Locator(scheme="file", path="/x/archive.tar.gz"))
    assert not is_image_uri(Locator(scheme="file", path="/x/README"))
    assert not is_image_uri(Locator(scheme="file", path="/x/a.png"), False)
    assert is_image_uri(Locator(scheme="file", path="/x/a.txt"), True)


def test_negative_start_index_is_clamped() -> None:
    snippet = build_uri_list_snippet(
        _uris("file:///x/a.md", "file:///x/b.md"),
        Locator(scheme="file", path="/x"),
        SnippetOptions(placeholder_start_index=-1),
    )

    assert snippet is not None
    assert [p.index for p in snippet.placeholders] == [0, 1]
