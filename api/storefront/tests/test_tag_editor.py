"""Tag editor commit, dedupe and cap behavior."""

from __future__ import annotations

import pytest

from storefront.forms.tags import TagEditor


def _type_and_commit(editor: TagEditor, text: str, key: str = "Enter") -> bool:
    editor.tag_input = text
    return editor.on_key_commit(key)


@pytest.mark.parametrize("key", ["Enter", ","])
def test_commit_keys_append_trimmed_tag(key: str) -> None:
    editor = TagEditor()

    assert _type_and_commit(editor, "  branding  ", key) is True
    assert editor.tags == ["branding"]
    assert editor.tag_input == ""


def test_other_keys_do_not_commit() -> None:
    editor = TagEditor()

    assert _type_and_commit(editor, "branding", "Tab") is False
    assert editor.tags == []
    assert editor.tag_input == "branding"


def test_duplicate_tag_is_dropped_silently() -> None:
    editor = TagEditor()
    _type_and_commit(editor, "logo")

    assert _type_and_commit(editor, "logo") is False
    assert editor.tags == ["logo"]
    assert editor.tag_input == "logo"


def test_duplicates_are_case_sensitive() -> None:
    editor = TagEditor()
    _type_and_commit(editor, "Logo")
    _type_and_commit(editor, "logo")

    assert editor.tags == ["Logo", "logo"]


def test_blank_input_is_ignored() -> None:
    editor = TagEditor()

    assert _type_and_commit(editor, "   ") is False
    assert editor.tags == []


def test_cap_stops_accepting_without_error() -> None:
    editor = TagEditor()
    for index in range(20):
        assert editor.commit(f"tag-{index}")

    assert editor.accepting is False
    assert editor.commit("one-too-many") is False
    assert len(editor.tags) == 20
    assert "one-too-many" not in editor.tags


def test_remove_tag_drops_exact_match_only() -> None:
    editor = TagEditor(["print", "Print", "web"])

    assert editor.remove_tag("Print") is True
    assert editor.tags == ["print", "web"]
    assert editor.remove_tag("missing") is False


def test_initial_tags_are_deduplicated_and_capped() -> None:
    editor = TagEditor(["a", "a", " b ", ""], max_tags=2)

    assert editor.tags == ["a", "b"]
    assert editor.accepting is False
