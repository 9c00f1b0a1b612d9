"""Tests for the in-memory note store and its filtered view."""

import pytest

from notes_client.schemas import Note
from notes_client.store import NoteStore


def _note(note_id, title="", content=""):
    return Note(id=note_id, title=title, content=content)


@pytest.fixture
def store():
    s = NoteStore()
    s.replace_all([
        _note("1", "Groceries", "milk, eggs"),
        _note("2", "Work", "Quarterly MILK report"),
        _note("3", "Ideas", "nothing here"),
        _note("4", "milkshake recipes", "vanilla"),
    ])
    return s


def test_empty_query_returns_collection_unchanged(store):
    assert store.apply_filter("") == store.notes
    assert store.apply_filter("   ") == store.notes


def test_filter_matches_title_or_content_case_insensitively(store):
    result = store.apply_filter("Milk")
    assert [n.id for n in result] == ["1", "2", "4"]


@pytest.mark.parametrize("query", ["e", "MILK", "re", "vanilla", "zzz", "Q"])
def test_filter_is_ordered_subsequence_of_matches(store, query):
    result = store.apply_filter(query)
    ids = [n.id for n in store.notes]
    positions = [ids.index(n.id) for n in result]
    assert positions == sorted(positions)
    needle = query.lower()
    for note in result:
        assert needle in note.title.lower() or needle in note.content.lower()
    expected = [n for n in store.notes if needle in n.title.lower() or needle in n.content.lower()]
    assert result == expected


def test_filter_with_single_match():
    s = NoteStore()
    s.replace_all([_note("1", "A", "x"), _note("2", "B", "y")])
    assert s.apply_filter("x") == [_note("1", "A", "x")]


def test_no_match_yields_empty_view(store):
    assert store.apply_filter("does not occur") == []


def test_upsert_prepends_new_note(store):
    store.upsert(_note("9", "New", ""))
    assert [n.id for n in store.notes] == ["9", "1", "2", "3", "4"]


def test_upsert_replaces_in_place(store):
    store.upsert(_note("3", "Ideas v2", "something"))
    assert [n.id for n in store.notes] == ["1", "2", "3", "4"]
    assert store.get("3").title == "Ideas v2"


def test_upsert_is_idempotent(store):
    note = _note("9", "Same", "value")
    store.upsert(note)
    before = store.notes
    store.upsert(note)
    assert store.notes == before
    assert len(store) == 5


def test_mutations_recompute_filtered_view(store):
    store.apply_filter("milk")
    store.upsert(_note("9", "Buy MILK", ""))
    assert [n.id for n in store.filtered] == ["9", "1", "2", "4"]
    store.upsert(_note("1", "Groceries", "bread"))
    assert [n.id for n in store.filtered] == ["9", "2", "4"]
    store.remove("2")
    assert [n.id for n in store.filtered] == ["9", "4"]


def test_remove_absent_id_is_noop(store):
    before = store.notes
    store.remove("nope")
    assert store.notes == before


def test_replace_all_keeps_one_note_per_id():
    s = NoteStore()
    s.replace_all([_note(1, "first"), _note(2), _note(1, "dupe")])
    assert [n.id for n in s.notes] == [1, 2]
    assert s.get(1).title == "first"


def test_ids_of_different_types_are_different_notes():
    s = NoteStore()
    s.replace_all([_note(1, "int"), _note("1", "str")])
    assert len(s) == 2
    assert s.get("1").title == "str"
