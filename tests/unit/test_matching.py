import pytest

from evented.errors import EventTypeError
from evented.informer import ListenerEntry
from evented.informer import filter_matches
from evented.informer import normalize_type


def test_normalize_string_type():
    assert normalize_type("t") == ("t", None)


def test_normalize_filter_with_type():
    shape = {"type": "t", "id": 1}
    type_name, filter_ = normalize_type(shape)
    assert type_name == "t"
    assert filter_ is shape


def test_normalize_filter_without_string_type():
    assert normalize_type({"id": 1}) == ("", {"id": 1})
    assert normalize_type({"type": None}) == ("", {"type": None})


def test_normalize_rejects_other_values():
    with pytest.raises(EventTypeError):
        normalize_type(None)


def test_filter_matches_key_subset():
    assert filter_matches({"a": 1}, {"a": 1, "b": 2})
    assert not filter_matches({"a": 1, "b": 2}, {"a": 1})
    assert filter_matches({}, {"anything": True})


def test_filter_matches_loosely():
    assert filter_matches({"id": "5"}, {"id": 5})
    assert filter_matches({"gone": None}, {})
    assert not filter_matches({"id": 5}, {"id": 6})


def test_listener_entry_sees_through_wrappers():
    def original(ctx):
        pass

    def wrapper(ctx):
        pass

    wrapper.listener = original
    entry = ListenerEntry(wrapper)

    assert entry.is_for(wrapper)
    assert entry.is_for(original)
    assert not entry.is_for(lambda ctx: None)
    assert entry.original is original
    assert ListenerEntry(original).original is original
