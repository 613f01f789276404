## printopts — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import pytest

from printopts.store import OptionStore
from printopts.types import Option
from printopts.errors import OptionError, OptionNameError, OptionValueError, OptionStorageError


def test_add_same_name_overwrites_in_place():
    store = OptionStore()
    assert store.add("a", "1") == 1
    assert store.add("a", "2") == 1
    assert store.items() == [("a", "2")]


def test_names_are_case_insensitive():
    store = OptionStore()
    store.add("Copies", "2")
    assert store.get("copies") == "2"
    assert "COPIES" in store
    assert store.remove("COPIES") == 0
    assert store.get("copies") is None


def test_overwrite_keeps_original_spelling_and_position():
    store = OptionStore()
    store.add("Copies", "1")
    store.add("sides", "one-sided")
    store.add("COPIES", "3")
    assert store.items() == [("Copies", "3"), ("sides", "one-sided")]


def test_remove_compacts_preserving_order():
    store = OptionStore()
    for name in ("a", "b", "c"):
        store.add(name, name.upper())
    assert store.remove("b") == 2
    assert store.names() == ["a", "c"]


def test_remove_missing_name_is_noop():
    store = OptionStore({"a": "1"})
    assert store.remove("zzz") == 1
    assert OptionStore().remove("a") == 0


def test_get_returns_default_when_missing():
    store = OptionStore()
    assert store.get("media") is None
    assert store.get("media", "a4") == "a4"
    store.add("media", "letter")
    assert store.get("media", "a4") == "letter"


@pytest.mark.parametrize("name, value", [
    (None, "1"),
    ("", "1"),
    ("a", None),
    (42, "1"),
    ("a", 1),
])
def test_invalid_arguments_are_silent_noops(name, value):
    store = OptionStore({"keep": "me"})
    assert store.add(name, value) == 1
    assert store.items() == [("keep", "me")]


def test_strict_store_raises_on_invalid_arguments():
    store = OptionStore(strict=True)
    with pytest.raises(OptionNameError):
        store.add("", "1")
    with pytest.raises(OptionValueError) as exc_info:
        store.add("copies", None)
    assert exc_info.value.option_name == "copies"
    assert isinstance(exc_info.value, ValueError)
    assert len(store) == 0


def test_capacity_exhaustion_returns_previous_count():
    store = OptionStore(max_options=1)
    assert store.add("a", "1") == 1
    assert store.add("b", "2") == 1
    # Overwriting needs no growth, so it still works when full.
    assert store.add("A", "3") == 1
    assert store.items() == [("a", "3")]


def test_capacity_exhaustion_on_first_add_returns_zero():
    assert OptionStore(max_options=0).add("a", "1") == 0


def test_strict_capacity_exhaustion_raises_storage_error():
    store = OptionStore(max_options=1, strict=True)
    store.add("a", "1")
    with pytest.raises(OptionStorageError) as exc_info:
        store.add("b", "2")
    err = exc_info.value
    assert isinstance(err, OptionError) and isinstance(err, MemoryError)
    assert err.option_name == "b" and err.capacity == 1
    assert store.names() == ["a"]


def test_free_releases_everything():
    store = OptionStore({"a": "1", "b": "2"})
    store.free()
    assert len(store) == 0
    assert list(store) == []
    store.free()
    assert store.add("c", "3") == 1


def test_default_folding_is_ascii_only():
    store = OptionStore()
    store.add("été", "1")
    assert store.get("ÉTÉ") is None
    assert store.get("éTé") == "1"


def test_custom_fold_policy():
    store = OptionStore(fold=str.casefold)
    store.add("été", "1")
    assert store.get("ÉTÉ") == "1"


def test_iteration_yields_option_entries():
    store = OptionStore([("copies", "2"), ("sides", "two-sided-long-edge")])
    entries = list(store)
    assert entries == [Option("copies", "2"), Option("sides", "two-sided-long-edge")]
    name, value = entries[0]
    assert (name, value) == ("copies", "2")
    assert store.to_dict() == {"copies": "2", "sides": "two-sided-long-edge"}


def test_iteration_is_safe_while_mutating():
    store = OptionStore({"a": "1", "b": "2"})
    for option in store:
        store.remove(option.name)
    assert len(store) == 0
