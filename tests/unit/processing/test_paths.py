from __future__ import annotations

import pytest

from listingforms.processing.paths import (
    MISSING,
    assign_path,
    deep_merge,
    expand_dotted_keys,
    resolve_path,
    split_path,
)


def test_split_path_splits_dotted_names() -> None:
    assert split_path("contact.whatsapp") == ["contact", "whatsapp"]
    assert split_path(("a", "b")) == ["a", "b"]


@pytest.mark.parametrize("name", ["", "a..b", ".a", "a."])
def test_split_path_rejects_empty_segments(name: str) -> None:
    with pytest.raises(ValueError, match="Invalid field path"):
        split_path(name)


def test_resolve_path_returns_missing_for_absent_segments() -> None:
    bag = {"contact": {"email": "a@b.ph"}, "price": 10}

    assert resolve_path(bag, ["contact", "email"]) == "a@b.ph"
    assert resolve_path(bag, ["contact", "telegram"]) is MISSING
    assert resolve_path(bag, ["price", "amount"]) is MISSING
    assert not MISSING


def test_assign_path_creates_intermediate_mappings() -> None:
    bag: dict[str, object] = {"contact": "legacy"}

    assign_path(bag, ["contact", "whatsapp", "number"], "+639171234567")

    assert bag == {"contact": {"whatsapp": {"number": "+639171234567"}}}


@pytest.mark.parametrize(
    ("path", "value"),
    [
        (["a"], 1),
        (["a", "b", "c"], [1, 2]),
        (["contact", "email"], None),
        (["x", "y"], {"nested": True}),
    ],
)
def test_assign_then_resolve_round_trip(path: list[str], value: object) -> None:
    bag: dict[str, object] = {"a": {"b": "scalar"}}

    assign_path(bag, path, value)

    assert resolve_path(bag, path) == value


def test_deep_merge_override_wins_and_expands_dotted_keys() -> None:
    base = {"type": "house", "contact": {"email": "old@b.ph", "telegram": "@old"}}
    override = {"contact.email": "new@b.ph", "type": "condo"}

    merged = deep_merge(base, override)

    assert merged == {"type": "condo", "contact": {"email": "new@b.ph", "telegram": "@old"}}
    assert base["contact"]["email"] == "old@b.ph"


def test_expand_dotted_keys_merges_siblings() -> None:
    expanded = expand_dotted_keys({"contact.email": "a@b.ph", "contact": {"telegram": "@a"}})

    assert expanded == {"contact": {"email": "a@b.ph", "telegram": "@a"}}
