"""Persisted form of shopping-list items.

A list stores its items as a JSON array of strings. An item that has been
acquired is stored with ``ACQUIRED_MARKER`` in front of the product name; any
other string is the product name itself. The format is shared with data written
by earlier releases, so it is never escaped.
"""

import json
from dataclasses import dataclass

ACQUIRED_MARKER = "__ACQUIRED__"


@dataclass(frozen=True)
class ItemEntry:
    ProductName: str
    Acquired: bool = False


def EncodeItem(entry: ItemEntry) -> str:
    if entry.Acquired:
        return f"{ACQUIRED_MARKER}{entry.ProductName}"
    return entry.ProductName


def DecodeItem(value: str) -> ItemEntry:
    if value.startswith(ACQUIRED_MARKER):
        return ItemEntry(ProductName=value[len(ACQUIRED_MARKER):], Acquired=True)
    return ItemEntry(ProductName=value, Acquired=False)


def IsSameItem(left: str, right: str) -> bool:
    return DecodeItem(left).ProductName == DecodeItem(right).ProductName


def IsEncodableName(name: str) -> bool:
    """Names that would not survive an encode/decode round trip are rejected upstream."""
    return bool(name) and not name.startswith(ACQUIRED_MARKER)


def ParseItems(raw: str | None) -> list[str]:
    if not raw:
        return []
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValueError("Stored shopping list items are not valid JSON") from exc
    if not isinstance(parsed, list):
        raise ValueError("Stored shopping list items must be a list")
    return [str(value) for value in parsed]


def SerializeItems(values: list[str]) -> str:
    return json.dumps(list(values), ensure_ascii=False)


def DecodeItems(raw: str | None) -> list[ItemEntry]:
    return [DecodeItem(value) for value in ParseItems(raw)]
