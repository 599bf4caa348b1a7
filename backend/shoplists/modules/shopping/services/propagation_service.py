"""Keep shopping-list item text in step with catalog product names.

List items are copies of product names, not references, so every rename or
removal in the catalog has to be written into each list that mentions the
product. Names are not indexed by list membership, so every list is scanned.

None of these functions commit. The catalog service runs them inside the same
unit of work as the catalog change, so the two land or fail together.
"""

import logging
from typing import Iterable

from sqlalchemy.orm import Session

from shoplists.modules.auth.deps import NowUtc
from shoplists.modules.shopping.models import ShoppingList
from shoplists.modules.shopping.utils.item_codec import (
    DecodeItem,
    EncodeItem,
    ItemEntry,
    ParseItems,
    SerializeItems,
)

logger = logging.getLogger("shopping.propagation")


def _LoadAllLists(db: Session) -> list[ShoppingList]:
    return db.query(ShoppingList).order_by(ShoppingList.Id.asc()).all()


def _StoreItems(db: Session, shopping_list: ShoppingList, values: list[str]) -> None:
    shopping_list.Items = SerializeItems(values)
    shopping_list.UpdatedAt = NowUtc()
    db.add(shopping_list)


def RenameItemValues(values: list[str], old_name: str, new_name: str) -> tuple[list[str], bool]:
    """Rename every entry for ``old_name``, plain or acquired, keeping its flag."""
    renamed: list[str] = []
    changed = False
    for value in values:
        entry = DecodeItem(value)
        if entry.ProductName == old_name:
            renamed.append(EncodeItem(ItemEntry(ProductName=new_name, Acquired=entry.Acquired)))
            changed = True
        else:
            renamed.append(value)
    return renamed, changed


def RemoveItemValues(values: list[str], product_names: set[str]) -> tuple[list[str], bool]:
    kept = [value for value in values if DecodeItem(value).ProductName not in product_names]
    return kept, len(kept) != len(values)


def RenameProductInLists(db: Session, old_name: str, new_name: str) -> int:
    if old_name == new_name:
        return 0
    updated = 0
    for shopping_list in _LoadAllLists(db):
        values, changed = RenameItemValues(ParseItems(shopping_list.Items), old_name, new_name)
        if changed:
            _StoreItems(db, shopping_list, values)
            updated += 1
    logger.info("renamed %r to %r in %s shopping lists", old_name, new_name, updated)
    return updated


def RemoveProductsFromLists(db: Session, product_names: Iterable[str]) -> int:
    names = set(product_names)
    if not names:
        return 0
    updated = 0
    for shopping_list in _LoadAllLists(db):
        values, changed = RemoveItemValues(ParseItems(shopping_list.Items), names)
        if changed:
            _StoreItems(db, shopping_list, values)
            updated += 1
    logger.info("removed %s products from %s shopping lists", len(names), updated)
    return updated
