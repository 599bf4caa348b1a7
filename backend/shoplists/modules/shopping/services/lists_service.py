import logging
from typing import Iterable

from sqlalchemy import func
from sqlalchemy.orm import Session

from shoplists.core.errors import AccessDeniedError, NotFoundError
from shoplists.core.transactions import RunUnitOfWork
from shoplists.modules.auth.deps import NowUtc, UserContext
from shoplists.modules.catalog.models import Product
from shoplists.modules.shopping.models import ShoppingList
from shoplists.modules.shopping.utils.item_codec import (
    ACQUIRED_MARKER,
    DecodeItem,
    EncodeItem,
    IsEncodableName,
    ItemEntry,
    ParseItems,
    SerializeItems,
)
from shoplists.modules.shopping.utils.rbac import IsOwner

logger = logging.getLogger("shopping.lists")

MAX_LIST_NAME_LENGTH = 200

LIST_NOT_FOUND = "Shopping list not found"


def NormalizeLabel(value: str | None) -> str:
    if value is None:
        return ""
    return " ".join(value.strip().split())


def ValidateListName(value: str | None) -> str:
    normalized = NormalizeLabel(value)
    if not normalized:
        raise ValueError("Name is required")
    if len(normalized) > MAX_LIST_NAME_LENGTH:
        raise ValueError("Name is too long")
    return normalized


def ValidateItemName(value: str | None) -> str:
    normalized = NormalizeLabel(value)
    if not normalized:
        raise ValueError("Item is required")
    if not IsEncodableName(normalized):
        raise ValueError(f"Item cannot start with {ACQUIRED_MARKER}")
    return normalized


def WithItemAdded(values: list[str], product_name: str) -> tuple[list[str], bool]:
    if any(DecodeItem(value).ProductName == product_name for value in values):
        return list(values), False
    return [*values, EncodeItem(ItemEntry(ProductName=product_name))], True


def WithItemRemoved(values: list[str], product_name: str) -> tuple[list[str], bool]:
    kept = [value for value in values if DecodeItem(value).ProductName != product_name]
    return kept, len(kept) != len(values)


def WithItemAcquired(values: list[str], product_name: str, acquired: bool) -> tuple[list[str], bool]:
    """Set the flag on the first matching entry and drop any later duplicates."""
    result: list[str] = []
    found = False
    for value in values:
        if DecodeItem(value).ProductName != product_name:
            result.append(value)
            continue
        if found:
            continue
        found = True
        result.append(EncodeItem(ItemEntry(ProductName=product_name, Acquired=acquired)))
    return result, result != list(values)


def _GetList(db: Session, list_id: int) -> ShoppingList:
    shopping_list = db.query(ShoppingList).filter(ShoppingList.Id == list_id).first()
    if not shopping_list:
        raise NotFoundError(LIST_NOT_FOUND)
    return shopping_list


def _GetOwnedList(db: Session, user: UserContext, list_id: int) -> ShoppingList:
    shopping_list = _GetList(db, list_id)
    if not IsOwner(user, shopping_list):
        logger.warning("user %s denied access to shopping list %s", user.Username, list_id)
        raise AccessDeniedError("Access denied")
    return shopping_list


def _ListExists(db: Session, list_id: int) -> bool:
    return db.query(ShoppingList.Id).filter(ShoppingList.Id == list_id).first() is not None


def _StoreItems(db: Session, shopping_list: ShoppingList, values: list[str]) -> None:
    shopping_list.Items = SerializeItems(values)
    shopping_list.UpdatedAt = NowUtc()
    db.add(shopping_list)


def _ResolveProductName(db: Session, item_name: str) -> str:
    product = db.query(Product).filter(func.lower(Product.Name) == item_name.lower()).first()
    if not product:
        raise NotFoundError("Product not found")
    return product.Name


def _ResolveProductNames(db: Session, product_ids: Iterable[int]) -> list[str]:
    unique_ids = sorted({int(value) for value in (product_ids or [])})
    if not unique_ids:
        return []
    products = (
        db.query(Product)
        .filter(Product.Id.in_(unique_ids))
        .order_by(Product.Id.asc())
        .all()
    )
    return [product.Name for product in products]


def GetItemEntries(shopping_list: ShoppingList) -> list[ItemEntry]:
    return [DecodeItem(value) for value in ParseItems(shopping_list.Items)]


def ListShoppingLists(db: Session, user: UserContext) -> list[ShoppingList]:
    return (
        db.query(ShoppingList)
        .filter(ShoppingList.OwnerUserName == user.Username)
        .order_by(ShoppingList.CreatedAt.asc(), ShoppingList.Id.asc())
        .all()
    )


def GetShoppingList(db: Session, user: UserContext, list_id: int) -> ShoppingList:
    return _GetOwnedList(db, user, list_id)


def CreateShoppingList(
    db: Session,
    user: UserContext,
    name: str,
    product_ids: Iterable[int] | None = None,
) -> ShoppingList:
    normalized = ValidateListName(name)

    def _work() -> ShoppingList:
        values: list[str] = []
        for product_name in _ResolveProductNames(db, product_ids or []):
            values, _ = WithItemAdded(values, product_name)
        record = ShoppingList(
            OwnerUserName=user.Username,
            Name=normalized,
            Items=SerializeItems(values),
            UpdatedAt=NowUtc(),
        )
        db.add(record)
        db.flush()
        return record

    record = RunUnitOfWork(db, _work, label="create shopping list")
    logger.info("shopping list %s created by %s", record.Id, user.Username)
    return record


def RenameShoppingList(db: Session, user: UserContext, list_id: int, name: str) -> ShoppingList:
    normalized = ValidateListName(name)

    def _work() -> ShoppingList:
        shopping_list = _GetOwnedList(db, user, list_id)
        shopping_list.Name = normalized
        shopping_list.UpdatedAt = NowUtc()
        db.add(shopping_list)
        return shopping_list

    return RunUnitOfWork(
        db,
        _work,
        label="rename shopping list",
        exists=lambda: _ListExists(db, list_id),
        not_found_detail=LIST_NOT_FOUND,
    )


def DeleteShoppingList(db: Session, user: UserContext, list_id: int) -> None:
    def _work() -> None:
        shopping_list = _GetOwnedList(db, user, list_id)
        db.delete(shopping_list)

    RunUnitOfWork(
        db,
        _work,
        label="delete shopping list",
        exists=lambda: _ListExists(db, list_id),
        not_found_detail=LIST_NOT_FOUND,
    )
    logger.info("shopping list %s deleted by %s", list_id, user.Username)


def _MutateItems(db: Session, user: UserContext, list_id: int, label: str, mutate) -> ShoppingList:
    def _work() -> ShoppingList:
        shopping_list = _GetOwnedList(db, user, list_id)
        values, changed = mutate(ParseItems(shopping_list.Items))
        if changed:
            _StoreItems(db, shopping_list, values)
        return shopping_list

    return RunUnitOfWork(
        db,
        _work,
        label=label,
        exists=lambda: _ListExists(db, list_id),
        not_found_detail=LIST_NOT_FOUND,
    )


def AddItem(db: Session, user: UserContext, list_id: int, item_name: str) -> ShoppingList:
    normalized = ValidateItemName(item_name)

    def _mutate(values: list[str]) -> tuple[list[str], bool]:
        return WithItemAdded(values, _ResolveProductName(db, normalized))

    return _MutateItems(db, user, list_id, "add shopping list item", _mutate)


def _MatchItemName(db: Session, values: list[str], item_name: str) -> str:
    """Pick the stored spelling an item request refers to.

    An exact entry in the list wins, which keeps orphaned entries reachable.
    Otherwise the catalog spelling is used, matched ignoring case.
    """
    if any(DecodeItem(value).ProductName == item_name for value in values):
        return item_name
    product = db.query(Product).filter(func.lower(Product.Name) == item_name.lower()).first()
    return product.Name if product else item_name


def RemoveItem(db: Session, user: UserContext, list_id: int, item_name: str) -> ShoppingList:
    normalized = NormalizeLabel(item_name)

    def _mutate(values: list[str]) -> tuple[list[str], bool]:
        return WithItemRemoved(values, _MatchItemName(db, values, normalized))

    return _MutateItems(db, user, list_id, "remove shopping list item", _mutate)


def SetItemAcquired(
    db: Session,
    user: UserContext,
    list_id: int,
    item_name: str,
    acquired: bool,
) -> ShoppingList:
    normalized = NormalizeLabel(item_name)

    def _mutate(values: list[str]) -> tuple[list[str], bool]:
        return WithItemAcquired(values, _MatchItemName(db, values, normalized), acquired)

    return _MutateItems(db, user, list_id, "set shopping list item acquired", _mutate)
