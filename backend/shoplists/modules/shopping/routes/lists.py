import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import ProgrammingError
from sqlalchemy.orm import Session

from shoplists.core.errors import AccessDeniedError, ConcurrentModificationError, NotFoundError
from shoplists.db import GetDb
from shoplists.modules.auth.deps import RequireAuthenticated, UserContext
from shoplists.modules.shopping.models import ShoppingList
from shoplists.modules.shopping.schemas import (
    ShoppingListCreate,
    ShoppingListItemAcquiredRequest,
    ShoppingListItemOut,
    ShoppingListItemRequest,
    ShoppingListOut,
    ShoppingListUpdate,
)
from shoplists.modules.shopping.services.lists_service import (
    AddItem,
    CreateShoppingList,
    DeleteShoppingList,
    GetItemEntries,
    GetShoppingList,
    ListShoppingLists,
    RemoveItem,
    RenameShoppingList,
    SetItemAcquired,
)

router = APIRouter()
logger = logging.getLogger("shopping.lists")


def _handle_db_error(exc: Exception) -> None:
    logger.exception("shopping lists database error")
    raise HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail="Shopping storage not initialized. Run alembic upgrade head.",
    ) from exc


def _handle_list_error(exc: Exception) -> None:
    detail = str(exc)
    if isinstance(exc, NotFoundError):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=detail) from exc
    if isinstance(exc, AccessDeniedError):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=detail) from exc
    if isinstance(exc, ConcurrentModificationError):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=detail) from exc
    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail) from exc


def _BuildShoppingListOut(shopping_list: ShoppingList) -> ShoppingListOut:
    return ShoppingListOut(
        Id=shopping_list.Id,
        OwnerUserName=shopping_list.OwnerUserName,
        Name=shopping_list.Name,
        Items=[
            ShoppingListItemOut(ProductName=entry.ProductName, IsAcquired=entry.Acquired)
            for entry in GetItemEntries(shopping_list)
        ],
        CreatedAt=shopping_list.CreatedAt,
        UpdatedAt=shopping_list.UpdatedAt,
    )


@router.get("", response_model=list[ShoppingListOut])
def ListShoppingListItems(
    db: Session = Depends(GetDb),
    user: UserContext = Depends(RequireAuthenticated),
) -> list[ShoppingListOut]:
    try:
        return [_BuildShoppingListOut(entry) for entry in ListShoppingLists(db, user)]
    except ValueError as exc:
        _handle_list_error(exc)
    except ProgrammingError as exc:
        _handle_db_error(exc)


@router.post("", response_model=ShoppingListOut, status_code=status.HTTP_201_CREATED)
def CreateShoppingListItem(
    payload: ShoppingListCreate,
    db: Session = Depends(GetDb),
    user: UserContext = Depends(RequireAuthenticated),
) -> ShoppingListOut:
    try:
        record = CreateShoppingList(db, user, payload.Name, payload.ProductIds)
        return _BuildShoppingListOut(record)
    except ValueError as exc:
        _handle_list_error(exc)
    except ProgrammingError as exc:
        _handle_db_error(exc)


@router.get("/{list_id}", response_model=ShoppingListOut)
def GetShoppingListItem(
    list_id: int,
    db: Session = Depends(GetDb),
    user: UserContext = Depends(RequireAuthenticated),
) -> ShoppingListOut:
    try:
        return _BuildShoppingListOut(GetShoppingList(db, user, list_id))
    except ValueError as exc:
        _handle_list_error(exc)
    except ProgrammingError as exc:
        _handle_db_error(exc)


@router.put("/{list_id}", response_model=ShoppingListOut)
def UpdateShoppingListItem(
    list_id: int,
    payload: ShoppingListUpdate,
    db: Session = Depends(GetDb),
    user: UserContext = Depends(RequireAuthenticated),
) -> ShoppingListOut:
    try:
        return _BuildShoppingListOut(RenameShoppingList(db, user, list_id, payload.Name))
    except ValueError as exc:
        _handle_list_error(exc)
    except ProgrammingError as exc:
        _handle_db_error(exc)


@router.delete("/{list_id}", status_code=status.HTTP_204_NO_CONTENT)
def DeleteShoppingListItem(
    list_id: int,
    db: Session = Depends(GetDb),
    user: UserContext = Depends(RequireAuthenticated),
) -> None:
    try:
        DeleteShoppingList(db, user, list_id)
    except ValueError as exc:
        _handle_list_error(exc)
    except ProgrammingError as exc:
        _handle_db_error(exc)


@router.post("/{list_id}/items", response_model=ShoppingListOut)
def AddShoppingListEntry(
    list_id: int,
    payload: ShoppingListItemRequest,
    db: Session = Depends(GetDb),
    user: UserContext = Depends(RequireAuthenticated),
) -> ShoppingListOut:
    try:
        return _BuildShoppingListOut(AddItem(db, user, list_id, payload.Item))
    except ValueError as exc:
        _handle_list_error(exc)
    except ProgrammingError as exc:
        _handle_db_error(exc)


@router.delete("/{list_id}/items", response_model=ShoppingListOut)
def RemoveShoppingListEntry(
    list_id: int,
    item: str,
    db: Session = Depends(GetDb),
    user: UserContext = Depends(RequireAuthenticated),
) -> ShoppingListOut:
    try:
        return _BuildShoppingListOut(RemoveItem(db, user, list_id, item))
    except ValueError as exc:
        _handle_list_error(exc)
    except ProgrammingError as exc:
        _handle_db_error(exc)


@router.put("/{list_id}/items/acquired", response_model=ShoppingListOut)
def SetShoppingListEntryAcquired(
    list_id: int,
    payload: ShoppingListItemAcquiredRequest,
    db: Session = Depends(GetDb),
    user: UserContext = Depends(RequireAuthenticated),
) -> ShoppingListOut:
    try:
        record = SetItemAcquired(db, user, list_id, payload.Item, payload.IsAcquired)
        return _BuildShoppingListOut(record)
    except ValueError as exc:
        _handle_list_error(exc)
    except ProgrammingError as exc:
        _handle_db_error(exc)
