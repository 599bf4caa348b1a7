import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import ProgrammingError
from sqlalchemy.orm import Session

from shoplists.db import GetDb
from shoplists.modules.auth.deps import RequireAdmin, RequireAuthenticated, UserContext
from shoplists.modules.catalog.routes.common import (
    BuildCategoryDetailOut,
    BuildCategoryOut,
    BuildProductOut,
    handle_catalog_error,
    handle_db_error,
)
from shoplists.modules.catalog.schemas import (
    CategoryCreate,
    CategoryDeleteResponse,
    CategoryDetailOut,
    CategoryOut,
    CategoryUpdate,
    ProductOut,
)
from shoplists.modules.catalog.services import (
    CreateCategory,
    DeleteCategory,
    GetCategory,
    ListCategories,
    ListProductsOutsideCategory,
    MoveProduct,
    RenameCategory,
)

router = APIRouter()
logger = logging.getLogger("catalog.categories")


@router.get("", response_model=list[CategoryOut])
def ListCategoryItems(
    db: Session = Depends(GetDb),
    user: UserContext = Depends(RequireAuthenticated),
) -> list[CategoryOut]:
    try:
        return [BuildCategoryOut(category) for category in ListCategories(db)]
    except ProgrammingError as exc:
        handle_db_error(exc)


@router.post("", response_model=CategoryOut, status_code=status.HTTP_201_CREATED)
def CreateCategoryItem(
    payload: CategoryCreate,
    db: Session = Depends(GetDb),
    user: UserContext = Depends(RequireAdmin),
) -> CategoryOut:
    try:
        return BuildCategoryOut(CreateCategory(db, user, payload.Name))
    except ValueError as exc:
        handle_catalog_error(exc)
    except ProgrammingError as exc:
        handle_db_error(exc)


@router.get("/{category_id}", response_model=CategoryDetailOut)
def GetCategoryItem(
    category_id: int,
    db: Session = Depends(GetDb),
    user: UserContext = Depends(RequireAuthenticated),
) -> CategoryDetailOut:
    try:
        return BuildCategoryDetailOut(GetCategory(db, category_id))
    except ValueError as exc:
        handle_catalog_error(exc)
    except ProgrammingError as exc:
        handle_db_error(exc)


@router.get("/{category_id}/available-products", response_model=list[ProductOut])
def ListAvailableProducts(
    category_id: int,
    db: Session = Depends(GetDb),
    user: UserContext = Depends(RequireAdmin),
) -> list[ProductOut]:
    try:
        return [BuildProductOut(product) for product in ListProductsOutsideCategory(db, category_id)]
    except ValueError as exc:
        handle_catalog_error(exc)
    except ProgrammingError as exc:
        handle_db_error(exc)


@router.put("/{category_id}", response_model=CategoryOut)
def UpdateCategoryItem(
    category_id: int,
    payload: CategoryUpdate,
    db: Session = Depends(GetDb),
    user: UserContext = Depends(RequireAdmin),
) -> CategoryOut:
    try:
        return BuildCategoryOut(RenameCategory(db, user, category_id, payload.Name))
    except ValueError as exc:
        handle_catalog_error(exc)
    except ProgrammingError as exc:
        handle_db_error(exc)


@router.put("/{category_id}/products/{product_id}", response_model=ProductOut)
def MoveProductToCategory(
    category_id: int,
    product_id: int,
    db: Session = Depends(GetDb),
    user: UserContext = Depends(RequireAdmin),
) -> ProductOut:
    try:
        return BuildProductOut(MoveProduct(db, user, product_id, category_id))
    except ValueError as exc:
        handle_catalog_error(exc)
    except ProgrammingError as exc:
        handle_db_error(exc)


@router.delete("/{category_id}", response_model=CategoryDeleteResponse)
def DeleteCategoryItem(
    category_id: int,
    db: Session = Depends(GetDb),
    user: UserContext = Depends(RequireAdmin),
) -> CategoryDeleteResponse:
    try:
        removed = DeleteCategory(db, user, category_id)
        return CategoryDeleteResponse(Id=category_id, RemovedProductNames=removed)
    except ValueError as exc:
        handle_catalog_error(exc)
    except ProgrammingError as exc:
        handle_db_error(exc)
