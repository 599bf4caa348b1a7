import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import ProgrammingError
from sqlalchemy.orm import Session

from shoplists.db import GetDb
from shoplists.modules.auth.deps import RequireAdmin, RequireAuthenticated, UserContext
from shoplists.modules.catalog.routes.common import BuildProductOut, handle_catalog_error, handle_db_error
from shoplists.modules.catalog.schemas import (
    ProductCreate,
    ProductDeleteResponse,
    ProductOut,
    ProductUpdate,
)
from shoplists.modules.catalog.services import (
    CreateProduct,
    DeleteProduct,
    GetProduct,
    ListProducts,
    UpdateProduct,
)

router = APIRouter()
logger = logging.getLogger("catalog.products")


@router.get("", response_model=list[ProductOut])
def ListProductItems(
    category_id: int | None = None,
    db: Session = Depends(GetDb),
    user: UserContext = Depends(RequireAuthenticated),
) -> list[ProductOut]:
    try:
        return [BuildProductOut(product) for product in ListProducts(db, category_id=category_id)]
    except ProgrammingError as exc:
        handle_db_error(exc)


@router.post("", response_model=ProductOut, status_code=status.HTTP_201_CREATED)
def CreateProductItem(
    payload: ProductCreate,
    db: Session = Depends(GetDb),
    user: UserContext = Depends(RequireAdmin),
) -> ProductOut:
    try:
        return BuildProductOut(CreateProduct(db, user, payload.Name, payload.CategoryId))
    except ValueError as exc:
        handle_catalog_error(exc)
    except ProgrammingError as exc:
        handle_db_error(exc)


@router.get("/{product_id}", response_model=ProductOut)
def GetProductItem(
    product_id: int,
    db: Session = Depends(GetDb),
    user: UserContext = Depends(RequireAuthenticated),
) -> ProductOut:
    try:
        return BuildProductOut(GetProduct(db, product_id))
    except ValueError as exc:
        handle_catalog_error(exc)
    except ProgrammingError as exc:
        handle_db_error(exc)


@router.put("/{product_id}", response_model=ProductOut)
def UpdateProductItem(
    product_id: int,
    payload: ProductUpdate,
    db: Session = Depends(GetDb),
    user: UserContext = Depends(RequireAdmin),
) -> ProductOut:
    try:
        product = UpdateProduct(db, user, product_id, payload.Name, payload.CategoryId)
        return BuildProductOut(product)
    except ValueError as exc:
        handle_catalog_error(exc)
    except ProgrammingError as exc:
        handle_db_error(exc)


@router.delete("/{product_id}", response_model=ProductDeleteResponse)
def DeleteProductItem(
    product_id: int,
    db: Session = Depends(GetDb),
    user: UserContext = Depends(RequireAdmin),
) -> ProductDeleteResponse:
    try:
        name = DeleteProduct(db, user, product_id)
        return ProductDeleteResponse(Id=product_id, Name=name)
    except ValueError as exc:
        handle_catalog_error(exc)
    except ProgrammingError as exc:
        handle_db_error(exc)
