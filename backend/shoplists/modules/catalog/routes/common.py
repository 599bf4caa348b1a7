import logging

from fastapi import HTTPException, status

from shoplists.core.errors import (
    AccessDeniedError,
    ConcurrentModificationError,
    ConflictError,
    NotFoundError,
)
from shoplists.modules.catalog.models import Category, Product
from shoplists.modules.catalog.schemas import CategoryDetailOut, CategoryOut, ProductOut

logger = logging.getLogger("catalog")


def handle_db_error(exc: Exception) -> None:
    logger.exception("catalog database error")
    raise HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail="Catalog storage not initialized. Run alembic upgrade head.",
    ) from exc


def handle_catalog_error(exc: Exception) -> None:
    detail = str(exc)
    if isinstance(exc, NotFoundError):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=detail) from exc
    if isinstance(exc, AccessDeniedError):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=detail) from exc
    if isinstance(exc, (ConflictError, ConcurrentModificationError)):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=detail) from exc
    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail) from exc


def BuildProductOut(product: Product) -> ProductOut:
    category = product.Category
    return ProductOut(
        Id=product.Id,
        Name=product.Name,
        CategoryId=product.CategoryId,
        CategoryName=category.Name if category else None,
        CreatedAt=product.CreatedAt,
        UpdatedAt=product.UpdatedAt,
    )


def BuildCategoryOut(category: Category) -> CategoryOut:
    return CategoryOut(
        Id=category.Id,
        Name=category.Name,
        CreatedAt=category.CreatedAt,
        UpdatedAt=category.UpdatedAt,
    )


def BuildCategoryDetailOut(category: Category) -> CategoryDetailOut:
    return CategoryDetailOut(
        Id=category.Id,
        Name=category.Name,
        CreatedAt=category.CreatedAt,
        UpdatedAt=category.UpdatedAt,
        Products=[BuildProductOut(product) for product in category.Products],
    )
