import logging

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from shoplists.core.errors import AccessDeniedError, ConflictError, NotFoundError
from shoplists.core.transactions import RunUnitOfWork
from shoplists.modules.auth.deps import NowUtc, UserContext
from shoplists.modules.catalog.models import Category, Product
from shoplists.modules.catalog.utils.rbac import IsAdmin
from shoplists.modules.shopping.services.propagation_service import (
    RemoveProductsFromLists,
    RenameProductInLists,
)
from shoplists.modules.shopping.utils.item_codec import ACQUIRED_MARKER, IsEncodableName

logger = logging.getLogger("catalog")

MAX_NAME_LENGTH = 100

CATEGORY_NOT_FOUND = "Category not found"
PRODUCT_NOT_FOUND = "Product not found"
DUPLICATE_CATEGORY = "A category with the same name already exists."
DUPLICATE_PRODUCT = "A product with the same name already exists."


def NormalizeName(value: str | None) -> str:
    if value is None:
        return ""
    return " ".join(value.strip().split())


def ValidateCatalogName(value: str | None, label: str) -> str:
    normalized = NormalizeName(value)
    if not normalized:
        raise ValueError(f"{label} name is required")
    if len(normalized) > MAX_NAME_LENGTH:
        raise ValueError(f"{label} name is too long")
    if not IsEncodableName(normalized):
        raise ValueError(f"{label} name cannot start with {ACQUIRED_MARKER}")
    return normalized


def _EnsureAdmin(user: UserContext) -> None:
    if not IsAdmin(user):
        raise AccessDeniedError("Access denied")


def _GetCategory(db: Session, category_id: int) -> Category:
    category = db.query(Category).filter(Category.Id == category_id).first()
    if not category:
        raise NotFoundError(CATEGORY_NOT_FOUND)
    return category


def _GetProduct(db: Session, product_id: int) -> Product:
    product = db.query(Product).filter(Product.Id == product_id).first()
    if not product:
        raise NotFoundError(PRODUCT_NOT_FOUND)
    return product


def _CategoryExists(db: Session, category_id: int) -> bool:
    return db.query(Category.Id).filter(Category.Id == category_id).first() is not None


def _ProductExists(db: Session, product_id: int) -> bool:
    return db.query(Product.Id).filter(Product.Id == product_id).first() is not None


def _EnsureUniqueCategoryName(db: Session, name: str, exclude_id: int | None = None) -> None:
    query = db.query(Category.Id).filter(func.lower(Category.Name) == name.lower())
    if exclude_id is not None:
        query = query.filter(Category.Id != exclude_id)
    if query.first():
        raise ConflictError(DUPLICATE_CATEGORY)


def _EnsureUniqueProductName(db: Session, name: str, exclude_id: int | None = None) -> None:
    query = db.query(Product.Id).filter(func.lower(Product.Name) == name.lower())
    if exclude_id is not None:
        query = query.filter(Product.Id != exclude_id)
    if query.first():
        raise ConflictError(DUPLICATE_PRODUCT)


def ListCategories(db: Session) -> list[Category]:
    return db.query(Category).order_by(Category.Name.asc(), Category.Id.asc()).all()


def GetCategory(db: Session, category_id: int) -> Category:
    return _GetCategory(db, category_id)


def CreateCategory(db: Session, user: UserContext, name: str) -> Category:
    _EnsureAdmin(user)
    normalized = ValidateCatalogName(name, "Category")

    def _work() -> Category:
        _EnsureUniqueCategoryName(db, normalized)
        record = Category(Name=normalized, UpdatedAt=NowUtc())
        db.add(record)
        db.flush()
        return record

    try:
        record = RunUnitOfWork(db, _work, label="create category")
    except IntegrityError as exc:
        raise ConflictError(DUPLICATE_CATEGORY) from exc
    logger.info("category %s created by %s", record.Name, user.Username)
    return record


def RenameCategory(db: Session, user: UserContext, category_id: int, name: str) -> Category:
    _EnsureAdmin(user)
    normalized = ValidateCatalogName(name, "Category")

    def _work() -> Category:
        category = _GetCategory(db, category_id)
        _EnsureUniqueCategoryName(db, normalized, exclude_id=category.Id)
        category.Name = normalized
        category.UpdatedAt = NowUtc()
        db.add(category)
        return category

    try:
        return RunUnitOfWork(
            db,
            _work,
            label="rename category",
            exists=lambda: _CategoryExists(db, category_id),
            not_found_detail=CATEGORY_NOT_FOUND,
        )
    except IntegrityError as exc:
        raise ConflictError(DUPLICATE_CATEGORY) from exc


def DeleteCategory(db: Session, user: UserContext, category_id: int) -> list[str]:
    """Delete a category, its products, and every list item naming those products.

    Returns the names of the removed products.
    """
    _EnsureAdmin(user)

    def _work() -> list[str]:
        category = _GetCategory(db, category_id)
        products = (
            db.query(Product)
            .filter(Product.CategoryId == category.Id)
            .order_by(Product.Id.asc())
            .all()
        )
        product_names = [product.Name for product in products]
        for product in products:
            db.delete(product)
        if product_names:
            RemoveProductsFromLists(db, product_names)
        db.delete(category)
        return product_names

    removed = RunUnitOfWork(
        db,
        _work,
        label="delete category",
        exists=lambda: _CategoryExists(db, category_id),
        not_found_detail=CATEGORY_NOT_FOUND,
    )
    logger.info(
        "category %s deleted by %s with %s products",
        category_id,
        user.Username,
        len(removed),
    )
    return removed


def ListProducts(db: Session, category_id: int | None = None) -> list[Product]:
    query = db.query(Product)
    if category_id is not None:
        query = query.filter(Product.CategoryId == category_id)
    return query.order_by(Product.Name.asc(), Product.Id.asc()).all()


def ListProductsOutsideCategory(db: Session, category_id: int) -> list[Product]:
    _GetCategory(db, category_id)
    return (
        db.query(Product)
        .filter(Product.CategoryId != category_id)
        .order_by(Product.Name.asc(), Product.Id.asc())
        .all()
    )


def GetProduct(db: Session, product_id: int) -> Product:
    return _GetProduct(db, product_id)


def FindProductByName(db: Session, name: str) -> Product | None:
    normalized = NormalizeName(name)
    if not normalized:
        return None
    return db.query(Product).filter(func.lower(Product.Name) == normalized.lower()).first()


def CreateProduct(db: Session, user: UserContext, name: str, category_id: int) -> Product:
    _EnsureAdmin(user)
    normalized = ValidateCatalogName(name, "Product")

    def _work() -> Product:
        _EnsureUniqueProductName(db, normalized)
        _GetCategory(db, category_id)
        record = Product(Name=normalized, CategoryId=category_id, UpdatedAt=NowUtc())
        db.add(record)
        db.flush()
        return record

    try:
        record = RunUnitOfWork(db, _work, label="create product")
    except IntegrityError as exc:
        raise ConflictError(DUPLICATE_PRODUCT) from exc
    logger.info("product %s created by %s", record.Name, user.Username)
    return record


def _ApplyRename(db: Session, product: Product, new_name: str) -> str:
    old_name = product.Name
    if old_name == new_name:
        return old_name
    _EnsureUniqueProductName(db, new_name, exclude_id=product.Id)
    RenameProductInLists(db, old_name, new_name)
    product.Name = new_name
    product.UpdatedAt = NowUtc()
    db.add(product)
    return old_name


def _ApplyMove(db: Session, product: Product, category_id: int) -> None:
    if product.CategoryId == category_id:
        return
    _GetCategory(db, category_id)
    product.CategoryId = category_id
    product.UpdatedAt = NowUtc()
    db.add(product)


def RenameProduct(db: Session, user: UserContext, product_id: int, name: str) -> str:
    """Rename a product and every shopping-list item that names it.

    Returns the previous name.
    """
    _EnsureAdmin(user)
    normalized = ValidateCatalogName(name, "Product")

    def _work() -> str:
        product = _GetProduct(db, product_id)
        return _ApplyRename(db, product, normalized)

    try:
        old_name = RunUnitOfWork(
            db,
            _work,
            label="rename product",
            exists=lambda: _ProductExists(db, product_id),
            not_found_detail=PRODUCT_NOT_FOUND,
        )
    except IntegrityError as exc:
        raise ConflictError(DUPLICATE_PRODUCT) from exc
    logger.info("product %s renamed from %s to %s by %s", product_id, old_name, normalized, user.Username)
    return old_name


def MoveProduct(db: Session, user: UserContext, product_id: int, category_id: int) -> Product:
    _EnsureAdmin(user)

    def _work() -> Product:
        product = _GetProduct(db, product_id)
        _ApplyMove(db, product, category_id)
        return product

    return RunUnitOfWork(
        db,
        _work,
        label="move product",
        exists=lambda: _ProductExists(db, product_id),
        not_found_detail=PRODUCT_NOT_FOUND,
    )


def UpdateProduct(
    db: Session,
    user: UserContext,
    product_id: int,
    name: str,
    category_id: int,
) -> Product:
    _EnsureAdmin(user)
    normalized = ValidateCatalogName(name, "Product")

    def _work() -> Product:
        product = _GetProduct(db, product_id)
        # Resolve the target category first so a bad id leaves the name untouched.
        _ApplyMove(db, product, category_id)
        _ApplyRename(db, product, normalized)
        return product

    try:
        return RunUnitOfWork(
            db,
            _work,
            label="update product",
            exists=lambda: _ProductExists(db, product_id),
            not_found_detail=PRODUCT_NOT_FOUND,
        )
    except IntegrityError as exc:
        raise ConflictError(DUPLICATE_PRODUCT) from exc


def DeleteProduct(db: Session, user: UserContext, product_id: int) -> str:
    """Delete a product and drop it from every shopping list. Returns its name."""
    _EnsureAdmin(user)

    def _work() -> str:
        product = _GetProduct(db, product_id)
        product_name = product.Name
        db.delete(product)
        RemoveProductsFromLists(db, [product_name])
        return product_name

    product_name = RunUnitOfWork(
        db,
        _work,
        label="delete product",
        exists=lambda: _ProductExists(db, product_id),
        not_found_detail=PRODUCT_NOT_FOUND,
    )
    logger.info("product %s deleted by %s", product_name, user.Username)
    return product_name
