import pytest

from shoplists.core.errors import AccessDeniedError, ConflictError, NotFoundError
from shoplists.modules.catalog.models import Category, Product
from shoplists.modules.catalog.services import (
    CreateCategory,
    CreateProduct,
    FindProductByName,
    ListProducts,
    ListProductsOutsideCategory,
    MoveProduct,
    RenameCategory,
    UpdateProduct,
    ValidateCatalogName,
)


def test_validate_catalog_name_collapses_whitespace():
    assert ValidateCatalogName("  Ice   Cream ", "Product") == "Ice Cream"


@pytest.mark.parametrize("value", ["", "   ", None, "__ACQUIRED__Apple", "x" * 101])
def test_validate_catalog_name_rejects(value):
    with pytest.raises(ValueError):
        ValidateCatalogName(value, "Product")


def test_create_product_duplicate_is_case_insensitive(db, admin, catalog):
    with pytest.raises(ConflictError):
        CreateProduct(db, admin, "apple", catalog["Vegetables"])
    assert db.query(Product).count() == 3


def test_product_names_are_unique_across_categories(db, admin, catalog):
    with pytest.raises(ConflictError):
        CreateProduct(db, admin, "CARROT", catalog["Fruits"])


def test_create_product_requires_existing_category(db, admin, catalog):
    with pytest.raises(NotFoundError):
        CreateProduct(db, admin, "Mango", 999)
    assert FindProductByName(db, "Mango") is None


def test_create_product_requires_admin(db, alice, catalog):
    with pytest.raises(AccessDeniedError):
        CreateProduct(db, alice, "Mango", catalog["Fruits"])
    assert FindProductByName(db, "Mango") is None


def test_create_product(db, admin, catalog):
    product = CreateProduct(db, admin, "Mango", catalog["Fruits"])
    assert product.Id is not None
    assert product.Category.Name == "Fruits"
    assert FindProductByName(db, "mango").Id == product.Id


def test_create_category_duplicate_is_case_insensitive(db, admin, catalog):
    with pytest.raises(ConflictError):
        CreateCategory(db, admin, "FRUITS")
    assert db.query(Category).count() == 2


def test_create_category_requires_admin(db, alice):
    with pytest.raises(AccessDeniedError):
        CreateCategory(db, alice, "Dairy")


def test_rename_category(db, admin, catalog):
    category = RenameCategory(db, admin, catalog["Fruits"], "Fresh Fruit")
    assert category.Name == "Fresh Fruit"


def test_rename_category_to_own_name_in_other_case(db, admin, catalog):
    assert RenameCategory(db, admin, catalog["Fruits"], "fruits").Name == "fruits"


def test_rename_category_conflict(db, admin, catalog):
    with pytest.raises(ConflictError):
        RenameCategory(db, admin, catalog["Fruits"], "vegetables")


def test_move_product(db, admin, catalog):
    product = MoveProduct(db, admin, catalog["Apple"], catalog["Vegetables"])
    assert product.CategoryId == catalog["Vegetables"]
    assert [p.Name for p in ListProducts(db, category_id=catalog["Vegetables"])] == ["Apple", "Carrot"]


def test_move_product_to_missing_category(db, admin, catalog):
    with pytest.raises(NotFoundError):
        MoveProduct(db, admin, catalog["Apple"], 999)


def test_update_product_with_bad_category_keeps_name(db, admin, catalog, make_list, stored_items):
    list_id = make_list("alice", ["Apple"])
    with pytest.raises(NotFoundError):
        UpdateProduct(db, admin, catalog["Apple"], "Gala", 999)
    assert FindProductByName(db, "Apple") is not None
    assert stored_items(list_id) == ["Apple"]


def test_update_product_renames_and_moves(db, admin, catalog, make_list, stored_items):
    list_id = make_list("alice", ["__ACQUIRED__Apple"])
    product = UpdateProduct(db, admin, catalog["Apple"], "Gala", catalog["Vegetables"])
    assert product.Name == "Gala"
    assert product.CategoryId == catalog["Vegetables"]
    assert stored_items(list_id) == ["__ACQUIRED__Gala"]


def test_products_outside_category(db, catalog):
    names = [product.Name for product in ListProductsOutsideCategory(db, catalog["Fruits"])]
    assert names == ["Carrot"]


def test_products_outside_missing_category(db, catalog):
    with pytest.raises(NotFoundError):
        ListProductsOutsideCategory(db, 999)
