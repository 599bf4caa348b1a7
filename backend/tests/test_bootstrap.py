from shoplists.core import bootstrap
from shoplists.core.bootstrap import DEFAULT_CATALOG, EnsureAdminUser, SeedCatalog
from shoplists.modules.auth.models import User
from shoplists.modules.catalog.models import Category, Product


def test_seed_catalog_fills_empty_catalog(db):
    created = SeedCatalog(db)
    assert created == sum(len(names) for names in DEFAULT_CATALOG.values())
    assert db.query(Category).count() == len(DEFAULT_CATALOG)
    apple = db.query(Product).filter(Product.Name == "Apple").one()
    assert apple.Category.Name == "Fruits"


def test_seed_catalog_skips_populated_catalog(db, catalog):
    assert SeedCatalog(db) == 0
    assert db.query(Product).count() == 3


def test_ensure_admin_user_skipped_without_env(db, monkeypatch):
    monkeypatch.delenv("ADMIN_USERNAME", raising=False)
    monkeypatch.delenv("ADMIN_PASSWORD", raising=False)
    assert EnsureAdminUser(db) is None
    assert db.query(User).count() == 0


def test_ensure_admin_user_creates_admin(db, monkeypatch):
    monkeypatch.setenv("ADMIN_USERNAME", "admina")
    monkeypatch.setenv("ADMIN_PASSWORD", "Test1234_")
    monkeypatch.setattr(bootstrap, "HashPassword", lambda _value: "hashed-password")

    user = EnsureAdminUser(db)

    assert user.Role == "Admin"
    assert user.PasswordHash == "hashed-password"


def test_ensure_admin_user_promotes_existing_user(db, alice, monkeypatch):
    monkeypatch.setenv("ADMIN_USERNAME", "alice")
    monkeypatch.setenv("ADMIN_PASSWORD", "whatever1")

    user = EnsureAdminUser(db)

    assert user.Role == "Admin"
    assert db.query(User).count() == 1
