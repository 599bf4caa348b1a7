import os

os.environ.setdefault("LOG_FILE_ENABLED", "false")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")
os.environ.setdefault("JWT_ACCESS_TTL_MINUTES", "15")
os.environ.setdefault("AUTH_PASSWORD_MIN_LENGTH", "8")
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from shoplists.db import Base
from shoplists.modules.auth.deps import UserContext
from shoplists.modules.auth.models import User
from shoplists.modules.catalog.models import Category, Product
from shoplists.modules.shopping.models import ShoppingList
from shoplists.modules.shopping.utils.item_codec import ParseItems, SerializeItems


@pytest.fixture
def db():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(engine)
        engine.dispose()


@pytest.fixture
def admin(db) -> UserContext:
    record = User(Username="admina", PasswordHash="unused", Role="Admin")
    db.add(record)
    db.commit()
    return UserContext(Id=record.Id, Username=record.Username, Role=record.Role)


@pytest.fixture
def alice(db) -> UserContext:
    record = User(Username="alice", PasswordHash="unused", Role="User")
    db.add(record)
    db.commit()
    return UserContext(Id=record.Id, Username=record.Username, Role=record.Role)


@pytest.fixture
def bob(db) -> UserContext:
    record = User(Username="bob", PasswordHash="unused", Role="User")
    db.add(record)
    db.commit()
    return UserContext(Id=record.Id, Username=record.Username, Role=record.Role)


@pytest.fixture
def catalog(db) -> dict[str, int]:
    """Fruits: Apple, Banana. Vegetables: Carrot. Returns name -> id for both."""
    fruits = Category(Name="Fruits")
    vegetables = Category(Name="Vegetables")
    db.add_all([fruits, vegetables])
    db.flush()
    apple = Product(Name="Apple", CategoryId=fruits.Id)
    banana = Product(Name="Banana", CategoryId=fruits.Id)
    carrot = Product(Name="Carrot", CategoryId=vegetables.Id)
    db.add_all([apple, banana, carrot])
    db.commit()
    return {
        "Fruits": fruits.Id,
        "Vegetables": vegetables.Id,
        "Apple": apple.Id,
        "Banana": banana.Id,
        "Carrot": carrot.Id,
    }


@pytest.fixture
def make_list(db):
    def _make(owner: str, items: list[str], name: str = "Weekly") -> int:
        record = ShoppingList(OwnerUserName=owner, Name=name, Items=SerializeItems(items))
        db.add(record)
        db.commit()
        return record.Id

    return _make


@pytest.fixture
def stored_items(db):
    def _read(list_id: int) -> list[str]:
        db.expire_all()
        record = db.query(ShoppingList).filter(ShoppingList.Id == list_id).one()
        return ParseItems(record.Items)

    return _read
