import logging
import os

from sqlalchemy.orm import Session

from shoplists.modules.auth.deps import ADMIN_ROLE
from shoplists.modules.auth.models import User
from shoplists.modules.auth.service import HashPassword
from shoplists.modules.catalog.models import Category, Product

logger = logging.getLogger("app.bootstrap")

DEFAULT_CATALOG: dict[str, list[str]] = {
    "Fruits": ["Apple", "Banana"],
    "Vegetables": ["Carrot", "Broccoli"],
    "Dairy": ["Milk", "Cheese"],
    "Meat": ["Chicken", "Venison"],
    "Bakery": ["Bread", "Kalakukko"],
    "Beverages": ["Coffee", "Water"],
    "Snacks": ["Chips", "Pretzels"],
    "Frozen Foods": ["Ice Cream"],
    "Condiments": ["Ketchup", "Guacamole"],
    "Seafood": ["Salmon", "Herring"],
    "Grains": ["Rice", "Bulgur"],
    "Spices": ["Cinnamon", "Cardamom"],
    "Nuts": [],
    "Legumes": [],
    "Herbs": [],
}


def _env_truthy(name: str) -> bool:
    value = os.getenv(name, "").strip().lower()
    return value in {"1", "true", "yes", "on"}


def EnsureAdminUser(db: Session) -> User | None:
    username = os.getenv("ADMIN_USERNAME", "").strip()
    password = os.getenv("ADMIN_PASSWORD", "")
    if not username or not password:
        logger.info("skipping admin bootstrap (ADMIN_USERNAME/ADMIN_PASSWORD not set)")
        return None

    user = db.query(User).filter(User.Username == username).first()
    if user:
        if user.Role != ADMIN_ROLE:
            user.Role = ADMIN_ROLE
            db.add(user)
            db.commit()
            logger.info("promoted %s to Admin", username)
        return user

    user = User(
        Username=username,
        PasswordHash=HashPassword(password),
        Email=os.getenv("ADMIN_EMAIL", "").strip().lower() or None,
        Role=ADMIN_ROLE,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("created admin user %s", username)
    return user


def SeedCatalog(db: Session, catalog: dict[str, list[str]] | None = None) -> int:
    """Fill an empty catalog with the default categories and products.

    Returns the number of products created. A catalog that already has
    categories is left alone.
    """
    if db.query(Category.Id).first() is not None:
        logger.info("catalog already populated, skipping seed")
        return 0

    created = 0
    for category_name, product_names in (catalog or DEFAULT_CATALOG).items():
        category = Category(Name=category_name)
        db.add(category)
        db.flush()
        for product_name in product_names:
            db.add(Product(Name=product_name, CategoryId=category.Id))
            created += 1
    db.commit()
    logger.info("seeded catalog with %s products", created)
    return created


def RunStartupTasks(db: Session) -> None:
    EnsureAdminUser(db)
    if _env_truthy("SEED_CATALOG"):
        SeedCatalog(db)
