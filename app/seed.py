# app/seed.py
"""
Reset the catalog with sample data.

    python -m app.seed

Deletes carts, products and users, then inserts an admin account and
the sample products (attributed to that admin).
"""
import logging
import sys

from sqlmodel import Session

from app.core.security import hash_password
from app.database import create_db_and_tables, engine
from app.models.product import Product
from app.models.user import User
from app.repositories.cart_repo import CartRepository
from app.repositories.product_repo import ProductRepository
from app.repositories.user_repo import UserRepository

logger = logging.getLogger(__name__)

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "123456"

SAMPLE_PRODUCTS = [
    {
        "name": "Classic Oxford Button-Down Shirt",
        "description": "Tailored fit oxford shirt in breathable cotton.",
        "price": 39.99,
        "discount_price": 34.99,
        "count_in_stock": 20,
        "sku": "OX-SH-001",
        "category": "Top Wear",
        "brand": "Urban Threads",
        "sizes": ["S", "M", "L", "XL"],
        "colors": ["Red", "Blue", "Yellow"],
        "collections": "Business Casual",
        "material": "Cotton",
        "gender": "Men",
        "images": [
            {"url": "https://picsum.photos/500/500?random=39", "alt_text": "Oxford shirt front"},
        ],
        "rating": 4.5,
        "num_reviews": 12,
    },
    {
        "name": "Slim-Fit Stretch Shirt",
        "description": "Slim-fit shirt with a touch of stretch for all-day comfort.",
        "price": 29.99,
        "discount_price": 24.99,
        "count_in_stock": 35,
        "sku": "SLIM-SH-002",
        "category": "Top Wear",
        "brand": "Modern Fit",
        "sizes": ["S", "M", "L", "XL"],
        "colors": ["Black", "Navy Blue", "Burgundy"],
        "collections": "Formal Wear",
        "material": "Cotton Blend",
        "gender": "Men",
        "images": [
            {"url": "https://picsum.photos/500/500?random=41", "alt_text": "Slim-fit shirt front"},
        ],
        "rating": 4.8,
        "num_reviews": 15,
    },
    {
        "name": "Knit Jogger Pants",
        "description": "Soft knit joggers with an elastic waistband.",
        "price": 45.0,
        "count_in_stock": 30,
        "sku": "BW-W-001",
        "category": "Bottom Wear",
        "brand": "ComfyFit",
        "sizes": ["XS", "S", "M", "L"],
        "colors": ["Black", "Gray", "Beige"],
        "collections": "Lounge Wear",
        "material": "Cotton Blend",
        "gender": "Women",
        "images": [
            {"url": "https://picsum.photos/500/500?random=51", "alt_text": "Knit joggers"},
        ],
        "rating": 4.1,
        "num_reviews": 8,
    },
]


def seed_data(session: Session) -> User:
    """
    Wipe and re-insert the sample data. Returns the admin user.
    """
    CartRepository().delete_all(session)
    products = ProductRepository()
    users = UserRepository()
    products.delete_all(session)
    users.delete_all(session)

    admin = users.create(
        session,
        User(
            name="Admin User",
            email=ADMIN_EMAIL,
            password_hash=hash_password(ADMIN_PASSWORD),
            role="admin",
        ),
    )

    for data in SAMPLE_PRODUCTS:
        products.create(session, Product(**data, is_published=True, user_id=admin.id))

    return admin


def main() -> int:
    logging.basicConfig(level=logging.INFO)
    try:
        create_db_and_tables()
        with Session(engine) as session:
            seed_data(session)
    except Exception:
        logger.exception("Error with data import")
        return 1
    logger.info("Data imported successfully (%d products)", len(SAMPLE_PRODUCTS))
    return 0


if __name__ == "__main__":
    sys.exit(main())
