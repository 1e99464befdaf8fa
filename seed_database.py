"""
Create the tables and seed a development database.

Run this from the backend root:

    (.venv) python seed_database.py

It inserts a regular user, a staff admin and a handful of sample products
(only when they are not already present) and prunes expired API tokens.
"""

import random
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import func, select

from app.db.init_db import init_db
from app.db.session import SessionLocal
from app.models.product import Product
from app.models.user import User
from app.services.token_service import prune_expired_tokens
from app.services.user_service import slug_for_email

SEED_USERS = [
    {
        "first_name": "Base",
        "last_name": "User",
        "email": "test@example.com",
        "username": "testuser",
        "password": "Password123!",
        "is_staff": False,
    },
    {
        "first_name": "Admin",
        "last_name": "User",
        "email": "admin@example.com",
        "username": "admin",
        "password": "Admin123!",
        "is_staff": True,
    },
]

PRODUCT_WORDS = ["Classic", "Compact", "Deluxe", "Eco", "Premium", "Smart", "Travel", "Urban"]
PRODUCT_KINDS = ["Backpack", "Bottle", "Lamp", "Mug", "Notebook", "Speaker", "Watch"]
SAMPLE_PRODUCTS = 10


def seed_users(db) -> int:
    count_new = 0
    for data in SEED_USERS:
        exists = db.scalar(select(User.id).where(User.email == data["email"]))
        if exists:
            continue
        user = User(
            first_name=data["first_name"],
            last_name=data["last_name"],
            email=data["email"],
            username=data["username"],
            slug=slug_for_email(db, data["email"]),
            is_active=True,
            is_staff=data["is_staff"],
            email_verified_at=datetime.now(timezone.utc),
        )
        user.assign_password(data["password"])
        db.add(user)
        db.flush()
        count_new += 1
    return count_new


def seed_products(db, rng: random.Random) -> int:
    if db.scalar(select(func.count()).select_from(Product)):
        return 0
    for _ in range(SAMPLE_PRODUCTS):
        name = f"{rng.choice(PRODUCT_WORDS)} {rng.choice(PRODUCT_KINDS)} Product"
        db.add(
            Product(
                name=name,
                description=f"A sample {name.lower()} for local development.",
                price=Decimal(rng.randint(1000, 100000)) / 100,
                stock=rng.randint(0, 200),
            )
        )
    return SAMPLE_PRODUCTS


def main() -> None:
    init_db()
    db = SessionLocal()
    try:
        users = seed_users(db)
        products = seed_products(db, random.Random(42))
        db.commit()
        pruned = prune_expired_tokens(db)

        print(f"[INFO] Inserted {users} users")
        print(f"[INFO] Inserted {products} products")
        print(f"[INFO] Pruned {pruned} expired tokens")
        print("[INFO] Done.")
    finally:
        db.close()


if __name__ == "__main__":
    main()
