"""
Seed the database with an admin, sample vendors, a customer, the default
categories and a few products per vendor.

Usage:
  python -m marketplace.seed            # add sample data
  python -m marketplace.seed --reset    # wipe all rows first
"""

import argparse
import asyncio

from sqlalchemy import delete

from marketplace.core.logging import setup_logging, get_logger
from marketplace.core.security import hash_password
from marketplace.db.base import Base
from marketplace.db.session import SessionLocal, engine
from marketplace.models import User, Vendor, Product, Booking, Category

logger = get_logger(__name__)

ADMIN = {"name": "Admin User", "email": "admin@gmail.com", "password": "eventplanner", "phone": "1234567890"}
CUSTOMER = {"name": "Customer User", "email": "customer@example.com", "password": "password123", "phone": "3456789012"}

CATEGORIES = [
    ("Decoration", "Venue styling, flowers and themed setups", "🎀"),
    ("Catering", "Food and beverage services", "🍽️"),
    ("Lighting", "Sound, lighting and stage effects", "💡"),
    ("Event Hall", "Venues and banquet halls", "🏛️"),
]

# (owner, vendor profile, products)
VENDORS = [
    (
        {"name": "Vendor User", "email": "vendor@example.com", "password": "password123", "phone": "2345678901"},
        {
            "name": "Elegant Events",
            "category": "Decoration",
            "description": "Premium event decoration services for all occasions",
            "price": 1500,
            "images": ["decoration1.jpg", "decoration2.jpg"],
        },
        [
            ("Basic Decoration Package", "Simple and elegant decoration for small events", 500,
             "basic_decoration.jpg", ["Basic setup", "Standard decorations", "Setup and cleanup included"]),
            ("Premium Decoration Package", "Luxurious decoration for medium to large events", 1200,
             "premium_decoration.jpg", ["Premium setup", "Luxury decorations", "Custom themes", "Setup and cleanup included"]),
        ],
    ),
    (
        {"name": "Catering Owner", "email": "catering@example.com", "password": "password123", "phone": "4567890123"},
        {
            "name": "Gourmet Catering",
            "category": "Catering",
            "description": "Exquisite catering services with a wide range of cuisines",
            "price": 2500,
            "images": ["catering1.jpg", "catering2.jpg"],
        },
        [
            ("Standard Catering Package", "Catering service for up to 50 people", 1500,
             "standard_catering.jpg", ["Up to 50 people", "3-course meal", "Vegetarian options"]),
            ("Deluxe Catering Package", "Premium catering service for up to 100 people", 3000,
             "deluxe_catering.jpg", ["Up to 100 people", "5-course meal", "Multiple cuisine options", "Bar service"]),
        ],
    ),
    (
        {"name": "Lighting Owner", "email": "lighting@example.com", "password": "password123", "phone": "5678901234"},
        {
            "name": "Sound Masters",
            "category": "Lighting",
            "description": "Professional sound and lighting services for events",
            "price": 1200,
            "images": ["lighting1.jpg", "lighting2.jpg"],
        },
        [
            ("Basic Lighting Package", "Professional lighting services for 4 hours", 800,
             "basic_lighting.jpg", ["4 hours service", "Standard lighting setup", "Basic effects"]),
            ("Premium Lighting Package", "Advanced lighting setup for 6 hours", 1500,
             "premium_lighting.jpg", ["6 hours service", "Advanced lighting setup", "Custom effects", "DJ coordination"]),
        ],
    ),
]


def _user(data: dict, role: str) -> User:
    return User(
        name=data["name"],
        email=data["email"],
        hashed_password=hash_password(data["password"]),
        phone=data["phone"],
        role=role,
    )


async def seed(reset: bool = False) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with SessionLocal() as db:
        if reset:
            for model in (Booking, Product, Vendor, Category, User):
                await db.execute(delete(model))
            logger.info("seed_reset")

        for name, description, icon in CATEGORIES:
            db.add(Category(name=name, description=description, icon=icon, is_active=True))

        db.add(_user(ADMIN, "admin"))
        db.add(_user(CUSTOMER, "customer"))

        for owner, profile, products in VENDORS:
            user = _user(owner, "vendor")
            db.add(user)
            await db.flush()

            vendor = Vendor(
                user_id=user.id,
                owner_name=user.name,
                email=user.email,
                phone=user.phone,
                status="active",
                reviews=[],
                **profile,
            )
            db.add(vendor)
            await db.flush()

            for name, description, price, image, features in products:
                db.add(
                    Product(
                        vendor_id=vendor.id,
                        name=name,
                        description=description,
                        price=price,
                        category=profile["category"],
                        images=[{"url": image, "name": name, "size": 1024}],
                        features=features,
                        is_available=True,
                    )
                )
            logger.info("seed_vendor_created", vendor=vendor.name, products=len(products))

        await db.commit()

    await engine.dispose()
    logger.info("seed_completed")


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed the marketplace database")
    parser.add_argument("--reset", action="store_true", help="delete existing rows first")
    args = parser.parse_args()

    setup_logging()
    asyncio.run(seed(reset=args.reset))


if __name__ == "__main__":
    main()
