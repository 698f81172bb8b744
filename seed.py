# seed.py
import os

from configs import db
from dao import product as product_dao, user as user_dao
from db.models.category import Category
from db.models.user import User, UserRole

CATEGORIES = [
    ("Gros oeuvre", "Ciment, parpaings, sable, granulats"),
    ("Bois", "Charpente, panneaux, lambris"),
    ("Isolation", "Laines minérales, polystyrène, pare-vapeur"),
    ("Plomberie", "Tubes, raccords, sanitaires"),
    ("Électricité", "Câbles, gaines, tableaux"),
]


def seed_admin(username="admin", email="admin@materiaux.local", password=None) -> User:
    u = User.query.filter_by(email=email).first()
    if u:
        return u
    password = password or os.getenv("ADMIN_PASSWORD", "admin123")
    return user_dao.create_admin(username, email, password)


def seed_categories() -> int:
    added = 0
    for name, description in CATEGORIES:
        if not Category.query.filter_by(name=name).first():
            db.session.add(Category(name=name, description=description))
            added += 1
    db.session.commit()
    return added


def seed_demo() -> None:
    """One supplier with a few products and one client, for local runs."""
    if not User.query.filter_by(email="fournisseur@materiaux.local").first():
        user_dao.register_supplier(
            {
                "username": "fournisseur",
                "email": "fournisseur@materiaux.local",
                "password": "demo123",
                "companyName": "Négoce Durand",
                "contactName": "Paul Durand",
            }
        )
        supplier = User.query.filter_by(email="fournisseur@materiaux.local").one().supplier
        gros_oeuvre = Category.query.filter_by(name="Gros oeuvre").first()
        for name, price, stock in [
            ("Ciment 25kg", "12.50", 120),
            ("Parpaing 20x20x50", "1.35", 2000),
            ("Sable 0/4 big bag", "48.00", 0),
        ]:
            product_dao.create_product(
                supplier.id,
                {
                    "name": name,
                    "price": price,
                    "stock": stock,
                    "categoryId": gros_oeuvre.id if gros_oeuvre else None,
                },
            )
    if not User.query.filter_by(email="client@materiaux.local").first():
        user_dao.register_client(
            {
                "username": "client",
                "email": "client@materiaux.local",
                "password": "demo123",
                "firstName": "Alice",
                "lastName": "Martin",
            }
        )


if __name__ == "__main__":
    from app import create_app

    with create_app().app_context():
        seed_admin()
        n = seed_categories()
        seed_demo()
        print(f"Seeded admin, {n} new categories and demo accounts")
