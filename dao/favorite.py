from typing import List
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from configs import db
from db.models.favorite import Favorite
from db.models.product import Product
from utils.errors import Conflict, NotFound
from utils.validators import parse_int


def list_favorites_by_client(client_id: int) -> List[Favorite]:
    return Favorite.query.filter_by(client_id=client_id).order_by(Favorite.id.asc()).all()


def is_favorite(client_id: int, product_id: int) -> bool:
    q = Favorite.query.filter_by(client_id=client_id, product_id=product_id)
    return db.session.query(q.exists()).scalar()


def add_favorite(client_id: int, product_id) -> Favorite:
    """A (client, product) pair is stored at most once."""
    product_id = parse_int(product_id, "productId")
    if not db.session.get(Product, product_id):
        raise NotFound("Product not found")
    if is_favorite(client_id, product_id):
        raise Conflict("Product is already a favorite")
    fav = Favorite(client_id=client_id, product_id=product_id)
    db.session.add(fav)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise Conflict("Product is already a favorite")
    except SQLAlchemyError:
        db.session.rollback()
        raise
    return fav


def remove_favorite(client_id: int, product_id: int) -> bool:
    n = Favorite.query.filter_by(client_id=client_id, product_id=product_id).delete()
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise
    return n > 0
