# dao/product.py
from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError

from configs import db
from db.models.category import Category
from db.models.product import Product
from db.models.supplier import Supplier
from utils.errors import ValidationError
from utils.validators import optional_str, parse_int, parse_money, require_str

LOW_STOCK_THRESHOLD = 10


def _newest_first(q):
    return q.order_by(Product.created_at.desc(), Product.id.desc())


# ======== Queries ========
def get_product(product_id: int) -> Optional[Product]:
    return db.session.get(Product, product_id)


def list_products(page: int = 1, limit: int = 10) -> List[Product]:
    page = max(1, page)
    limit = max(1, limit)
    return _newest_first(Product.query).offset((page - 1) * limit).limit(limit).all()


def list_products_by_supplier(
    supplier_id: int, low_stock: bool = False, limit: int | None = None
) -> List[Product]:
    q = Product.query.filter(Product.supplier_id == supplier_id)
    if low_stock:
        q = q.filter(Product.stock < LOW_STOCK_THRESHOLD)
    q = _newest_first(q)
    if limit and limit > 0:
        q = q.limit(limit)
    return q.all()


def list_products_by_category(category_id: int) -> List[Product]:
    return _newest_first(Product.query.filter(Product.category_id == category_id)).all()


def search_products(query: str | None) -> List[Product]:
    """Case-insensitive substring match on name or description."""
    if not query or not str(query).strip():
        raise ValidationError("Search query is required")
    term = str(query).strip()
    # % and _ in the query are literal characters
    return _newest_first(
        Product.query.filter(
            or_(
                Product.name.icontains(term, autoescape=True),
                Product.description.icontains(term, autoescape=True),
            )
        )
    ).all()


def filter_products(
    category_ids: list[int] | None = None,
    supplier_ids: list[int] | None = None,
    min_price=None,
    max_price=None,
    in_stock: bool = False,
) -> List[Product]:
    """All given clauses are ANDed; a missing one does not constrain."""
    q = Product.query
    if category_ids:
        q = q.filter(Product.category_id.in_(category_ids))
    if supplier_ids:
        q = q.filter(Product.supplier_id.in_(supplier_ids))
    if min_price is not None:
        q = q.filter(Product.price >= parse_money(min_price, "minPrice"))
    if max_price is not None:
        q = q.filter(Product.price <= parse_money(max_price, "maxPrice"))
    if in_stock:
        q = q.filter(Product.stock > 0)
    return _newest_first(q).all()


# ======== Mutations ========
def _normalize(data: dict, partial: bool) -> dict:
    out = {}
    if not partial or "name" in data:
        out["name"] = require_str(data, "name", 1, "name")
    if "description" in data:
        out["description"] = optional_str(data, "description")
    if not partial or "price" in data:
        out["price"] = parse_money(data.get("price"), "price")
    if "stock" in data:
        out["stock"] = parse_int(data.get("stock"), "stock", minimum=0)
    elif not partial:
        out["stock"] = 0
    if "imageUrl" in data:
        out["image_url"] = optional_str(data, "imageUrl")
    if "categoryId" in data:
        raw = data.get("categoryId")
        if raw is None:
            out["category_id"] = None
        else:
            category_id = parse_int(raw, "categoryId")
            if not db.session.get(Category, category_id):
                raise ValidationError(f"Category {category_id} does not exist")
            out["category_id"] = category_id
    return out


def create_product(supplier_id: int, data: dict) -> Product:
    if not db.session.get(Supplier, supplier_id):
        raise ValidationError(f"Supplier {supplier_id} does not exist")
    fields = _normalize(data, partial=False)
    p = Product(supplier_id=supplier_id, **fields)
    db.session.add(p)
    _commit()
    return p


def update_product(product_id: int, data: dict) -> Optional[Product]:
    """Partial update. ``supplierId`` in ``data`` is ignored: ownership never moves."""
    p = get_product(product_id)
    if not p:
        return None
    for attr, value in _normalize(data, partial=True).items():
        setattr(p, attr, value)
    _commit()
    return p


def delete_product(product_id: int) -> bool:
    p = get_product(product_id)
    if not p:
        return False
    db.session.delete(p)
    _commit()
    return True


def _commit():
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise
