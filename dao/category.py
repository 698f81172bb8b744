from typing import List, Optional
from sqlalchemy.exc import SQLAlchemyError
from configs import db
from db.models.category import Category
from utils.validators import optional_str, require_str


def list_categories() -> List[Category]:
    return Category.query.order_by(Category.name.asc()).all()


def get_category(category_id: int) -> Optional[Category]:
    return db.session.get(Category, category_id)


def create_category(data: dict) -> Category:
    c = Category(
        name=require_str(data, "name"), description=optional_str(data, "description")
    )
    db.session.add(c)
    _commit()
    return c


def update_category(category_id: int, data: dict) -> Optional[Category]:
    c = get_category(category_id)
    if not c:
        return None
    if "name" in data:
        c.name = require_str(data, "name")
    if "description" in data:
        c.description = optional_str(data, "description")
    _commit()
    return c


def delete_category(category_id: int) -> bool:
    c = get_category(category_id)
    if not c:
        return False
    db.session.delete(c)
    _commit()
    return True


def _commit():
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise
