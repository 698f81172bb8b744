from typing import Optional
from sqlalchemy.exc import SQLAlchemyError
from configs import db
from db.models.delivery import Delivery
from db.models.order import Order
from utils.dates import parse_date
from utils.errors import Conflict, NotFound, ValidationError
from utils.validators import parse_int, require_str


def get_delivery(delivery_id: int) -> Optional[Delivery]:
    return db.session.get(Delivery, delivery_id)


def get_delivery_by_order(order_id: int) -> Optional[Delivery]:
    return Delivery.query.filter_by(order_id=order_id).first()


def _date(data: dict):
    raw = data.get("deliveryDate")
    if raw in (None, ""):
        return None
    parsed = parse_date(raw)
    if parsed is None:
        raise ValidationError("deliveryDate must be an ISO date")
    return parsed


def create_delivery(data: dict) -> Delivery:
    order_id = parse_int(data.get("orderId"), "orderId")
    if not db.session.get(Order, order_id):
        raise NotFound("Order not found")
    # one delivery per order
    if get_delivery_by_order(order_id):
        raise Conflict("Order already has a delivery")
    d = Delivery(
        order_id=order_id,
        address=require_str(data, "address"),
        delivery_date=_date(data),
    )
    db.session.add(d)
    _commit()
    return d


def update_delivery(delivery_id: int, data: dict) -> Optional[Delivery]:
    d = get_delivery(delivery_id)
    if not d:
        return None
    if "address" in data:
        d.address = require_str(data, "address")
    if "deliveryDate" in data:
        d.delivery_date = _date(data)
    _commit()
    return d


def _commit():
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise
