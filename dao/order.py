# dao/order.py
import logging
from decimal import Decimal
from typing import Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from configs import db
from dao import user as user_dao
from db.models.client import Client
from db.models.order import Order, OrderLine, OrderStatus
from db.models.product import Product
from utils.auth import Identity
from utils.errors import Forbidden, NotFound, ValidationError
from utils.validators import dec, parse_int

logger = logging.getLogger(__name__)

# delivered and cancelled are terminal
ORDER_TRANSITIONS: Dict[OrderStatus, frozenset] = {
    OrderStatus.PENDING: frozenset({OrderStatus.SHIPPED, OrderStatus.CANCELLED}),
    OrderStatus.SHIPPED: frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}


def to_order_status(value) -> OrderStatus:
    if isinstance(value, OrderStatus):
        return value
    try:
        return OrderStatus((value or "").strip().lower())
    except (ValueError, AttributeError):
        raise ValidationError("Invalid status")


# ======== Queries ========
def get_order(order_id: int) -> Optional[Order]:
    return db.session.get(Order, order_id)


def list_orders(page: int = 1, limit: int = 50) -> List[Order]:
    page = max(1, page)
    limit = max(1, limit)
    return (
        Order.query.order_by(Order.created_at.desc(), Order.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )


def list_orders_by_client(client_id: int) -> List[Order]:
    return (
        Order.query.filter(Order.client_id == client_id)
        .order_by(Order.created_at.desc(), Order.id.desc())
        .all()
    )


def list_orders_by_supplier(supplier_id: int, limit: int | None = None) -> List[Order]:
    """Orders holding at least one line for one of the supplier's products."""
    ids = (
        select(OrderLine.order_id)
        .join(Product, Product.id == OrderLine.product_id)
        .where(Product.supplier_id == supplier_id)
        .distinct()
    )
    q = Order.query.filter(Order.id.in_(ids)).order_by(
        Order.created_at.desc(), Order.id.desc()
    )
    if limit and limit > 0:
        q = q.limit(limit)
    return q.all()


def get_order_for(identity: Identity, order_id: int) -> Order:
    """Load an order the identity may read: its owning client, or an admin."""
    order = get_order(order_id)
    if not order:
        raise NotFound("Order not found")
    if identity.is_admin:
        return order
    client = user_dao.require_client(identity)
    if order.client_id != client.id:
        raise Forbidden("You don't have permission to view this order")
    return order


# ======== Mutations ========
def _normalize_lines(lines) -> List[dict]:
    if not lines or not isinstance(lines, list):
        raise ValidationError("An order needs at least one line")
    out = []
    for idx, ln in enumerate(lines, 1):
        if not isinstance(ln, dict):
            raise ValidationError(f"Line {idx}: invalid line")
        product_id = parse_int(ln.get("productId"), f"Line {idx}: productId")
        quantity = parse_int(ln.get("quantity"), f"Line {idx}: quantity", minimum=1)
        product = db.session.get(Product, product_id)
        if not product:
            raise NotFound(f"Product {product_id} not found")
        out.append({"product": product, "quantity": quantity})
    return out


def create_order(client_id: int, lines) -> Order:
    """Write an order and all of its lines as one unit.

    Each line snapshots the product's current price; ``total`` is the sum of
    those snapshots. Stock is not checked or decremented.
    """
    if not db.session.get(Client, client_id):
        raise NotFound("Client profile not found")
    norm = _normalize_lines(lines)

    total = Decimal("0.00")
    for ln in norm:
        ln["price"] = dec(ln["product"].price)
        total += ln["price"] * ln["quantity"]

    # TODO: check and decrement product stock in this transaction to stop overselling
    try:
        order = Order(client_id=client_id, total=total, status=OrderStatus.PENDING)
        db.session.add(order)
        db.session.flush()
        for ln in norm:
            db.session.add(
                OrderLine(
                    order_id=order.id,
                    product_id=ln["product"].id,
                    quantity=ln["quantity"],
                    price_at_purchase=ln["price"],
                )
            )
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise
    logger.info("order %s created for client %s total=%s", order.id, client_id, total)
    return order


def update_order_status(order_id: int, new_status) -> Order:
    status = to_order_status(new_status)
    order = get_order(order_id)
    if not order:
        raise NotFound("Order not found")
    if status not in ORDER_TRANSITIONS[order.status]:
        raise ValidationError(
            f"Cannot move order from {order.status.value} to {status.value}"
        )
    order.status = status
    _commit()
    logger.info("order %s -> %s", order_id, status.value)
    return order


def delete_order(order_id: int) -> bool:
    order = get_order(order_id)
    if not order:
        return False
    db.session.delete(order)
    _commit()
    return True


def _commit():
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise
