# db/models/order.py
import enum
from configs import db
from utils.dates import utcnow, iso


class OrderStatus(enum.Enum):
    PENDING = "pending"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class Order(db.Model):
    __tablename__ = "orders"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    client_id = db.Column(
        db.Integer,
        db.ForeignKey("clients.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    # sum of line snapshots at creation, never recomputed
    total = db.Column(db.Numeric(18, 2), nullable=False)
    status = db.Column(
        db.Enum(OrderStatus, name="orderstatus", values_callable=lambda e: [m.value for m in e]),
        default=OrderStatus.PENDING,
        nullable=False,
    )
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    client = db.relationship("Client", back_populates="orders")
    lines = db.relationship(
        "OrderLine",
        back_populates="order",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="OrderLine.id",
    )
    delivery = db.relationship(
        "Delivery",
        back_populates="order",
        uselist=False,
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def to_dict(self, include_lines=False):
        data = {
            "id": self.id,
            "clientId": self.client_id,
            "total": float(self.total),
            "status": self.status.value,
            "createdAt": iso(self.created_at),
        }
        if include_lines:
            data["lines"] = [ln.to_dict() for ln in self.lines]
        return data


class OrderLine(db.Model):
    __tablename__ = "order_products"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    order_id = db.Column(
        db.Integer,
        db.ForeignKey("orders.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    product_id = db.Column(
        db.Integer,
        db.ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    quantity = db.Column(db.Integer, nullable=False)
    price_at_purchase = db.Column(db.Numeric(18, 2), nullable=False)

    order = db.relationship("Order", back_populates="lines")
    product = db.relationship("Product", back_populates="order_lines")

    def to_dict(self):
        return {
            "id": self.id,
            "orderId": self.order_id,
            "productId": self.product_id,
            "quantity": self.quantity,
            "priceAtPurchase": float(self.price_at_purchase),
        }
