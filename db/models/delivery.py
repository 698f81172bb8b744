from configs import db
from utils.dates import iso


class Delivery(db.Model):
    __tablename__ = "deliveries"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    order_id = db.Column(
        db.Integer,
        db.ForeignKey("orders.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    address = db.Column(db.Text, nullable=False)
    delivery_date = db.Column(db.DateTime)

    order = db.relationship("Order", back_populates="delivery")

    def to_dict(self):
        return {
            "id": self.id,
            "orderId": self.order_id,
            "address": self.address,
            "deliveryDate": iso(self.delivery_date),
        }
