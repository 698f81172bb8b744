# db/models/quote.py
import enum
from configs import db
from utils.dates import utcnow, iso


class QuoteKind(enum.Enum):
    REQUEST = "request"  # raised by a client
    OFFER = "offer"  # issued by a supplier to a client


class QuoteStatus(enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class Quote(db.Model):
    __tablename__ = "quotes"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    kind = db.Column(
        db.Enum(QuoteKind, name="quotekind", values_callable=lambda e: [m.value for m in e]),
        default=QuoteKind.REQUEST,
        nullable=False,
    )
    client_id = db.Column(
        db.Integer,
        db.ForeignKey("clients.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    supplier_id = db.Column(
        db.Integer, db.ForeignKey("suppliers.id", ondelete="CASCADE"), index=True
    )
    status = db.Column(
        db.Enum(QuoteStatus, name="quotestatus", values_callable=lambda e: [m.value for m in e]),
        default=QuoteStatus.PENDING,
        nullable=False,
    )
    total = db.Column(db.Numeric(18, 2), nullable=False)
    valid_until = db.Column(db.DateTime)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    client = db.relationship("Client", back_populates="quotes")
    supplier = db.relationship("Supplier")
    lines = db.relationship(
        "QuoteLine",
        back_populates="quote",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="QuoteLine.id",
    )

    def to_dict(self, include_lines=False):
        data = {
            "id": self.id,
            "kind": self.kind.value,
            "clientId": self.client_id,
            "supplierId": self.supplier_id,
            "status": self.status.value,
            "total": float(self.total),
            "validUntil": iso(self.valid_until),
            "createdAt": iso(self.created_at),
        }
        if include_lines:
            data["lines"] = [ln.to_dict() for ln in self.lines]
        return data


class QuoteLine(db.Model):
    __tablename__ = "quote_products"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    quote_id = db.Column(
        db.Integer,
        db.ForeignKey("quotes.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    product_id = db.Column(
        db.Integer,
        db.ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
    )
    quantity = db.Column(db.Integer, nullable=False)
    price_at_quote = db.Column(db.Numeric(18, 2), nullable=False)

    quote = db.relationship("Quote", back_populates="lines")
    product = db.relationship("Product", back_populates="quote_lines")

    def to_dict(self):
        return {
            "id": self.id,
            "quoteId": self.quote_id,
            "productId": self.product_id,
            "quantity": self.quantity,
            "priceAtQuote": float(self.price_at_quote),
        }
