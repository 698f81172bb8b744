from configs import db
from utils.dates import utcnow, iso


class Product(db.Model):
    __tablename__ = "products"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text)
    price = db.Column(db.Numeric(18, 2), nullable=False)
    stock = db.Column(db.Integer, nullable=False, default=0)
    image_url = db.Column(db.String(500))
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    supplier_id = db.Column(
        db.Integer,
        db.ForeignKey("suppliers.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    category_id = db.Column(
        db.Integer, db.ForeignKey("categories.id", ondelete="SET NULL"), index=True
    )

    supplier = db.relationship("Supplier", back_populates="products")
    category = db.relationship("Category", back_populates="products")
    order_lines = db.relationship(
        "OrderLine", back_populates="product", cascade="all, delete-orphan", passive_deletes=True
    )
    quote_lines = db.relationship(
        "QuoteLine", back_populates="product", cascade="all, delete-orphan", passive_deletes=True
    )
    favorites = db.relationship(
        "Favorite", back_populates="product", cascade="all, delete-orphan", passive_deletes=True
    )

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "price": float(self.price) if self.price is not None else None,
            "stock": self.stock,
            "imageUrl": self.image_url,
            "createdAt": iso(self.created_at),
            "supplierId": self.supplier_id,
            "categoryId": self.category_id,
        }
