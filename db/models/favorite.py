from configs import db


class Favorite(db.Model):
    __tablename__ = "favorites"
    __table_args__ = (
        db.UniqueConstraint("client_id", "product_id", name="uq_favorite_client_product"),
    )

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    client_id = db.Column(
        db.Integer,
        db.ForeignKey("clients.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    product_id = db.Column(
        db.Integer,
        db.ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
    )

    client = db.relationship("Client", back_populates="favorites")
    product = db.relationship("Product", back_populates="favorites")

    def to_dict(self):
        return {"id": self.id, "clientId": self.client_id, "productId": self.product_id}
