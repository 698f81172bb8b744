from configs import db


class Category(db.Model):
    __tablename__ = "categories"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text)

    # product.category_id is SET NULL by the database on delete
    products = db.relationship("Product", back_populates="category", passive_deletes=True)

    def to_dict(self):
        return {"id": self.id, "name": self.name, "description": self.description}
