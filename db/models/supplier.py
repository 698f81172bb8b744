from configs import db


class Supplier(db.Model):
    __tablename__ = "suppliers"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    user_id = db.Column(
        db.Integer,
        db.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    company_name = db.Column(db.String(255), nullable=False)
    contact_name = db.Column(db.String(255), nullable=False)
    address = db.Column(db.Text)
    phone = db.Column(db.String(30))
    description = db.Column(db.Text)

    user = db.relationship("User", back_populates="supplier")
    products = db.relationship(
        "Product",
        back_populates="supplier",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def to_dict(self):
        return {
            "id": self.id,
            "userId": self.user_id,
            "companyName": self.company_name,
            "contactName": self.contact_name,
            "address": self.address,
            "phone": self.phone,
            "description": self.description,
        }
