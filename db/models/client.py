from configs import db


class Client(db.Model):
    __tablename__ = "clients"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    user_id = db.Column(
        db.Integer,
        db.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    first_name = db.Column(db.String(120), nullable=False)
    last_name = db.Column(db.String(120), nullable=False)
    address = db.Column(db.Text)
    phone = db.Column(db.String(30))

    user = db.relationship("User", back_populates="client")
    orders = db.relationship(
        "Order", back_populates="client", cascade="all, delete-orphan", passive_deletes=True
    )
    quotes = db.relationship(
        "Quote", back_populates="client", cascade="all, delete-orphan", passive_deletes=True
    )
    favorites = db.relationship(
        "Favorite",
        back_populates="client",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def to_dict(self):
        return {
            "id": self.id,
            "userId": self.user_id,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "address": self.address,
            "phone": self.phone,
        }
