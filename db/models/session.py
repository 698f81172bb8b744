from configs import db
from utils.dates import utcnow


class UserSession(db.Model):
    __tablename__ = "user_sessions"

    token = db.Column(db.String(128), primary_key=True)
    user_id = db.Column(
        db.Integer,
        db.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    expires_at = db.Column(db.DateTime, nullable=False, index=True)

    user = db.relationship("User", back_populates="sessions")

    def is_expired(self, now=None) -> bool:
        return (now or utcnow()) >= self.expires_at
