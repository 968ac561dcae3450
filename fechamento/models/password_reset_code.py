from ..extensions import db
from ..utils.calendar import utcnow_naive


class PasswordResetCode(db.Model):
    __tablename__ = "password_reset_codes"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    code = db.Column(db.String(6), nullable=False)

    # naive UTC
    expires_at = db.Column(db.DateTime, nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow_naive)

    user = db.relationship("User")

    def __repr__(self):
        return f"<PasswordResetCode user_id={self.user_id} expires_at={self.expires_at}>"
