# wellness/models/social.py
from datetime import datetime
from .. import db


# -----------------------------
# Friendships
# -----------------------------
class Friendship(db.Model):
    __tablename__ = "friendships"

    id = db.Column(db.Integer, primary_key=True)
    requester_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    addressee_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    status = db.Column(
        db.Enum("pending", "accepted", "blocked", name="friendship_status"),
        nullable=False,
        default="pending",
    )
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.now)
    updated_at = db.Column(
        db.DateTime,
        nullable=False,
        default=datetime.now,
        onupdate=datetime.now,
    )

    requester = db.relationship(
        "User", foreign_keys=[requester_id], backref="sent_friendships"
    )
    addressee = db.relationship(
        "User", foreign_keys=[addressee_id], backref="received_friendships"
    )

    def other_user_id(self, user_id: int) -> int:
        return self.addressee_id if self.requester_id == user_id else self.requester_id
