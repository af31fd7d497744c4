# wellness/models/notifications.py
from datetime import datetime
from .. import db

NOTIFICATION_TYPES = (
    "friend_request",
    "friend_added",
    "journal_entry",
    "badge_earned",
    "calendar_event",
)


class Notification(db.Model):
    """One inbox item. Storage only; nothing here delivers it."""
    __tablename__ = "notifications"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    type = db.Column(
        db.Enum(*NOTIFICATION_TYPES, name="notification_type"),
        nullable=False,
    )
    title = db.Column(db.String(200), nullable=False)
    message = db.Column(db.Text, nullable=False)
    read = db.Column(db.Boolean, nullable=False, default=False)
    # "metadata" is reserved on declarative models
    extra = db.Column("metadata", db.JSON, nullable=False, default=dict)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.now, index=True)
    updated_at = db.Column(
        db.DateTime, nullable=False, default=datetime.now, onupdate=datetime.now
    )

    user = db.relationship("User", backref="notifications")

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "type": self.type,
            "title": self.title,
            "message": self.message,
            "read": bool(self.read),
            "metadata": self.extra or {},
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


class NotificationPreference(db.Model):
    __tablename__ = "notification_preferences"
    __table_args__ = (
        db.UniqueConstraint(
            "user_id", "notification_type", name="uq_notification_preferences_user_type"
        ),
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    notification_type = db.Column(
        db.Enum(*NOTIFICATION_TYPES, name="notification_preference_type"),
        nullable=False,
    )
    enabled = db.Column(db.Boolean, nullable=False, default=True)

    def to_dict(self):
        return {
            "id": self.id,
            "notification_type": self.notification_type,
            "enabled": bool(self.enabled),
        }
