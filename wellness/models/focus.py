# wellness/models/focus.py
from datetime import datetime
from .. import db


class DailyFocus(db.Model):
    __tablename__ = "daily_focus"

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(100), nullable=False)
    description = db.Column(db.String(255))

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
        }


class UserDailyFocus(db.Model):
    __tablename__ = "user_daily_focus"
    __table_args__ = (
        db.UniqueConstraint(
            "user_id", "focus_id", "selected_date", name="uq_user_daily_focus_day"
        ),
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    focus_id = db.Column(db.Integer, db.ForeignKey("daily_focus.id"), nullable=False)
    selected_date = db.Column(db.Date, nullable=False)
    completed = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.now)

    user = db.relationship("User", backref="daily_focus_selections")
    focus = db.relationship("DailyFocus")

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "focus_id": self.focus_id,
            "selected_date": self.selected_date.isoformat() if self.selected_date else None,
            "completed": bool(self.completed),
            "focus": self.focus.to_dict() if self.focus else None,
        }
