# wellness/models/badges.py
from datetime import datetime
from .. import db


# -----------------------------
# Badge catalog
# -----------------------------
class Badge(db.Model):
    __tablename__ = "badges"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), unique=True, nullable=False)
    description = db.Column(db.String(255))
    icon_name = db.Column(db.String(50))
    requirement = db.Column(db.String(255))

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "icon_name": self.icon_name,
            "requirement": self.requirement,
        }


class UserBadge(db.Model):
    """Per-user progress toward one badge. Progress only ever goes up."""
    __tablename__ = "user_badges"
    __table_args__ = (
        db.UniqueConstraint("user_id", "badge_id", name="uq_user_badges_user_badge"),
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    badge_id = db.Column(db.Integer, db.ForeignKey("badges.id"), nullable=False)
    progress = db.Column(db.Integer, nullable=False, default=0)
    earned = db.Column(db.Boolean, nullable=False, default=False)
    earned_at = db.Column(db.DateTime)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.now)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.now)

    user = db.relationship("User", backref="badges")
    badge = db.relationship("Badge", backref="user_badges")


# -----------------------------
# Rolling journal statistics
# -----------------------------
class UserStats(db.Model):
    __tablename__ = "user_stats"

    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), primary_key=True)
    total_entries = db.Column(db.Integer, nullable=False, default=0)
    total_words = db.Column(db.Integer, nullable=False, default=0)
    current_streak = db.Column(db.Integer, nullable=False, default=0)
    longest_streak = db.Column(db.Integer, nullable=False, default=0)
    last_entry_date = db.Column(db.Date)
    entries_this_week = db.Column(db.Integer, nullable=False, default=0)
    entries_this_month = db.Column(db.Integer, nullable=False, default=0)
    entries_before_7am = db.Column(db.Integer, nullable=False, default=0)
    entries_after_10pm = db.Column(db.Integer, nullable=False, default=0)
    entries_after_midnight = db.Column(db.Integer, nullable=False, default=0)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.now)
    # bumped on every write; writers condition on the value they read
    version = db.Column(db.Integer, nullable=False, default=1)

    user = db.relationship("User", backref=db.backref("stats", uselist=False))
