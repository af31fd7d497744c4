from sqlalchemy import select

from wellness import db
from wellness.models.badges import Badge, UserBadge, UserStats


def user_badge(user_id, name):
    db.session.expire_all()
    return db.session.execute(
        select(UserBadge)
        .join(Badge, UserBadge.badge_id == Badge.id)
        .where(UserBadge.user_id == user_id, Badge.name == name)
    ).scalar_one_or_none()


def user_stats(user_id):
    db.session.expire_all()
    return db.session.get(UserStats, user_id)


def words(n):
    return " ".join(["word"] * n)
