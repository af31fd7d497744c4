# wellness/routes/badges_routes.py
from flask import Blueprint, jsonify
from flask_jwt_extended import jwt_required

from ..models.badges import Badge, UserBadge
from .helpers import badge_engine, current_user_id

badges_bp = Blueprint("badges", __name__)


@badges_bp.route("", methods=["GET"])
@jwt_required()
def list_badges():
    """
    Returns:
    {
      "summary": {"earned_count": 3, "total_count": 32},
      "badges": [
        {
          "id": 1,
          "name": "First Steps",
          "description": "...",
          "icon_name": "footprints",
          "requirement": "Write 1 journal entry",
          "earned": true,
          "progress": 1,
          "earned_at": "2025-11-21T10:05:00"
        },
        ...
      ]
    }
    """
    user_id = current_user_id()

    all_badges = Badge.query.order_by(Badge.name.asc()).all()
    progress_by_badge = {
        ub.badge_id: ub for ub in UserBadge.query.filter_by(user_id=user_id).all()
    }

    badges = []
    for badge in all_badges:
        ub = progress_by_badge.get(badge.id)
        item = badge.to_dict()
        item["earned"] = bool(ub.earned) if ub else False
        item["progress"] = int(ub.progress or 0) if ub else 0
        item["earned_at"] = ub.earned_at.isoformat() if ub and ub.earned_at else None
        badges.append(item)

    summary = {
        "earned_count": sum(1 for b in badges if b["earned"]),
        "total_count": len(badges),
    }

    return jsonify({"summary": summary, "badges": badges}), 200


@badges_bp.route("/recompute", methods=["POST"])
@jwt_required()
def recompute_badges():
    """Consistency repair for the caller. Partial failures are logged, not returned."""
    badge_engine().recompute_all_badges(current_user_id())
    return jsonify({"message": "badges recomputed"}), 200
