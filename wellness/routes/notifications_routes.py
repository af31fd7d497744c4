# wellness/routes/notifications_routes.py
from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import jwt_required

from .. import db
from ..models.notifications import NOTIFICATION_TYPES, Notification, NotificationPreference
from .helpers import current_user_id, now, safe_int_or_none

notifications_bp = Blueprint("notifications", __name__)


def _upsert_preference(user_id: int, notification_type: str, enabled: bool) -> NotificationPreference:
    pref = NotificationPreference.query.filter_by(
        user_id=user_id, notification_type=notification_type
    ).first()
    if pref:
        pref.enabled = enabled
    else:
        pref = NotificationPreference(
            user_id=user_id, notification_type=notification_type, enabled=enabled
        )
        db.session.add(pref)
    return pref


# ---------------------------------------------------------------------------
# Inbox
# ---------------------------------------------------------------------------

@notifications_bp.route("", methods=["GET"])
@jwt_required()
def list_notifications():
    """
    Returns:
    { "notifications": [...], "unread_count": 2 }
    """
    rows = (
        Notification.query.filter_by(user_id=current_user_id())
        .order_by(Notification.created_at.desc(), Notification.id.desc())
        .all()
    )
    return jsonify(
        {
            "notifications": [n.to_dict() for n in rows],
            "unread_count": sum(1 for n in rows if not n.read),
        }
    ), 200


@notifications_bp.route("", methods=["POST"])
@jwt_required()
def create_notification():
    """
    Body: { "type": "badge_earned", "title": "...", "message": "...", "metadata": {} }
    """
    user_id = current_user_id()
    data = request.get_json(silent=True) or {}

    ntype = data.get("type")
    title = data.get("title")
    message = data.get("message")
    metadata = data.get("metadata") or {}

    if not isinstance(title, str) or not isinstance(message, str) or not title.strip() or not message.strip():
        return jsonify({"message": "type, title and message are required"}), 400
    if ntype not in NOTIFICATION_TYPES:
        return jsonify({"message": f"type must be one of {', '.join(NOTIFICATION_TYPES)}"}), 400
    if not isinstance(metadata, dict):
        return jsonify({"message": "metadata must be an object"}), 400

    stamp = now()
    notification = Notification(
        user_id=user_id,
        type=ntype,
        title=title.strip(),
        message=message,
        extra=metadata,
        read=False,
        created_at=stamp,
        updated_at=stamp,
    )
    try:
        db.session.add(notification)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        current_app.logger.exception(f"Notification create error: {e}")
        return jsonify({"message": "Failed to create notification"}), 500

    return jsonify({"notification": notification.to_dict()}), 201


@notifications_bp.route("", methods=["PATCH"])
@jwt_required()
def update_notification():
    """
    Body: { "id": 3, "read": true, "metadata": {...} }
    """
    user_id = current_user_id()
    data = request.get_json(silent=True) or {}

    notification_id = safe_int_or_none(data.get("id"))
    if not notification_id:
        return jsonify({"message": "id is required"}), 400
    if "read" in data and not isinstance(data["read"], bool):
        return jsonify({"message": "read must be a boolean"}), 400
    if "metadata" in data and not isinstance(data["metadata"], dict):
        return jsonify({"message": "metadata must be an object"}), 400

    notification = Notification.query.filter_by(id=notification_id, user_id=user_id).first()
    if not notification:
        return jsonify({"message": "notification not found"}), 404

    if "read" in data:
        notification.read = data["read"]
    if "metadata" in data:
        notification.extra = data["metadata"]
    notification.updated_at = now()

    db.session.commit()
    return jsonify({"notification": notification.to_dict()}), 200


@notifications_bp.route("", methods=["PUT"])
@jwt_required()
def mark_all_read():
    """Marks every unread notification of the caller as read."""
    updated = Notification.query.filter_by(user_id=current_user_id(), read=False).update(
        {"read": True, "updated_at": now()}, synchronize_session=False
    )
    db.session.commit()
    return jsonify({"message": "notifications marked read", "updated": updated}), 200


@notifications_bp.route("", methods=["DELETE"])
@jwt_required()
def delete_notification():
    user_id = current_user_id()

    notification_id = safe_int_or_none(request.args.get("id"))
    if not notification_id:
        return jsonify({"message": "id is required"}), 400

    notification = Notification.query.filter_by(id=notification_id, user_id=user_id).first()
    if not notification:
        return jsonify({"message": "notification not found"}), 404

    db.session.delete(notification)
    db.session.commit()
    return jsonify({"message": "notification deleted"}), 200


# ---------------------------------------------------------------------------
# Preferences
# ---------------------------------------------------------------------------

@notifications_bp.route("/preferences", methods=["GET"])
@jwt_required()
def get_preferences():
    """
    Every notification type with its on/off flag; types never set default to on.
    """
    stored = {
        p.notification_type: p.enabled
        for p in NotificationPreference.query.filter_by(user_id=current_user_id()).all()
    }
    payload = [{"type": t, "enabled": bool(stored.get(t, True))} for t in NOTIFICATION_TYPES]
    return jsonify({"preferences": payload}), 200


@notifications_bp.route("/preferences", methods=["POST"])
@jwt_required()
def save_preferences():
    """
    Body: { "preferences": [ {"type": "badge_earned", "enabled": false}, ... ] }
    """
    user_id = current_user_id()
    data = request.get_json(silent=True) or {}

    preferences = data.get("preferences")
    if not isinstance(preferences, list):
        return jsonify({"message": "preferences array is required"}), 400
    for item in preferences:
        if (
            not isinstance(item, dict)
            or item.get("type") not in NOTIFICATION_TYPES
            or not isinstance(item.get("enabled"), bool)
        ):
            return jsonify({"message": "each preference needs a known type and a boolean enabled"}), 400

    try:
        saved = [_upsert_preference(user_id, item["type"], item["enabled"]) for item in preferences]
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        current_app.logger.exception(f"Notification preferences save error: {e}")
        return jsonify({"message": "Failed to update preferences"}), 500

    return jsonify({"preferences": [p.to_dict() for p in saved]}), 200


@notifications_bp.route("/preferences", methods=["PATCH"])
@jwt_required()
def update_preference():
    """
    Body: { "type": "friend_request", "enabled": true }
    """
    user_id = current_user_id()
    data = request.get_json(silent=True) or {}

    ntype = data.get("type")
    enabled = data.get("enabled")
    if ntype not in NOTIFICATION_TYPES or not isinstance(enabled, bool):
        return jsonify({"message": "type and enabled status are required"}), 400

    pref = _upsert_preference(user_id, ntype, enabled)
    db.session.commit()
    return jsonify({"preference": pref.to_dict()}), 200
