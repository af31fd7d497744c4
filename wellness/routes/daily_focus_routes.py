# wellness/routes/daily_focus_routes.py
from datetime import date

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import jwt_required

from .. import db
from ..models.focus import DailyFocus, UserDailyFocus
from .helpers import current_user_id, now, parse_bool, run_badge_check, safe_int_or_none

daily_focus_bp = Blueprint("daily_focus", __name__)


def _parse_day(raw):
    if not raw:
        return None
    try:
        return date.fromisoformat(raw)
    except (TypeError, ValueError):
        return None


@daily_focus_bp.route("", methods=["GET"])
@jwt_required()
def get_focus():
    """
    Returns all focus options, plus the caller's selections for ?date=YYYY-MM-DD.
    """
    user_id = current_user_id()

    options = DailyFocus.query.order_by(DailyFocus.title.asc()).all()

    selections = []
    raw_date = request.args.get("date")
    if raw_date:
        day = _parse_day(raw_date)
        if day is None:
            return jsonify({"message": "invalid date"}), 400
        selections = UserDailyFocus.query.filter_by(
            user_id=user_id, selected_date=day
        ).all()

    return jsonify(
        {
            "options": [o.to_dict() for o in options],
            "selections": [s.to_dict() for s in selections],
        }
    ), 200


@daily_focus_bp.route("", methods=["POST"])
@jwt_required()
def upsert_selection():
    """
    Body: { "focus_id": 1, "selected_date": "2025-11-21" (optional), "completed": false }

    Creates the selection for that day, or updates `completed` if it exists.
    """
    user_id = current_user_id()
    data = request.get_json(silent=True) or {}

    focus_id = safe_int_or_none(data.get("focus_id"))
    if not focus_id:
        return jsonify({"message": "focus_id is required"}), 400
    if not db.session.get(DailyFocus, focus_id):
        return jsonify({"message": "focus option not found"}), 404

    if data.get("selected_date"):
        day = _parse_day(data.get("selected_date"))
        if day is None:
            return jsonify({"message": "invalid selected_date"}), 400
    else:
        day = now().date()

    completed = parse_bool(data.get("completed", False))
    if completed is None:
        return jsonify({"message": "completed must be a boolean"}), 400

    selection = UserDailyFocus.query.filter_by(
        user_id=user_id, focus_id=focus_id, selected_date=day
    ).first()

    status = 200
    try:
        if selection:
            selection.completed = completed
        else:
            selection = UserDailyFocus(
                user_id=user_id,
                focus_id=focus_id,
                selected_date=day,
                completed=completed,
                created_at=now(),
            )
            db.session.add(selection)
            status = 201
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        current_app.logger.exception(f"Daily focus save error: {e}")
        return jsonify({"message": "Failed to save focus selection"}), 500

    payload = selection.to_dict()
    run_badge_check("recompute_daily_focus_badges", user_id)

    return jsonify({"selection": payload}), status


@daily_focus_bp.route("", methods=["PATCH"])
@jwt_required()
def update_completion():
    """
    Body: { "selection_id": 3, "completed": true }
    """
    user_id = current_user_id()
    data = request.get_json(silent=True) or {}

    selection_id = safe_int_or_none(data.get("selection_id"))
    if not selection_id:
        return jsonify({"message": "selection_id is required"}), 400

    completed = parse_bool(data.get("completed"))
    if completed is None:
        return jsonify({"message": "completed must be a boolean"}), 400

    selection = UserDailyFocus.query.filter_by(id=selection_id, user_id=user_id).first()
    if not selection:
        return jsonify({"message": "selection not found"}), 404

    selection.completed = completed
    db.session.commit()

    payload = selection.to_dict()
    run_badge_check("recompute_daily_focus_badges", user_id)

    return jsonify({"selection": payload}), 200


@daily_focus_bp.route("", methods=["DELETE"])
@jwt_required()
def delete_selection():
    user_id = current_user_id()

    selection_id = safe_int_or_none(request.args.get("id"))
    if not selection_id:
        return jsonify({"message": "id is required"}), 400

    selection = UserDailyFocus.query.filter_by(id=selection_id, user_id=user_id).first()
    if not selection:
        return jsonify({"message": "selection not found"}), 404

    db.session.delete(selection)
    db.session.commit()
    return jsonify({"message": "selection deleted"}), 200
