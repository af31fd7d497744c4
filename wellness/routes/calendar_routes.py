# wellness/routes/calendar_routes.py
from datetime import date, datetime, timedelta

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import jwt_required

from .. import db
from ..models.event import Event
from .helpers import as_text, current_user_id, parse_datetime, run_badge_check, safe_int_or_none

calendar_bp = Blueprint("calendar", __name__)


@calendar_bp.route("", methods=["GET"])
@jwt_required()
def list_events():
    """
    Optional ?date=YYYY-MM-DD limits the result to events starting that day.
    """
    user_id = current_user_id()

    query = Event.query.filter_by(user_id=user_id)

    raw_date = request.args.get("date")
    if raw_date:
        try:
            day = date.fromisoformat(raw_date)
        except ValueError:
            return jsonify({"message": "invalid date"}), 400
        day_start = datetime.combine(day, datetime.min.time())
        query = query.filter(
            Event.start_time >= day_start,
            Event.start_time < day_start + timedelta(days=1),
        )

    rows = query.order_by(Event.start_time.asc()).all()
    return jsonify({"events": [e.to_dict() for e in rows]}), 200


@calendar_bp.route("", methods=["POST"])
@jwt_required()
def create_event():
    """
    Body:
    {
      "title": "Therapy session",
      "notes": "optional",
      "start_time": "2025-11-21T10:00:00",
      "end_time": "2025-11-21T11:00:00"
    }
    """
    user_id = current_user_id()
    data = request.get_json(silent=True) or {}

    title = as_text(data.get("title")).strip()
    start_time = parse_datetime(data.get("start_time"))
    end_time = parse_datetime(data.get("end_time"))

    if not title or not data.get("start_time") or not data.get("end_time"):
        return jsonify({"message": "title, start_time and end_time are required"}), 400
    if start_time is None or end_time is None:
        return jsonify({"message": "start_time and end_time must be ISO datetimes"}), 400
    if end_time < start_time:
        return jsonify({"message": "end_time must not be before start_time"}), 400

    event = Event(
        user_id=user_id,
        title=title,
        notes=as_text(data.get("notes")),
        start_time=start_time,
        end_time=end_time,
    )
    try:
        db.session.add(event)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        current_app.logger.exception(f"Event create error: {e}")
        return jsonify({"message": "Failed to create event"}), 500

    payload = event.to_dict()
    run_badge_check("recompute_calendar_badges", user_id)

    return jsonify({"event": payload}), 201


@calendar_bp.route("", methods=["DELETE"])
@jwt_required()
def delete_event():
    user_id = current_user_id()

    event_id = safe_int_or_none(request.args.get("id"))
    if not event_id:
        return jsonify({"message": "id is required"}), 400

    event = Event.query.filter_by(id=event_id, user_id=user_id).first()
    if not event:
        return jsonify({"message": "event not found"}), 404

    db.session.delete(event)
    db.session.commit()
    return jsonify({"message": "event deleted"}), 200
