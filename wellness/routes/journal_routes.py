# wellness/routes/journal_routes.py

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import jwt_required

from .. import db
from ..models.journal import JournalEntry
from .helpers import as_text, current_user_id, now, run_badge_check, safe_int_or_none

journal_bp = Blueprint("journal", __name__)


@journal_bp.route("", methods=["GET"])
@jwt_required()
def list_entries():
    user_id = current_user_id()

    rows = (
        JournalEntry.query.filter_by(user_id=user_id)
        .order_by(JournalEntry.created_at.desc(), JournalEntry.id.desc())
        .all()
    )
    return jsonify({"entries": [e.to_dict() for e in rows]}), 200


@journal_bp.route("", methods=["POST"])
@jwt_required()
def create_entry():
    """
    Body: { "title": "...", "text": "..." }
    """
    user_id = current_user_id()
    data = request.get_json(silent=True) or {}

    title = as_text(data.get("title")).strip()
    text = as_text(data.get("text"))

    if not title or not text.strip():
        return jsonify({"message": "title and text are required"}), 400

    entry = JournalEntry(user_id=user_id, title=title, text=text, created_at=now())
    try:
        db.session.add(entry)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        current_app.logger.exception(f"Journal create error: {e}")
        return jsonify({"message": "Failed to create entry"}), 500

    payload = entry.to_dict()
    run_badge_check("recompute_journal_badges", user_id, entry.text, entry.created_at)

    return jsonify({"entry": payload}), 201


@journal_bp.route("", methods=["PUT"])
@jwt_required()
def update_entry():
    user_id = current_user_id()
    data = request.get_json(silent=True) or {}

    entry_id = safe_int_or_none(data.get("id"))
    if not entry_id:
        return jsonify({"message": "id is required"}), 400

    entry = JournalEntry.query.filter_by(id=entry_id, user_id=user_id).first()
    if not entry:
        return jsonify({"message": "entry not found"}), 404

    if "title" in data:
        title = as_text(data["title"]).strip()
        if not title:
            return jsonify({"message": "title must be a non-empty string"}), 400
        entry.title = title
    if "text" in data:
        text = as_text(data["text"])
        if not text.strip():
            return jsonify({"message": "text must be a non-empty string"}), 400
        entry.text = text

    db.session.commit()
    return jsonify({"entry": entry.to_dict()}), 200


@journal_bp.route("", methods=["DELETE"])
@jwt_required()
def delete_entry():
    user_id = current_user_id()

    entry_id = safe_int_or_none(request.args.get("id"))
    if not entry_id:
        return jsonify({"message": "id is required"}), 400

    entry = JournalEntry.query.filter_by(id=entry_id, user_id=user_id).first()
    if not entry:
        return jsonify({"message": "entry not found"}), 404

    db.session.delete(entry)
    db.session.commit()
    return jsonify({"message": "entry deleted"}), 200
