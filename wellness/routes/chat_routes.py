# wellness/routes/chat_routes.py
from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required

from .. import db
from ..models.chat import Chat, ChatMessage
from .helpers import as_text, current_user_id, now, run_badge_check

chat_bp = Blueprint("chat", __name__)

MESSAGE_ROLES = ("user", "assistant")


@chat_bp.route("/threads", methods=["GET"])
@jwt_required()
def list_threads():
    rows = (
        Chat.query.filter_by(user_id=current_user_id())
        .order_by(Chat.updated_at.desc(), Chat.id.desc())
        .all()
    )
    return jsonify({"threads": [c.to_dict() for c in rows]}), 200


@chat_bp.route("/threads", methods=["POST"])
@jwt_required()
def create_thread():
    user_id = current_user_id()
    data = request.get_json(silent=True) or {}

    title = as_text(data.get("title")).strip() or None
    stamp = now()
    chat = Chat(user_id=user_id, title=title, created_at=stamp, updated_at=stamp)
    db.session.add(chat)
    db.session.commit()

    payload = chat.to_dict()
    run_badge_check("recompute_chat_badges", user_id)

    return jsonify({"thread": payload}), 201


@chat_bp.route("/threads/<int:chat_id>", methods=["GET"])
@jwt_required()
def get_thread(chat_id: int):
    chat = Chat.query.filter_by(id=chat_id, user_id=current_user_id()).first()
    if not chat:
        return jsonify({"message": "thread not found"}), 404
    return jsonify({"thread": chat.to_dict(with_messages=True)}), 200


@chat_bp.route("/threads/<int:chat_id>/messages", methods=["POST"])
@jwt_required()
def add_message(chat_id: int):
    """
    Body: { "role": "user" | "assistant", "content": "..." }

    Stores a message; generating assistant replies happens elsewhere.
    """
    user_id = current_user_id()
    data = request.get_json(silent=True) or {}

    role = data.get("role") or "user"
    content = as_text(data.get("content"))

    if role not in MESSAGE_ROLES:
        return jsonify({"message": "role must be 'user' or 'assistant'"}), 400
    if not content.strip():
        return jsonify({"message": "content is required"}), 400

    chat = Chat.query.filter_by(id=chat_id, user_id=user_id).first()
    if not chat:
        return jsonify({"message": "thread not found"}), 404

    stamp = now()
    message = ChatMessage(chat_id=chat.id, role=role, content=content, created_at=stamp)
    chat.updated_at = stamp
    db.session.add(message)
    db.session.commit()

    payload = message.to_dict()
    run_badge_check("recompute_chat_badges", user_id)

    return jsonify({"message": payload}), 201
