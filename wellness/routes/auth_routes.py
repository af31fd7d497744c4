# wellness/routes/auth_routes.py

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import create_access_token, jwt_required
from sqlalchemy import or_

from .. import db
from ..models.user import User
from .helpers import as_text, current_user_id

auth_bp = Blueprint("auth", __name__)


@auth_bp.route("/register", methods=["POST"])
def register():
    data = request.get_json(silent=True) or {}

    email = as_text(data.get("email")).strip().lower()
    username = as_text(data.get("username")).strip()
    password = as_text(data.get("password"))  # passwords are not stripped

    if not email or not username or not password:
        return jsonify({"message": "email, username and password are required"}), 400

    if len(password) < 6:
        return jsonify({"message": "password must be at least 6 characters"}), 400

    if User.query.filter_by(email=email).first():
        return jsonify({"message": "email already in use"}), 400

    if User.query.filter_by(username=username).first():
        return jsonify({"message": "username already in use"}), 400

    user = User(
        email=email,
        username=username,
        display_name=(as_text(data.get("display_name")) or username).strip(),
    )
    user.set_password(password)

    try:
        db.session.add(user)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        current_app.logger.exception(f"Registration Error: {e}")
        return jsonify({"message": "Internal server error"}), 500

    access_token = create_access_token(identity=str(user.id))
    return jsonify({"token": access_token, "user": user.to_dict()}), 201


@auth_bp.route("/login", methods=["POST"])
def login():
    """
    Accepts:
      - { "email": "...", "password": "..." }
      - { "username": "...", "password": "..." }
      - { "identifier": "...", "password": "..." }  # email or username
    """
    data = request.get_json(silent=True) or {}

    identifier = as_text(data.get("identifier") or data.get("email") or data.get("username")).strip()
    password = as_text(data.get("password"))

    if not identifier or not password:
        return jsonify({"message": "identifier and password are required"}), 400

    user = User.query.filter(
        or_(
            User.email == identifier.lower(),
            User.username == identifier,
        )
    ).first()

    if not user or not user.check_password(password):
        current_app.logger.info(f"[auth/login] rejected identifier='{identifier}'")
        return jsonify({"message": "invalid credentials"}), 401

    access_token = create_access_token(identity=str(user.id))
    return jsonify({"token": access_token, "user": user.to_dict()}), 200


@auth_bp.route("/me", methods=["GET"])
@jwt_required()
def me():
    user = db.session.get(User, current_user_id())
    if not user:
        return jsonify({"message": "user not found"}), 404
    return jsonify({"user": user.to_dict()}), 200
