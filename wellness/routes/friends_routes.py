# wellness/routes/friends_routes.py
from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required
from sqlalchemy import and_, or_

from .. import db
from ..models.social import Friendship
from ..models.user import User
from .helpers import current_user_id, run_badge_check

friends_bp = Blueprint("friends", __name__)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _get_friend_ids(user_id: int) -> list[int]:
    friendships = Friendship.query.filter(
        Friendship.status == "accepted",
        or_(
            Friendship.requester_id == user_id,
            Friendship.addressee_id == user_id,
        ),
    ).all()
    return list({f.other_user_id(user_id) for f in friendships})


def _friendship_between(user_a: int, user_b: int):
    return Friendship.query.filter(
        or_(
            and_(
                Friendship.requester_id == user_a,
                Friendship.addressee_id == user_b,
            ),
            and_(
                Friendship.requester_id == user_b,
                Friendship.addressee_id == user_a,
            ),
        )
    ).first()


# ---------------------------------------------------------------------------
# Friends
# ---------------------------------------------------------------------------

@friends_bp.route("", methods=["GET"])
@jwt_required()
def get_friends():
    """
    Returns:
    {
      "friends": [
        {"id": 2, "username": "alice", "display_name": "Alice", "avatar_url": null},
        ...
      ]
    }
    """
    friend_ids = _get_friend_ids(current_user_id())
    if not friend_ids:
        return jsonify({"friends": []}), 200

    friends = (
        User.query.filter(User.id.in_(friend_ids))
        .order_by(User.username.asc())
        .all()
    )

    payload = [
        {
            "id": u.id,
            "username": u.username,
            "display_name": u.display_name,
            "avatar_url": u.avatar_url,
        }
        for u in friends
    ]
    return jsonify({"friends": payload}), 200


@friends_bp.route("/request", methods=["POST"])
@jwt_required()
def send_friend_request():
    """
    Body:
    {
      "username": "friendUsername"
      // OR "user_id": 2
    }
    """
    user_id = current_user_id()
    data = request.get_json(silent=True) or {}

    friend_username = data.get("username")
    friend_user_id = data.get("user_id")

    if friend_username:
        target = User.query.filter_by(username=friend_username).first()
    elif friend_user_id:
        target = db.session.get(User, friend_user_id)
    else:
        return jsonify({"message": "username or user_id is required"}), 400

    if not target:
        return jsonify({"message": "target user not found"}), 404

    if target.id == user_id:
        return jsonify({"message": "cannot add yourself as a friend"}), 400

    existing = _friendship_between(user_id, target.id)
    if existing:
        if existing.status == "accepted":
            return jsonify({"message": "already friends"}), 200
        if existing.status == "pending":
            return jsonify({"message": "friend request already pending"}), 200
        if existing.status == "blocked":
            return jsonify({"message": "friendship is blocked"}), 403

    friendship = Friendship(
        requester_id=user_id,
        addressee_id=target.id,
        status="pending",
    )
    db.session.add(friendship)
    db.session.commit()

    return jsonify({"message": "friend request sent"}), 201


@friends_bp.route("/<int:friend_id>/accept", methods=["POST"])
@jwt_required()
def accept_friend_request(friend_id: int):
    user_id = current_user_id()

    friendship = Friendship.query.filter_by(
        requester_id=friend_id,
        addressee_id=user_id,
        status="pending",
    ).first()

    if not friendship:
        return jsonify({"message": "no pending request from this user"}), 404

    friendship.status = "accepted"
    db.session.commit()

    # both sides just gained a friend
    run_badge_check("recompute_friends_badges", user_id)
    run_badge_check("recompute_friends_badges", friend_id)

    return jsonify({"message": "friend request accepted"}), 200


@friends_bp.route("/<int:friend_id>/block", methods=["POST"])
@jwt_required()
def block_user(friend_id: int):
    user_id = current_user_id()

    friendship = _friendship_between(user_id, friend_id)
    if friendship:
        friendship.status = "blocked"
    else:
        friendship = Friendship(
            requester_id=user_id,
            addressee_id=friend_id,
            status="blocked",
        )
        db.session.add(friendship)

    db.session.commit()
    return jsonify({"message": "user blocked"}), 200


@friends_bp.route("/<int:friend_id>", methods=["DELETE"])
@jwt_required()
def remove_friend(friend_id: int):
    user_id = current_user_id()

    friendship = _friendship_between(user_id, friend_id)
    if not friendship or friendship.status != "accepted":
        return jsonify({"message": "not friends with this user"}), 404

    # earned friend badges stay earned
    db.session.delete(friendship)
    db.session.commit()
    return jsonify({"message": "friend removed"}), 200
