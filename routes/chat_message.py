from flask import (
    Blueprint,
    Response,
    current_app,
    jsonify,
    stream_with_context,
)
from flask_login import current_user, login_required

from errors import ValidationError
from models.user import User
from services import append, history, publish
from services.broadcaster import open_subscription, stream_events
from . import get_json_object, get_user


chat_message_api_bp = Blueprint("chat_message", __name__)


# =================================
#    Chat Message Endpoints
# =================================


@chat_message_api_bp.route("/dashboard", methods=["GET"])
@login_required
def dashboard():
    """
    List everyone the caller could open a chat with.
    """
    users = (
        User.query.filter(User.id != current_user.id)
        .order_by(User.username.asc())
        .all()
    )
    return jsonify({"users": [u.to_summary() for u in users]}), 200


@chat_message_api_bp.route("/chat/<int:friend_id>", methods=["GET"])
@login_required
def open_chat(friend_id):
    friend = get_user(friend_id)
    if not friend:
        return jsonify({"error": "User not found."}), 404
    return jsonify(
        {"friend": friend.to_summary(), "user": current_user.to_summary()}
    ), 200


@chat_message_api_bp.route("/messages/<int:friend_id>", methods=["GET"])
@login_required
def get_messages(friend_id):
    """
    Conversation between the caller and friend_id, oldest first.
    """
    if not get_user(friend_id):
        return jsonify({"error": "User not found."}), 404

    messages = history(current_user.id, friend_id)
    return jsonify({"messages": [m.to_dict() for m in messages]}), 200


@chat_message_api_bp.route("/messages/<int:friend_id>", methods=["POST"])
@login_required
def send_message(friend_id):
    """
    Store a message from the caller to friend_id, then push it live.

    The response carries the stored message with its id; the push is best
    effort and never changes the outcome.
    """
    if not get_user(friend_id):
        return jsonify({"error": "User not found."}), 404

    data = get_json_object()
    if data is None:
        raise ValidationError("Request body must be a JSON object.")
    message = append(current_user.id, friend_id, data.get("message"))
    publish(message)

    return jsonify(message.to_dict()), 201


@chat_message_api_bp.route("/messages/stream", methods=["GET"])
@login_required
def stream_messages():
    """
    Server-Sent Events feed of every message sent to or by the caller.
    """
    pubsub = open_subscription(current_user.id)
    heartbeat = current_app.config.get("CHAT_STREAM_HEARTBEAT", 15)
    return Response(
        stream_with_context(stream_events(pubsub, heartbeat)),
        mimetype="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )
