import platform
from importlib.metadata import version

from flask import Blueprint, jsonify, request

from models import db
from models.user import User


other_api_bp = Blueprint("other", __name__)


@other_api_bp.route("/", methods=["GET"])
def health_check():
    return jsonify(
        {
            "status": "Pair chat service is running!",
            "can_login": True,
            "can_register": True,
            "flask_version": version("flask"),
            "python_version": platform.python_version(),
        }
    ), 200


# =================================
#         Helper Functions
# =================================


def get_user(user_id):
    """
    Helper to retrieve a User by primary key, or None.
    """
    return db.session.get(User, user_id)


def get_json_object():
    """
    Request body as a dict. A missing body counts as empty; any other
    JSON value (list, string, number) returns None.
    """
    data = request.get_json(silent=True)
    if data is None:
        return {}
    return data if isinstance(data, dict) else None


def get_text_field(data, key):
    value = data.get(key)
    return value.strip() if isinstance(value, str) else ""
