from flask import Blueprint, jsonify
from flask_login import (
    LoginManager,
    current_user,
    login_required,
    login_user,
    logout_user,
)

from sqlalchemy.exc import IntegrityError

from models import db
from models.user import User
from . import get_json_object, get_text_field, get_user


auth_api_bp = Blueprint("auth", __name__)

login_manager = LoginManager()


@login_manager.user_loader
def load_user(user_id):
    return get_user(int(user_id))


@login_manager.unauthorized_handler
def unauthorized():
    return jsonify({"error": "Authentication required."}), 401


# =================================
#       User / Session Endpoints
# =================================


@auth_api_bp.route("/users", methods=["POST"])
def create_user():
    data = get_json_object()
    if data is None:
        return jsonify({"error": "Request body must be a JSON object."}), 400

    username = get_text_field(data, "username")
    password = get_text_field(data, "password")
    if not username or not password:
        return jsonify({"error": "Username and password required."}), 400

    existing_user = User.query.filter_by(username=username).first()
    if existing_user:
        return jsonify({"error": "User already exists."}), 400

    new_user = User(username=username)
    new_user.password = password
    db.session.add(new_user)
    try:
        db.session.commit()
    except IntegrityError:
        # Lost a race with a concurrent registration of the same name
        db.session.rollback()
        return jsonify({"error": "User already exists."}), 400
    return jsonify(
        {"message": "User created successfully!", "user": new_user.to_summary()}
    ), 201


@auth_api_bp.route("/login", methods=["POST"])
def login():
    data = get_json_object()
    if data is None:
        return jsonify({"error": "Request body must be a JSON object."}), 400

    username = get_text_field(data, "username")
    password = data.get("password")
    if not isinstance(password, str):
        password = ""

    user = User.query.filter_by(username=username).first()
    if not user or not user.verify_password(password):
        return jsonify({"error": "Invalid username or password."}), 401

    login_user(user, remember=bool(data.get("remember")))
    return jsonify({"message": "Logged in.", "user": user.to_summary()}), 200


@auth_api_bp.route("/logout", methods=["POST"])
@login_required
def logout():
    username = current_user.username
    logout_user()
    return jsonify({"message": f"User '{username}' logged out."}), 200
