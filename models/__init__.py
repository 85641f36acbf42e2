from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()

from .user import User  # noqa: E402,F401
from .chat_message import ChatMessage  # noqa: E402,F401
