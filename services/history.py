import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import joinedload

from errors import PersistenceError, ValidationError
from models import db
from models.chat_message import ChatMessage

logger = logging.getLogger(__name__)


def history(user_a, user_b):
    """
    Return every message exchanged between user_a and user_b, oldest first.

    The pair is unordered, so history(a, b) and history(b, a) return the
    same list. Ordering is by id only.
    """
    if user_a == user_b:
        raise ValidationError("A conversation needs two different users.")

    try:
        return (
            ChatMessage.query.options(
                joinedload(ChatMessage.sender),
                joinedload(ChatMessage.receiver),
            )
            .filter(
                (
                    (ChatMessage.sender_id == user_a)
                    & (ChatMessage.receiver_id == user_b)
                )
                | (
                    (ChatMessage.sender_id == user_b)
                    & (ChatMessage.receiver_id == user_a)
                )
            )
            .order_by(ChatMessage.id.asc())
            .all()
        )
    except SQLAlchemyError as exc:
        db.session.rollback()
        logger.exception("History lookup failed for %s/%s", user_a, user_b)
        raise PersistenceError("Message history is unavailable.") from exc
