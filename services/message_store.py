import logging

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from errors import PersistenceError, ValidationError
from models import db
from models.chat_message import ChatMessage
from models.user import User

logger = logging.getLogger(__name__)


def _clean_text(text):
    if not isinstance(text, str):
        raise ValidationError("Message text must be a string.")
    text = text.strip()
    if not text:
        raise ValidationError("Message text must not be empty.")

    max_length = current_app.config.get("CHAT_MAX_MESSAGE_LENGTH")
    if max_length and len(text) > max_length:
        raise ValidationError(
            f"Message text exceeds {max_length} characters."
        )
    return text


def _ensure_participants(sender_id, receiver_id):
    if sender_id == receiver_id:
        raise ValidationError("Sender and receiver must be different users.")

    try:
        found = User.query.filter(
            User.id.in_([sender_id, receiver_id])
        ).count()
    except SQLAlchemyError as exc:
        db.session.rollback()
        logger.exception("Participant lookup failed")
        raise PersistenceError("Message store is unavailable.") from exc

    if found != 2:
        raise ValidationError("Sender and receiver must be existing users.")


def append(sender_id, receiver_id, text):
    """
    Persist a new message from sender_id to receiver_id.

    The id comes from the table's autoincrement, so concurrent sends into
    the same conversation still get distinct, increasing ids. On any
    database failure the session is rolled back and PersistenceError is
    raised; nothing partial is left behind.
    """
    text = _clean_text(text)
    _ensure_participants(sender_id, receiver_id)

    message = ChatMessage(
        sender_id=sender_id, receiver_id=receiver_id, text=text
    )
    try:
        db.session.add(message)
        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        logger.exception(
            "Failed to store message from %s to %s", sender_id, receiver_id
        )
        raise PersistenceError("Message could not be stored.") from exc

    logger.info(
        "Stored message %s from %s to %s", message.id, sender_id, receiver_id
    )
    return message
