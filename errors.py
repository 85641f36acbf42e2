from flask import jsonify


class ChatError(Exception):
    """Base class for chat failures that map onto an HTTP status."""

    status_code = 500


class ValidationError(ChatError):
    # Empty text, unknown or identical participants
    status_code = 400


class AuthorizationError(ChatError):
    """Reserved for the Session Gate; the chat services never raise it."""

    status_code = 403


class PersistenceError(ChatError):
    # Store unavailable or write failed; nothing was stored
    status_code = 503


class DeliveryError(ChatError):
    """
    Live push failed. Logged by the broadcaster and never returned to a
    client, since the message is already stored.
    """

    status_code = 502


def register_error_handlers(app):
    @app.errorhandler(ChatError)
    def handle_chat_error(error):
        return jsonify({"error": str(error)}), error.status_code
