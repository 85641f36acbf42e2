from .message_store import append
from .history import history
from .broadcaster import publish, stream_events, user_channel
from .reconciliation import ConversationView

__all__ = [
    "append",
    "history",
    "publish",
    "stream_events",
    "user_channel",
    "ConversationView",
]
