import bisect
import json


class ConversationView:
    """
    Client-side copy of one conversation, ordered by message id.

    Messages can arrive twice: once in the send response and again from
    the live channel, or from a history reload that overlaps what was
    already pushed. The id is the only identity, so a repeat is dropped
    and arrival order never affects display order.
    """

    def __init__(self, messages=()):
        self._ids = []
        self._by_id = {}
        self.merge(messages)

    def insert(self, message):
        """Add message if its id is new. Returns True when it was added."""
        message_id = message["id"]
        if message_id in self._by_id:
            return False
        bisect.insort(self._ids, message_id)
        self._by_id[message_id] = message
        return True

    def merge(self, messages):
        return sum(1 for message in messages if self.insert(message))

    def apply_event(self, payload):
        """Insert the message carried by a live-channel event."""
        if isinstance(payload, (str, bytes)):
            payload = json.loads(payload)
        if payload.get("type") != "message.sent":
            return False
        return self.insert(payload["message"])

    def messages(self):
        return [self._by_id[message_id] for message_id in self._ids]

    @property
    def last_id(self):
        return self._ids[-1] if self._ids else None

    def __contains__(self, message_id):
        return message_id in self._by_id

    def __len__(self):
        return len(self._ids)

    def __iter__(self):
        return iter(self.messages())
