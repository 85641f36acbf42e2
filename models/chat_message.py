from datetime import datetime, timezone

from . import db


class ChatMessage(db.Model):
    """
    One message between two users. Rows are never updated or deleted.

    `id` is the ordering and deduplication key for a conversation;
    `created_at` is informational only.
    """

    __tablename__ = "chat_messages"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    sender_id = db.Column(
        db.Integer, db.ForeignKey("users.id"), nullable=False
    )
    receiver_id = db.Column(
        db.Integer, db.ForeignKey("users.id"), nullable=False
    )
    text = db.Column(db.Text, nullable=False)
    created_at = db.Column(
        db.DateTime,
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    sender = db.relationship("User", foreign_keys=[sender_id], lazy=True)
    receiver = db.relationship("User", foreign_keys=[receiver_id], lazy=True)

    # Both branches of the pair lookup hit this index.
    # AUTOINCREMENT keeps SQLite from reusing ids.
    __table_args__ = (
        db.Index("ix_chat_messages_pair", "sender_id", "receiver_id", "id"),
        {"sqlite_autoincrement": True},
    )

    def to_dict(self):
        return {
            "id": self.id,
            "sender_id": self.sender_id,
            "receiver_id": self.receiver_id,
            "text": self.text,
            "created_at": self.created_at.isoformat()
            if self.created_at
            else None,
            "sender": self.sender.to_summary() if self.sender else None,
            "receiver": self.receiver.to_summary() if self.receiver else None,
        }

    def __repr__(self):
        return f"<ChatMessage id={self.id}, sender_id={self.sender_id}, receiver_id={self.receiver_id}>"
