import threading
import unittest
from unittest.mock import patch

from sqlalchemy.exc import OperationalError

from errors import PersistenceError, ValidationError
from models import db
from models.chat_message import ChatMessage
from services import append, history
from tests.base import ChatTestCase


class TestMessageStore(ChatTestCase):
    def setUp(self):
        super().setUp()
        self.alice_id = self.create_user("alice")
        self.bob_id = self.create_user("bob")

    def test_append_returns_stored_message(self):
        with self.app.app_context():
            message = append(self.alice_id, self.bob_id, "  hi bob  ")

            self.assertIsNotNone(message.id)
            self.assertEqual(message.text, "hi bob")
            self.assertEqual(message.sender_id, self.alice_id)
            self.assertEqual(message.receiver_id, self.bob_id)
            self.assertIsNotNone(message.created_at)

    def test_appended_message_appears_once_in_history(self):
        with self.app.app_context():
            message = append(self.alice_id, self.bob_id, "hello")
            ids = [m.id for m in history(self.alice_id, self.bob_id)]

            self.assertEqual(ids.count(message.id), 1)

    def test_ids_increase_with_each_append(self):
        with self.app.app_context():
            ids = [
                append(self.alice_id, self.bob_id, f"message {i}").id
                for i in range(5)
            ]

            self.assertEqual(ids, sorted(ids))
            self.assertEqual(len(set(ids)), 5)

    def test_empty_text_is_rejected(self):
        with self.app.app_context():
            for text in ("", "   ", "\n\t"):
                with self.assertRaises(ValidationError):
                    append(self.alice_id, self.bob_id, text)

            self.assertEqual(ChatMessage.query.count(), 0)

    def test_missing_text_is_rejected(self):
        with self.app.app_context():
            with self.assertRaises(ValidationError):
                append(self.alice_id, self.bob_id, None)

            self.assertEqual(ChatMessage.query.count(), 0)

    def test_overlong_text_is_rejected(self):
        self.app.config["CHAT_MAX_MESSAGE_LENGTH"] = 10
        with self.app.app_context():
            with self.assertRaises(ValidationError):
                append(self.alice_id, self.bob_id, "x" * 11)

            self.assertEqual(ChatMessage.query.count(), 0)

    def test_sending_to_self_is_rejected(self):
        with self.app.app_context():
            with self.assertRaises(ValidationError):
                append(self.alice_id, self.alice_id, "talking to myself")

    def test_unknown_receiver_is_rejected(self):
        with self.app.app_context():
            with self.assertRaises(ValidationError):
                append(self.alice_id, 9999, "anyone there?")

            self.assertEqual(ChatMessage.query.count(), 0)

    def test_failed_write_raises_persistence_error_and_stores_nothing(self):
        failure = OperationalError("INSERT", {}, Exception("database is down"))
        with self.app.app_context():
            with patch.object(db.session, "commit", side_effect=failure):
                with self.assertRaises(PersistenceError):
                    append(self.alice_id, self.bob_id, "lost?")

            self.assertEqual(ChatMessage.query.count(), 0)

    def test_concurrent_appends_get_distinct_increasing_ids(self):
        results = []
        errors = []
        lock = threading.Lock()

        def send(i):
            try:
                with self.app.app_context():
                    message = append(
                        self.alice_id, self.bob_id, f"concurrent {i}"
                    )
                    with lock:
                        results.append(message.id)
            except Exception as exc:
                with lock:
                    errors.append(exc)

        threads = [threading.Thread(target=send, args=(i,)) for i in range(20)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertEqual(errors, [])
        self.assertEqual(len(results), 20)
        self.assertEqual(len(set(results)), 20)

        with self.app.app_context():
            stored = [m.id for m in history(self.alice_id, self.bob_id)]
        self.assertEqual(stored, sorted(results))


if __name__ == "__main__":
    unittest.main()
