"""
Live delivery over Redis pub/sub.

Every user has one channel. A stored message is published to the
receiver's channel and the sender's channel so the sender's other devices
stay in step. Delivery is best effort: nothing is replayed for clients
that were offline, they catch up from the history endpoint.
"""

import json
import logging

import redis
from flask import current_app

from errors import DeliveryError

logger = logging.getLogger(__name__)

MESSAGE_SENT = "message.sent"


def user_channel(user_id):
    prefix = current_app.config.get("CHAT_CHANNEL_PREFIX", "chat-user")
    return f"{prefix}-{user_id}"


def build_event(message):
    return json.dumps({"type": MESSAGE_SENT, "message": message.to_dict()})


def _publish_to(client, channel, payload):
    try:
        return client.publish(channel, payload)
    except redis.exceptions.RedisError as exc:
        raise DeliveryError(f"Publish to '{channel}' failed: {exc}") from exc


def publish(message, redis_client=None):
    """
    Push a stored message to every live session of both participants.

    Returns how many subscribers received it. Never raises for delivery
    problems; the caller's send has already succeeded.
    """
    client = redis_client if redis_client is not None else current_app.redis
    payload = build_event(message)

    delivered = 0
    for user_id in (message.receiver_id, message.sender_id):
        channel = user_channel(user_id)
        try:
            delivered += _publish_to(client, channel, payload) or 0
        except DeliveryError as exc:
            logger.warning(
                "Live delivery of message %s skipped: %s", message.id, exc
            )

    logger.debug(
        "Message %s reached %d live session(s)", message.id, delivered
    )
    return delivered


def open_subscription(user_id, redis_client=None):
    """Subscribe to user_id's channel; DeliveryError if Redis is down."""
    client = redis_client if redis_client is not None else current_app.redis
    channel = user_channel(user_id)
    pubsub = client.pubsub(ignore_subscribe_messages=True)
    try:
        pubsub.subscribe(channel)
    except redis.exceptions.RedisError as exc:
        pubsub.close()
        logger.warning("Could not subscribe to '%s': %s", channel, exc)
        raise DeliveryError("Live updates are unavailable.") from exc
    return pubsub


def stream_events(pubsub, heartbeat=15):
    """
    Turn a pub/sub subscription into Server-Sent Events frames.

    Yields a comment line whenever `heartbeat` seconds pass without a
    message so proxies keep the connection open. A lost Redis connection
    ends the stream; clients reconnect and reload history. The subscription
    is closed when the stream ends or the consumer stops iterating.
    """
    try:
        yield ": connected\n\n"
        while True:
            try:
                item = pubsub.get_message(
                    ignore_subscribe_messages=True, timeout=heartbeat
                )
            except redis.exceptions.RedisError as exc:
                logger.warning("Live stream ended, Redis failed: %s", exc)
                return
            if item is None:
                yield ": keep-alive\n\n"
                continue

            data = item["data"]
            if isinstance(data, bytes):
                data = data.decode("utf-8")
            yield f"event: chat\ndata: {data}\n\n"
    finally:
        pubsub.close()
