import os
from dotenv import load_dotenv

# Only load .env in development mode (Optional)
if os.getenv("FLASK_ENV") == "development":
    load_dotenv()


class Config:
    # --------------------------------------
    # Flask / SQLAlchemy Settings
    # --------------------------------------
    SQLALCHEMY_DATABASE_URI = os.getenv(
        "SQLALCHEMY_DATABASE_URI", "sqlite:///pairchat.db"
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # 'pool_pre_ping' tests each pooled connection with a SELECT 1 before use,
    # 'pool_recycle' drops connections idle for longer than N seconds.
    SQLALCHEMY_ENGINE_OPTIONS = {
        "pool_pre_ping": True,
        "pool_recycle": 300,  # 5 minutes
    }

    # --------------------------------------
    # Redis config (pub/sub for live delivery)
    # --------------------------------------
    REDIS_HOST = os.getenv("REDIS_HOST", "localhost")
    REDIS_PORT = int(os.getenv("REDIS_PORT", 6379))
    REDIS_DB = int(os.getenv("REDIS_DB", 0))
    REDIS_DECODE_RESPONSES = (
        os.getenv("REDIS_DECODE_RESPONSES", "True") == "True"
    )
    # Upper bound on a single publish attempt
    REDIS_SOCKET_TIMEOUT = float(os.getenv("REDIS_SOCKET_TIMEOUT", 2))

    # --------------------------------------
    # Chat settings
    # --------------------------------------
    CHAT_CHANNEL_PREFIX = os.getenv("CHAT_CHANNEL_PREFIX", "chat-user")
    CHAT_MAX_MESSAGE_LENGTH = int(os.getenv("CHAT_MAX_MESSAGE_LENGTH", 5000))
    CHAT_STREAM_HEARTBEAT = float(os.getenv("CHAT_STREAM_HEARTBEAT", 15))

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # --------------------------------------
    # Flask Secret Key
    # (Make sure to set this as an environment variable in production)
    # --------------------------------------
    SECRET_KEY = os.getenv("SECRET_KEY", "default_secret_key")
