import logging

import redis
from flask import Flask
from flask_cors import CORS

from config import Config
from errors import register_error_handlers
from models import db
from routes import other_api_bp
from routes.auth import auth_api_bp, login_manager
from routes.chat_message import chat_message_api_bp

logger = logging.getLogger(__name__)


def create_redis_client(config):
    return redis.Redis(
        host=config["REDIS_HOST"],
        port=config["REDIS_PORT"],
        db=config["REDIS_DB"],
        decode_responses=config["REDIS_DECODE_RESPONSES"],
        # The following help avoid stale connections in Redis:
        socket_keepalive=True,
        retry_on_timeout=True,
        health_check_interval=30,
        socket_connect_timeout=2,
        socket_timeout=config["REDIS_SOCKET_TIMEOUT"],
    )


def create_app(config_class=Config):
    app = Flask(__name__)
    CORS(app, supports_credentials=True)
    app.config.from_object(config_class)

    logging.basicConfig(
        level=app.config.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    db.init_app(app)
    login_manager.init_app(app)
    logger.debug(
        "Engine options: %s", app.config.get("SQLALCHEMY_ENGINE_OPTIONS")
    )

    app.redis = create_redis_client(app.config)

    app.register_blueprint(other_api_bp)
    app.register_blueprint(auth_api_bp)
    app.register_blueprint(chat_message_api_bp)
    register_error_handlers(app)

    # Ensure DB tables exist
    with app.app_context():
        db.create_all()

    return app


if __name__ == "__main__":
    app = create_app()
    app.run(host="0.0.0.0", port=6003, debug=True, threaded=True)
