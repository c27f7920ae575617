from flask import Flask, g, session

from todolist.config import Config, config as default_config
from todolist.log import configure_logging, get_logger
from todolist.persistence import BACKENDS, create_persistence
from todolist.persistence.ids import IdGenerator
from todolist.persistence.seed_data import max_seed_id

logger = get_logger(__name__)


def create_app(config: Config = None) -> Flask:
    """Application factory."""
    config = config or default_config
    if config.persistence not in BACKENDS:
        raise ValueError(
            f"Unknown persistence backend {config.persistence!r}; expected one of {BACKENDS}"
        )

    configure_logging(level=config.log_level)

    app = Flask(__name__)
    app.secret_key = config.secret_key

    # Shared by every request so session-backed ids stay unique process-wide.
    app.id_generator = IdGenerator(start=max_seed_id() + 1)
    app.users = config.load_users() if config.persistence == "session" else {}

    @app.before_request
    def bind_persistence():
        g.persistence = create_persistence(
            config.persistence,
            session,
            id_generator=app.id_generator,
            users=app.users,
        )

    @app.after_request
    def mark_session_modified(response):
        # Nested list mutations are invisible to Flask's change tracking.
        if config.persistence == "session":
            session.modified = True
        return response

    @app.route("/api/health")
    def health():
        return {"status": "ok", "persistence": config.persistence}

    logger.info("app_created", persistence=config.persistence, environment=config.environment)
    return app
