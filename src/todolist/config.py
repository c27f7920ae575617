import json
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load the appropriate .env file on module import
env = os.environ.get("TODOLIST_ENV", "development").lower()
env_file = f".env.{env}"
if os.path.exists(env_file):
    load_dotenv(env_file)
else:
    # Fall back to the default .env file
    load_dotenv()


@dataclass
class Config:
    environment: str
    database_url: str
    persistence: str
    secret_key: str
    log_level: str
    bcrypt_rounds: int
    users_file: Path | None

    @classmethod
    def from_env(cls) -> "Config":
        users_file = os.environ.get("TODOLIST_USERS_FILE")
        return cls(
            environment=env,
            database_url=os.environ.get(
                "DATABASE_URL", f"postgresql://localhost:5432/todolist_{env}"
            ),
            persistence=os.environ.get("TODOLIST_PERSISTENCE", "pg").lower(),
            secret_key=os.environ.get("SECRET_KEY", "dev-secret-change-me"),
            log_level=os.environ.get("LOG_LEVEL", "INFO"),
            bcrypt_rounds=int(os.environ.get("BCRYPT_ROUNDS", "12")),
            users_file=Path(users_file) if users_file else None,
        )

    def load_users(self) -> dict[str, str]:
        """Read the ``{username: bcrypt_hash}`` mapping used by session persistence."""
        if self.users_file is None:
            return {}
        with open(self.users_file) as f:
            return json.load(f)


config = Config.from_env()
