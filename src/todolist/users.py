from typing import Optional

from todolist import db
from todolist.passwords import hash_password


class UserRepository:
    """
    Repository for application users.
    Encapsulates all SQL for the users table. Passwords are stored as bcrypt hashes.
    """

    def get(self, username: str) -> Optional[dict]:
        """Get a user (username only, never the hash)."""
        return db.fetch_one("SELECT username FROM users WHERE username = %s", (username,))

    def create(self, username: str, password: str, rounds: int = None) -> dict:
        """Create a user. Raises psycopg.errors.UniqueViolation if the username is taken."""
        return db.fetch_one(
            """
            INSERT INTO users (username, password)
            VALUES (%s, %s)
            RETURNING username
            """,
            (username, hash_password(password, rounds=rounds)),
        )

    def set_password(self, username: str, password: str, rounds: int = None) -> bool:
        """Replace a user's password. Returns False if the user doesn't exist."""
        rowcount = db.execute(
            "UPDATE users SET password = %s WHERE username = %s",
            (hash_password(password, rounds=rounds), username),
        )
        return rowcount > 0
