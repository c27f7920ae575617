"""
Persistence

Two interchangeable stores for todo lists and todos, both scoped to the
user bound at construction:

    - `PgPersistence`: PostgreSQL tables, owner filtered by username.
    - `SessionPersistence`: lists held in the user's session mapping.

`create_persistence` picks one from the configured backend name so callers
never inspect types.
"""

from typing import Callable, Mapping, MutableMapping

from todolist.persistence.base import Persistence
from todolist.persistence.ids import IdGenerator
from todolist.persistence.pg import PgPersistence
from todolist.persistence.session import SessionPersistence

BACKENDS = ("pg", "session")


def create_persistence(
    backend: str,
    session: MutableMapping,
    id_generator: Callable[[], int] = None,
    users: Mapping[str, str] = None,
) -> Persistence:
    """Construct the configured backend for one request."""
    if backend == "pg":
        return PgPersistence(session)
    if backend == "session":
        return SessionPersistence(session, id_generator=id_generator, users=users)
    raise ValueError(f"Unknown persistence backend {backend!r}; expected one of {BACKENDS}")


__all__ = [
    "BACKENDS",
    "IdGenerator",
    "Persistence",
    "PgPersistence",
    "SessionPersistence",
    "create_persistence",
]
