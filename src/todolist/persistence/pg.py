import re
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional

from psycopg import errors

from todolist import db
from todolist.log import get_logger
from todolist.passwords import check_password
from todolist.persistence.base import Persistence

logger = get_logger(__name__)

UNIQUE_VIOLATION_SQLSTATE = "23505"

# Fallback for errors that reach us without a SQLSTATE (e.g. re-wrapped by a
# driver layer). Tied to PostgreSQL's English message text.
UNIQUE_VIOLATION_MESSAGE = re.compile(r"duplicate key value violates unique constraint")


class PgPersistence(Persistence):
    """
    PostgreSQL-backed persistence.
    Encapsulates all SQL for the todolists, todos and users tables; every
    query is filtered by the owning username.
    """

    def __init__(self, session):
        self.username = session.get("username")

    def _fetch_concurrently(self, first: tuple, second: tuple):
        """Run two independent fetch_all queries in parallel and return both results."""
        with ThreadPoolExecutor(max_workers=2) as pool:
            first_future = pool.submit(db.fetch_all, *first)
            second_future = pool.submit(db.fetch_all, *second)
            return first_future.result(), second_future.result()

    def _find_todo_list(self, todo_list_id: int) -> Optional[dict]:
        return db.fetch_one(
            "SELECT id, title FROM todolists WHERE id = %s AND username = %s",
            (todo_list_id, self.username),
        )

    def sorted_todo_lists(self) -> List[dict]:
        all_todo_lists, all_todos = self._fetch_concurrently(
            (
                """
                SELECT id, title FROM todolists
                WHERE username = %s
                ORDER BY lower(title) ASC
                """,
                (self.username,),
            ),
            (
                """
                SELECT id, todolist_id, title, done FROM todos
                WHERE username = %s
                ORDER BY done ASC, lower(title) ASC
                """,
                (self.username,),
            ),
        )

        for todo_list in all_todo_lists:
            todo_list["todos"] = [
                todo for todo in all_todos if todo["todolist_id"] == todo_list["id"]
            ]

        return self._partition_todo_lists(all_todo_lists)

    def _partition_todo_lists(self, todo_lists: List[dict]) -> List[dict]:
        """Move done lists after undone ones, keeping the SQL ordering within each group."""
        undone = [tl for tl in todo_lists if not self.is_done_todo_list(tl)]
        done = [tl for tl in todo_lists if self.is_done_todo_list(tl)]
        return undone + done

    def sorted_todos(self, todo_list: dict) -> List[dict]:
        return db.fetch_all(
            """
            SELECT id, todolist_id, title, done FROM todos
            WHERE todolist_id = %s AND username = %s
            ORDER BY done ASC, lower(title) ASC
            """,
            (todo_list["id"], self.username),
        )

    def load_todo_list(self, todo_list_id: int) -> Optional[dict]:
        todo_lists, todos = self._fetch_concurrently(
            (
                "SELECT id, title FROM todolists WHERE id = %s AND username = %s",
                (todo_list_id, self.username),
            ),
            (
                """
                SELECT id, todolist_id, title, done FROM todos
                WHERE todolist_id = %s AND username = %s
                """,
                (todo_list_id, self.username),
            ),
        )

        if not todo_lists:
            return None

        todo_list = todo_lists[0]
        todo_list["todos"] = todos
        return todo_list

    def load_todo(self, todo_list_id: int, todo_id: int) -> Optional[dict]:
        return db.fetch_one(
            """
            SELECT id, todolist_id, title, done FROM todos
            WHERE todolist_id = %s AND id = %s AND username = %s
            """,
            (todo_list_id, todo_id, self.username),
        )

    def exists_todo_list_title(self, title: str) -> bool:
        row = db.fetch_one(
            "SELECT 1 AS found FROM todolists WHERE title = %s AND username = %s",
            (title, self.username),
        )
        return row is not None

    def toggle_done_todo(self, todo_list_id: int, todo_id: int) -> bool:
        rowcount = db.execute(
            """
            UPDATE todos SET done = NOT done
            WHERE todolist_id = %s AND id = %s AND username = %s
            """,
            (todo_list_id, todo_id, self.username),
        )
        return rowcount > 0

    def complete_all_todos(self, todo_list_id: int) -> bool:
        rowcount = db.execute(
            """
            UPDATE todos SET done = true
            WHERE todolist_id = %s AND NOT done AND username = %s
            """,
            (todo_list_id, self.username),
        )
        if rowcount > 0:
            return True

        # Nothing changed: either every todo was already done or the list is missing.
        return self._find_todo_list(todo_list_id) is not None

    def create_todo(self, todo_list_id: int, title: str) -> bool:
        # Selecting from the owned list makes a missing list insert zero rows.
        rowcount = db.execute(
            """
            INSERT INTO todos (todolist_id, title, username)
            SELECT id, %s, username FROM todolists
            WHERE id = %s AND username = %s
            """,
            (title, todo_list_id, self.username),
        )
        return rowcount > 0

    def delete_todo(self, todo_list_id: int, todo_id: int) -> bool:
        rowcount = db.execute(
            "DELETE FROM todos WHERE todolist_id = %s AND id = %s AND username = %s",
            (todo_list_id, todo_id, self.username),
        )
        return rowcount > 0

    def delete_todo_list(self, todo_list_id: int) -> bool:
        # Todos go with it through ON DELETE CASCADE.
        rowcount = db.execute(
            "DELETE FROM todolists WHERE id = %s AND username = %s",
            (todo_list_id, self.username),
        )
        return rowcount > 0

    def create_todo_list(self, title: str) -> bool:
        try:
            rowcount = db.execute(
                "INSERT INTO todolists (title, username) VALUES (%s, %s)",
                (title, self.username),
            )
        except Exception as error:
            if self.is_unique_constraint_violation(error):
                logger.info("todo_list_title_conflict", username=self.username, title=title)
                return False
            raise
        return rowcount > 0

    def set_todo_list_title(self, todo_list_id: int, title: str) -> bool:
        """Rename a list. False if it is missing or the title is taken by another owned list."""
        try:
            rowcount = db.execute(
                "UPDATE todolists SET title = %s WHERE id = %s AND username = %s",
                (title, todo_list_id, self.username),
            )
        except Exception as error:
            if self.is_unique_constraint_violation(error):
                logger.info("todo_list_title_conflict", username=self.username, title=title)
                return False
            raise
        return rowcount > 0

    def is_unique_constraint_violation(self, error: Exception) -> bool:
        """
        True if `error` is a UNIQUE constraint violation.

        Checks the SQLSTATE first and falls back to matching PostgreSQL's
        message text when no code is available.
        """
        if isinstance(error, errors.UniqueViolation):
            return True
        sqlstate = getattr(error, "sqlstate", None)
        if sqlstate is not None:
            return sqlstate == UNIQUE_VIOLATION_SQLSTATE
        return UNIQUE_VIOLATION_MESSAGE.search(str(error)) is not None

    def authenticate(self, username: str, password: str) -> bool:
        row = db.fetch_one("SELECT password FROM users WHERE username = %s", (username,))
        if row is None or not check_password(password, row["password"]):
            logger.info("authentication_failed")
            return False
        return True
