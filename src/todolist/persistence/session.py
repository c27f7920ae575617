from copy import deepcopy
from typing import Callable, List, Mapping, MutableMapping, Optional

from todolist.log import get_logger
from todolist.passwords import check_password
from todolist.persistence.base import Persistence
from todolist.persistence.ids import IdGenerator
from todolist.persistence.seed_data import SEED_TODO_LISTS, max_seed_id
from todolist.persistence.sort import sort_todo_lists, sort_todos

logger = get_logger(__name__)

SESSION_KEY = "todo_lists"

default_id_generator = IdGenerator(start=max_seed_id() + 1)


class SessionPersistence(Persistence):
    """
    Persistence backed by a per-user session mapping.

    The working lists live in ``session["todo_lists"]``, seeded from
    `SEED_TODO_LISTS` on first use. Reads hand out deep copies; writes mutate
    the session's lists in place.

    Concurrent requests mutating the same session are not coordinated.
    """

    def __init__(
        self,
        session: MutableMapping,
        id_generator: Callable[[], int] = None,
        users: Mapping[str, str] = None,
    ):
        if SESSION_KEY not in session:
            session[SESSION_KEY] = deepcopy(SEED_TODO_LISTS)
        self._todo_lists: List[dict] = session[SESSION_KEY]
        self._next_id = id_generator or default_id_generator
        self._users = users or {}

    # Lookups return references into the session; never hand these out.

    def _find_todo_list(self, todo_list_id: int) -> Optional[dict]:
        return next((tl for tl in self._todo_lists if tl["id"] == todo_list_id), None)

    def _new_id(self) -> int:
        """Next generator id, skipped past every id already in the session."""
        highest = max(
            (
                item["id"]
                for todo_list in self._todo_lists
                for item in [todo_list, *todo_list["todos"]]
            ),
            default=0,
        )
        return max(self._next_id(), highest + 1)

    def _find_todo(self, todo_list_id: int, todo_id: int) -> Optional[dict]:
        todo_list = self._find_todo_list(todo_list_id)
        if todo_list is None:
            return None
        return next((todo for todo in todo_list["todos"] if todo["id"] == todo_id), None)

    def sorted_todo_lists(self) -> List[dict]:
        todo_lists = deepcopy(self._todo_lists)
        for todo_list in todo_lists:
            todo_list["todos"] = self._sort(todo_list["todos"])
        undone = [tl for tl in todo_lists if not self.is_done_todo_list(tl)]
        done = [tl for tl in todo_lists if self.is_done_todo_list(tl)]
        return sort_todo_lists(undone, done)

    def _sort(self, todos: List[dict]) -> List[dict]:
        undone = [todo for todo in todos if not todo["done"]]
        done = [todo for todo in todos if todo["done"]]
        return sort_todos(undone, done)

    def sorted_todos(self, todo_list: dict) -> List[dict]:
        return deepcopy(self._sort(todo_list["todos"]))

    def load_todo_list(self, todo_list_id: int) -> Optional[dict]:
        return deepcopy(self._find_todo_list(todo_list_id))

    def load_todo(self, todo_list_id: int, todo_id: int) -> Optional[dict]:
        return deepcopy(self._find_todo(todo_list_id, todo_id))

    def exists_todo_list_title(self, title: str) -> bool:
        return any(tl["title"] == title for tl in self._todo_lists)

    def toggle_done_todo(self, todo_list_id: int, todo_id: int) -> bool:
        todo = self._find_todo(todo_list_id, todo_id)
        if todo is None:
            return False

        todo["done"] = not todo["done"]
        return True

    def complete_all_todos(self, todo_list_id: int) -> bool:
        todo_list = self._find_todo_list(todo_list_id)
        if todo_list is None:
            return False

        for todo in todo_list["todos"]:
            todo["done"] = True
        return True

    def create_todo(self, todo_list_id: int, title: str) -> bool:
        todo_list = self._find_todo_list(todo_list_id)
        if todo_list is None:
            return False

        todo_list["todos"].append({"id": self._new_id(), "title": title, "done": False})
        return True

    def delete_todo(self, todo_list_id: int, todo_id: int) -> bool:
        todo_list = self._find_todo_list(todo_list_id)
        if todo_list is None:
            return False

        todos = todo_list["todos"]
        for index, todo in enumerate(todos):
            if todo["id"] == todo_id:
                del todos[index]
                return True
        return False

    def delete_todo_list(self, todo_list_id: int) -> bool:
        for index, todo_list in enumerate(self._todo_lists):
            if todo_list["id"] == todo_list_id:
                del self._todo_lists[index]
                return True
        return False

    def create_todo_list(self, title: str) -> bool:
        if self.exists_todo_list_title(title):
            logger.info("todo_list_title_conflict", title=title)
            return False

        self._todo_lists.append({"id": self._new_id(), "title": title, "todos": []})
        return True

    def set_todo_list_title(self, todo_list_id: int, title: str) -> bool:
        """Rename a list. False if it is missing or another list already has the title."""
        todo_list = self._find_todo_list(todo_list_id)
        if todo_list is None:
            return False

        if any(tl["title"] == title and tl is not todo_list for tl in self._todo_lists):
            logger.info("todo_list_title_conflict", title=title)
            return False

        todo_list["title"] = title
        return True

    def authenticate(self, username: str, password: str) -> bool:
        hashed = self._users.get(username)
        if hashed is None or not check_password(password, hashed):
            logger.info("authentication_failed")
            return False
        return True
