from abc import ABC, abstractmethod
from typing import List, Optional


class Persistence(ABC):
    """
    Data access for todo lists and todos owned by a single user.

    Every operation is scoped to the owner bound at construction. Mutations
    report success as a boolean; a missing or foreign list/todo is `False`
    (or `None` for loads), never an exception. Storage faults propagate.
    """

    # Predicates

    def is_done_todo_list(self, todo_list: dict) -> bool:
        """A list is done when it has todos and all of them are done."""
        todos = todo_list["todos"]
        return len(todos) > 0 and all(todo["done"] for todo in todos)

    def is_done_todo(self, todo: dict) -> bool:
        return todo["done"]

    def has_undone_todos(self, todo_list: dict) -> bool:
        return any(not todo["done"] for todo in todo_list["todos"])

    def is_unique_constraint_violation(self, error: Exception) -> bool:
        return False

    # Reads

    @abstractmethod
    def sorted_todo_lists(self) -> List[dict]:
        """All owned lists with todos attached: undone first, then done, by title."""

    @abstractmethod
    def sorted_todos(self, todo_list: dict) -> List[dict]:
        """Todos of `todo_list`: undone first, then done, by title."""

    @abstractmethod
    def load_todo_list(self, todo_list_id: int) -> Optional[dict]:
        """The list with its todos, or None."""

    @abstractmethod
    def load_todo(self, todo_list_id: int, todo_id: int) -> Optional[dict]:
        """The todo, or None if the list or todo is absent."""

    @abstractmethod
    def exists_todo_list_title(self, title: str) -> bool:
        """True if any owned list has exactly this title."""

    # Mutations

    @abstractmethod
    def toggle_done_todo(self, todo_list_id: int, todo_id: int) -> bool:
        """Flip a todo between done and not done."""

    @abstractmethod
    def complete_all_todos(self, todo_list_id: int) -> bool:
        """Mark every todo in the list done. True whenever the list exists."""

    @abstractmethod
    def create_todo(self, todo_list_id: int, title: str) -> bool:
        """Append a new, not-done todo to the list."""

    @abstractmethod
    def delete_todo(self, todo_list_id: int, todo_id: int) -> bool:
        """Remove one todo from the list."""

    @abstractmethod
    def delete_todo_list(self, todo_list_id: int) -> bool:
        """Delete the list and all of its todos."""

    @abstractmethod
    def create_todo_list(self, title: str) -> bool:
        """Create an empty list. False if the owner already has that title."""

    @abstractmethod
    def set_todo_list_title(self, todo_list_id: int, title: str) -> bool:
        """Rename the list. False if it is missing or another owned list has that title."""

    # Authentication

    @abstractmethod
    def authenticate(self, username: str, password: str) -> bool:
        """
        True iff `username` exists and `password` matches its stored hash.

        An unknown username and a wrong password give the same result.
        """
