"""Partitioned orderings: not-done entries first, then done, alphabetical within each."""

from typing import List


def _title_key(item: dict) -> str:
    return item["title"].lower()


def _partitioned(undone: List[dict], done: List[dict]) -> List[dict]:
    return sorted(undone, key=_title_key) + sorted(done, key=_title_key)


def sort_todo_lists(undone: List[dict], done: List[dict]) -> List[dict]:
    """Return undone lists followed by done lists, each ordered by title."""
    return _partitioned(undone, done)


def sort_todos(undone: List[dict], done: List[dict]) -> List[dict]:
    """Return undone todos followed by done todos, each ordered by title."""
    return _partitioned(undone, done)
