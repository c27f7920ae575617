"""Todo lists every new session starts with."""

SEED_TODO_LISTS = [
    {
        "id": 1,
        "title": "Work Todos",
        "todos": [
            {"id": 2, "title": "Get coffee", "done": True},
            {"id": 3, "title": "Chat with co-workers", "done": True},
            {"id": 4, "title": "Duck out of meeting", "done": False},
        ],
    },
    {
        "id": 5,
        "title": "Home Todos",
        "todos": [
            {"id": 6, "title": "Feed the cats", "done": True},
            {"id": 7, "title": "Go to bed", "done": True},
            {"id": 8, "title": "Buy milk", "done": True},
            {"id": 9, "title": "Study for Launch School", "done": True},
        ],
    },
    {
        "id": 10,
        "title": "Additional Todos",
        "todos": [],
    },
    {
        "id": 11,
        "title": "social todos",
        "todos": [
            {"id": 12, "title": "Go to Libby's birthday party", "done": False},
        ],
    },
]


def max_seed_id() -> int:
    """Highest id used anywhere in the seed lists."""
    ids = [todo_list["id"] for todo_list in SEED_TODO_LISTS]
    ids.extend(todo["id"] for todo_list in SEED_TODO_LISTS for todo in todo_list["todos"])
    return max(ids, default=0)
