#!/usr/bin/env python3
"""Todolist CLI for database and user administration."""

import argparse

import psycopg
import questionary
from psycopg.errors import UniqueViolation
from rich.console import Console
from rich.table import Table

from todolist.config import config
from todolist.log import configure_logging, get_logger
from todolist.passwords import hash_password
from todolist.persistence import PgPersistence
from todolist.users import UserRepository

console = Console()
logger = get_logger(__name__)


def prompt_password() -> str | None:
    """Ask for a password twice; None if cancelled or the entries differ."""
    password = questionary.password("Password:").ask()
    if not password:
        return None
    confirmation = questionary.password("Repeat password:").ask()
    if password != confirmation:
        console.print("[red]Passwords do not match.[/]")
        return None
    return password


def init_db():
    """Apply the initial schema to the configured database."""
    from todolist.db import apply_schema

    console.print(f"[yellow]Will apply schema to [bold]{config.database_url}[/].[/]")
    if not questionary.confirm("Proceed with these changes?").ask():
        console.print("[dim]Cancelled.[/]")
        return

    with psycopg.connect(config.database_url) as conn:
        apply_schema(conn)
        conn.commit()
    logger.info("schema_applied")
    console.print("[green]Schema applied.[/]")


def add_user(username: str):
    """Create an application user with a bcrypt-hashed password."""
    password = prompt_password()
    if password is None:
        console.print("[dim]Cancelled.[/]")
        return

    try:
        UserRepository().create(username, password)
    except UniqueViolation:
        console.print(f"[red]User {username} already exists.[/]")
        return
    console.print(f"[green]Created user [bold]{username}[/].[/]")


def reset_password(username: str):
    """Replace an existing user's password."""
    password = prompt_password()
    if password is None:
        console.print("[dim]Cancelled.[/]")
        return

    if not UserRepository().set_password(username, password):
        console.print(f"[red]No user named {username}.[/]")
        return
    console.print(f"[green]Password updated for [bold]{username}[/].[/]")


def print_hash():
    """Print a bcrypt hash, for the session backend's users file."""
    password = prompt_password()
    if password is None:
        console.print("[dim]Cancelled.[/]")
        return
    console.print(hash_password(password))


def show_lists(username: str):
    """Print a user's todo lists in display order."""
    store = PgPersistence({"username": username})
    todo_lists = store.sorted_todo_lists()
    if not todo_lists:
        console.print(f"[red]No todo lists found for {username}.[/]")
        return

    table = Table(title=f"Todo lists for {username}")
    table.add_column("ID", justify="right")
    table.add_column("Title")
    table.add_column("Done")
    table.add_column("Remaining", justify="right")
    for todo_list in todo_lists:
        remaining = sum(1 for todo in todo_list["todos"] if not todo["done"])
        done = "yes" if store.is_done_todo_list(todo_list) else "no"
        table.add_row(str(todo_list["id"]), todo_list["title"], done, str(remaining))
    console.print(table)


def main():
    parser = argparse.ArgumentParser(description="Todolist CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("init-db", help="Apply the database schema")
    add_user_parser = subparsers.add_parser("add-user", help="Create a user")
    add_user_parser.add_argument("username")
    reset_parser = subparsers.add_parser("reset-password", help="Change a user's password")
    reset_parser.add_argument("username")
    subparsers.add_parser("hash-password", help="Print a bcrypt hash for a password")
    lists_parser = subparsers.add_parser("show-lists", help="Show a user's todo lists")
    lists_parser.add_argument("username")

    args = parser.parse_args()
    configure_logging(level=config.log_level)

    if args.command == "init-db":
        init_db()
    elif args.command == "add-user":
        add_user(args.username)
    elif args.command == "reset-password":
        reset_password(args.username)
    elif args.command == "hash-password":
        print_hash()
    elif args.command == "show-lists":
        show_lists(args.username)


if __name__ == "__main__":
    main()
