#!/usr/bin/env python3
"""
gtasks CLI

Command-line access to Google Tasks through TasksClient.

Usage:
    gtasks selftest                         # Verify OAuth config with a live call
    gtasks lists                            # List task lists
    gtasks tasks <tasklist_id>              # List tasks in a list
    gtasks add <tasklist_id> "title"        # Create a task
    gtasks complete <tasklist_id> <task_id> # Mark a task completed
    gtasks delete <tasklist_id> <task_id>   # Delete a task

Configuration comes from config/gtasks.yaml (or --config) and GOOGLE_TASKS_*
environment variables, see gtasks.utils.config.
"""
import argparse
import asyncio
import json
import sys
from typing import List, Optional

from rich.console import Console
from rich.table import Table

from .integrations.base_exceptions import SelfTestFailedException
from .integrations.google_tasks.client import TasksClient
from .integrations.google_tasks.results import Result
from .utils.config import load_config
from .utils.logger import reset_logging

console = Console()


def _print_failure(result: Result) -> int:
    status = f" (HTTP {result.status})" if result.status else ""
    console.print(f"[red]Error{status}: {result.error}[/]")
    return 1


def _emit_json(result: Result) -> int:
    console.print_json(json.dumps(result.to_dict(), default=str))
    return 0 if result.ok else 1


async def cmd_selftest(client: TasksClient, args) -> int:
    """Run the live self-test."""
    try:
        outcome = await client.self_test()
    except SelfTestFailedException as e:
        console.print(f"[red]Self-test failed:[/] {e.details.get('error', e.message)}")
        return 1
    style = "green" if outcome == "ok" else "yellow"
    console.print(f"[{style}]{outcome}[/]")
    return 0


async def cmd_lists(client: TasksClient, args) -> int:
    """List task lists."""
    result = await client.list_tasklists(max_results=args.max_results, debug=args.debug)
    if args.json:
        return _emit_json(result)
    if not result.ok:
        return _print_failure(result)

    items = (result.data or {}).get("items", [])
    if not items:
        console.print("[dim]No task lists found.[/]")
        return 0

    table = Table(show_header=True, header_style="bold green")
    table.add_column("ID", style="dim")
    table.add_column("Title")
    table.add_column("Updated")
    for item in items:
        table.add_row(item.get("id", ""), item.get("title", ""), item.get("updated", ""))
    console.print(table)
    return 0


async def cmd_tasks(client: TasksClient, args) -> int:
    """List tasks in a task list."""
    result = await client.list_tasks(
        args.tasklist_id,
        max_results=args.max_results,
        show_completed=args.show_completed,
        debug=args.debug,
    )
    if args.json:
        return _emit_json(result)
    if not result.ok:
        return _print_failure(result)

    items = (result.data or {}).get("items", [])
    if not items:
        console.print("[dim]No tasks found.[/]")
        return 0

    table = Table(show_header=True, header_style="bold green")
    table.add_column("ID", style="dim")
    table.add_column("Title")
    table.add_column("Due")
    table.add_column("Status")
    for item in items:
        status_color = "green" if item.get("status") == "completed" else "yellow"
        table.add_row(
            item.get("id", ""),
            item.get("title", ""),
            item.get("due", ""),
            f"[{status_color}]{item.get('status', '')}[/]",
        )
    console.print(table)
    return 0


async def cmd_add(client: TasksClient, args) -> int:
    """Create a task."""
    result = await client.create_task(
        args.tasklist_id, title=args.title, notes=args.notes, due=args.due, debug=args.debug
    )
    if args.json:
        return _emit_json(result)
    if not result.ok:
        return _print_failure(result)
    console.print(f"[green]Created[/] {result.data.get('id', '')}: {result.data.get('title', args.title)}")
    return 0


async def cmd_complete(client: TasksClient, args) -> int:
    """Mark a task completed."""
    result = await client.complete_task(args.tasklist_id, args.task_id, debug=args.debug)
    if args.json:
        return _emit_json(result)
    if not result.ok:
        return _print_failure(result)
    console.print(f"[green]Completed[/] {args.task_id}")
    return 0


async def cmd_delete(client: TasksClient, args) -> int:
    """Delete a task."""
    result = await client.delete_task(args.tasklist_id, args.task_id, debug=args.debug)
    if args.json:
        return _emit_json(result)
    if not result.ok:
        return _print_failure(result)
    console.print(f"[green]Deleted[/] {args.task_id}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="gtasks", description="Google Tasks from the terminal")
    parser.add_argument("--config", help="Path to YAML config (default: config/gtasks.yaml)")
    parser.add_argument("--user-id", help="User id for task-list paths (default: me)")
    parser.add_argument("--debug", action="store_true", help="Log requests and responses")
    parser.add_argument("--json", action="store_true", help="Print the raw result as JSON")

    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("selftest", help="Verify credentials with a live call")
    p.set_defaults(func=cmd_selftest)

    p = sub.add_parser("lists", help="List task lists")
    p.add_argument("--max-results", type=int)
    p.set_defaults(func=cmd_lists)

    p = sub.add_parser("tasks", help="List tasks in a task list")
    p.add_argument("tasklist_id")
    p.add_argument("--max-results", type=int)
    p.add_argument("--show-completed", action="store_true", default=None)
    p.set_defaults(func=cmd_tasks)

    p = sub.add_parser("add", help="Create a task")
    p.add_argument("tasklist_id")
    p.add_argument("title")
    p.add_argument("--notes")
    p.add_argument("--due", help="RFC 3339 timestamp, e.g. 2026-01-31T00:00:00.000Z")
    p.set_defaults(func=cmd_add)

    p = sub.add_parser("complete", help="Mark a task completed")
    p.add_argument("tasklist_id")
    p.add_argument("task_id")
    p.set_defaults(func=cmd_complete)

    p = sub.add_parser("delete", help="Delete a task")
    p.add_argument("tasklist_id")
    p.add_argument("task_id")
    p.set_defaults(func=cmd_delete)

    return parser


async def run(args, client: Optional[TasksClient] = None) -> int:
    """Execute the parsed command; builds a client from config unless one is given."""
    if client is None:
        settings = load_config(args.config)
        reset_logging(level="DEBUG" if args.debug else settings.log_level)
        client = TasksClient.from_settings(settings)
    if args.user_id:
        client.configure({"user_id": args.user_id})

    async with client:
        return await args.func(client, args)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        return asyncio.run(run(args))
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Configuration error: {e}[/]")
        return 2


if __name__ == "__main__":
    sys.exit(main())
