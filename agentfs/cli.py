"""
Interactive workspace shell (agentfs-shell).
"""

import argparse
import json
import logging
import os
from typing import Any, Optional

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text

from agentfs.commands import CommandDispatcher, CommandResult
from agentfs.config.settings import settings
from agentfs.container import container
from agentfs.utils.diff import DiffLine, render_diff


def _diff_lines(data: dict[str, Any]) -> list[DiffLine]:
    return [DiffLine(d["kind"], d["index"], d["text"]) for d in data.get("diff", [])]


def _render_entries(console: Console, title: str, entries: list[dict[str, Any]]) -> None:
    tbl = Table(title=title, box=box.MINIMAL_DOUBLE_HEAD)
    tbl.add_column("Path", style="cyan", no_wrap=True)
    tbl.add_column("Type")
    for e in entries:
        tbl.add_row(e["path"], "dir" if e["is_directory"] else "file")
    console.print(tbl)


def _render_history(console: Console, data: dict[str, Any]) -> None:
    for stack in ("undo", "redo"):
        tbl = Table(title=f"{stack} stack (most recent first)", box=box.MINIMAL_DOUBLE_HEAD)
        tbl.add_column("Operation", style="cyan")
        tbl.add_column("Path")
        tbl.add_column("Time", style="dim")
        for e in data.get(stack, []):
            tbl.add_row(e["operation_type"], e["path"], e["timestamp"])
        console.print(tbl)
    ops = data.get("operations", [])
    if ops:
        console.print(f"[dim]{len(ops)} logged operation(s); last: {ops[-1]['type']} {ops[-1]['path']}[/dim]")


def _render_plan(console: Console, data: dict[str, Any], plain: bool) -> None:
    if plain:
        console.print(data.get("content") or "\n".join(data.get("steps", [])))
        return
    steps = "\n".join(f"{i + 1}. {s}" for i, s in enumerate(data.get("steps", [])))
    console.print(
        Panel(
            steps or "(no steps)",
            title=f"plan {data.get('id')}: {data.get('task', '')}",
            border_style="magenta",
            box=box.ROUNDED,
        )
    )


def render_result(console: Console, result: CommandResult, plain: bool = False) -> None:
    """Print one command result."""
    style = "green" if result.success else "red"
    data = result.data

    if result.command == "read" and result.success:
        content = data.get("content", "")
        if plain:
            console.print(content, markup=False, highlight=False)
        else:
            lexer = Syntax.guess_lexer(data.get("path", ""), code=content)
            console.print(
                Panel(
                    Syntax(content, lexer, line_numbers=True),
                    title=data.get("path", ""),
                    border_style="cyan",
                    box=box.ROUNDED,
                )
            )
        return
    if result.command in ("files", "search") and result.success:
        _render_entries(console, result.message, data.get("entries", []))
        return
    if result.command == "history":
        _render_history(console, data)
        console.print(Text(result.message, style=style))
        return
    if result.command == "plan" and result.success:
        _render_plan(console, data, plain)
    elif result.command == "plans" and result.success:
        for plan in data.get("plans", []):
            console.print(f"[cyan]{plan['id']}[/cyan] {plan['task']} ({len(plan['steps'])} step(s))")
    elif result.command in ("config", "stat") and result.success:
        payload = data.get("stats", data) if result.command == "stat" else data
        console.print_json(data=payload)
    elif result.command == "help":
        console.print(result.message, markup=False, highlight=False)
        return

    diff = _diff_lines(data)
    if diff:
        console.print(render_diff(diff, title=f"diff {data.get('path', '')}"))
    console.print(Text(result.message, style=style))


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="agentfs-shell",
        description="Interactive sandboxed workspace shell with undo/redo and plans.",
    )
    parser.add_argument(
        "--workspace",
        default=None,
        help="Workspace root (default: AGENTFS_WORKSPACE_ROOT or current directory)",
    )
    parser.add_argument(
        "--allow-outside",
        action="store_true",
        help="Allow paths outside the workspace root",
    )
    parser.add_argument(
        "--safe",
        action="store_true",
        help="Ask for confirmation before deletes and plan execution",
    )
    parser.add_argument(
        "--plain",
        action="store_true",
        help="Render output as plain text (no panels)",
    )
    parser.add_argument(
        "-c",
        "--command",
        default=None,
        help="Run a single command, print the result as JSON and exit",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    engine = container.get_mutation_engine()
    if args.workspace or args.allow_outside:
        engine.configure(
            workspace_root=os.path.abspath(os.path.expanduser(args.workspace))
            if args.workspace
            else None,
            allow_outside_workspace=True if args.allow_outside else None,
        )

    console = Console(highlight=True, soft_wrap=True)

    def _confirm(question: str) -> bool:
        return Confirm.ask(question, console=console, default=False)

    dispatcher = CommandDispatcher(
        engine,
        container.get_plan_runner,
        confirm=_confirm if args.safe else None,
        logger=logging.getLogger("agentfs.commands"),
    )

    if args.command is not None:
        result = dispatcher.dispatch(args.command)
        print(
            json.dumps(
                {"success": result.success, "message": result.message, "data": result.data},
                ensure_ascii=False,
                indent=2,
            )
        )
        return 0 if result.success else 1

    console.print(
        Panel(
            f"Workspace: {engine.workspace_root}\n"
            "Type /help for commands. Plain text creates a plan.",
            title="agentfs",
            border_style="cyan",
            box=box.ROUNDED,
        )
    )

    while True:
        try:
            console.print("[cyan]agentfs> [/cyan]", end="")
            line = input().strip()
        except EOFError:
            print()
            break
        except KeyboardInterrupt:
            print()
            break

        if not line:
            continue
        result = dispatcher.dispatch(line)
        render_result(console, result, plain=args.plain)
        if result.exit:
            break
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
