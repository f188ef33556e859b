"""
Slash-command layer over the mutation engine and the plan runner.

Every command returns a CommandResult; nothing raises to the host loop.
``/quit`` and ``/exit`` return a result with ``exit=True``.
"""

import logging
import shlex
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from agentfs.entities.result import MutationResult
from agentfs.exceptions import BaseAppError, PlanNotFoundError
from agentfs.use_cases.files.mutation_engine import MutationEngine
from agentfs.use_cases.planning.plan_runner import PlanRunner

HELP_TEXT = """Commands:
  /create <path> [--force] <content>      Create a file (--force overwrites)
  /read <path>                            Show file contents
  /edit <path> replace <content>          Replace the whole file
  /edit <path> find-replace <find> <rep>  Replace every literal occurrence
  /edit <path> insert <line> <content>    Insert a line at index
  /edit <path> append <content>           Append a trailing line
  /delete <path>                          Delete a file
  /files [path] [--all]                   List a directory (--all shows ignored)
  /search <pattern> [dir]                 Find files by name glob
  /mkdir <path>                           Create a directory
  /stat <path>                            Show file information
  /undo | /redo                           Undo/redo the last file change
  /history                                Show undo/redo stacks and operation log
  /plan <task>                            Create a plan (plain text does the same)
  /plans                                  List plans
  /execute [plan-id]                      Run a plan (latest by default)
  /config                                 Show workspace configuration
  /config workspace <path>                Change the workspace root
  /config outside on|off                  Allow paths outside the workspace
  /config undo <n>                        Set the undo history bound
  /config showdiff on|off                 Toggle diff previews
  /help                                   Show this help
  /quit | /exit                           Leave"""


@dataclass
class CommandResult:
    success: bool
    command: str
    message: str = ""
    data: dict[str, Any] = field(default_factory=dict)
    exit: bool = False

    @classmethod
    def from_mutation(cls, command: str, result: MutationResult) -> "CommandResult":
        if result.success:
            message = f"{result.operation}: {result.path}" if result.path else result.operation
        else:
            message = result.error or "Operation failed"
        return cls(result.success, command, message, data=result.to_dict())


def _split(line: str) -> list[str]:
    try:
        return shlex.split(line)
    except ValueError:
        # Unbalanced quotes: fall back to whitespace splitting
        return line.split()


def _on_off(value: str) -> Optional[bool]:
    v = value.strip().lower()
    if v in ("on", "true", "1", "yes"):
        return True
    if v in ("off", "false", "0", "no"):
        return False
    return None


class CommandDispatcher:
    """Maps slash commands 1:1 onto engine and runner operations."""

    def __init__(
        self,
        engine: MutationEngine,
        plan_runner: Callable[[], PlanRunner],
        confirm: Optional[Callable[[str], bool]] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize the dispatcher.

        Args:
            engine: Mutation engine for file commands
            plan_runner: Provider of the plan runner, called on first plan command
            confirm: Asked before deletes and plan execution; None approves all
            logger: Logger instance to use for logging
        """
        self._engine = engine
        self._plan_runner = plan_runner
        self._confirm = confirm
        self._logger = logger or logging.getLogger(__name__)
        self._handlers: dict[str, Callable[[list[str]], CommandResult]] = {
            "create": self._create,
            "read": self._read,
            "edit": self._edit,
            "delete": self._delete,
            "files": self._files,
            "search": self._search,
            "mkdir": self._mkdir,
            "stat": self._stat,
            "undo": lambda args: CommandResult.from_mutation("undo", self._engine.undo()),
            "redo": lambda args: CommandResult.from_mutation("redo", self._engine.redo()),
            "history": self._history,
            "plan": self._plan,
            "plans": self._plans,
            "execute": self._execute,
            "config": self._config,
            "help": lambda args: CommandResult(True, "help", HELP_TEXT),
        }

    def dispatch(self, line: str) -> CommandResult:
        """Run one input line. Plain text (no leading '/') creates a plan."""
        text = (line or "").strip()
        if not text:
            return CommandResult(False, "", "Empty input")
        if not text.startswith("/"):
            return self._guard("plan", [text])

        parts = text[1:].split(maxsplit=1)
        cmd = parts[0].lower() if parts else ""
        rest = parts[1] if len(parts) > 1 else ""
        if cmd in ("quit", "exit"):
            return CommandResult(True, cmd, "Goodbye", exit=True)
        if cmd not in self._handlers:
            return CommandResult(False, cmd, f"Unknown command: /{cmd}")
        args = [rest] if cmd == "plan" else _split(rest)
        return self._guard(cmd, args)

    def _guard(self, cmd: str, args: list[str]) -> CommandResult:
        try:
            return self._handlers[cmd](args)
        except BaseAppError as e:
            self._logger.error(f"/{cmd} failed: {e}")
            return CommandResult(False, cmd, str(e))
        except Exception as e:
            self._logger.error(f"Unexpected error in /{cmd}: {e}")
            return CommandResult(False, cmd, f"Unexpected error: {e}")

    def _approved(self, question: str) -> bool:
        return self._confirm is None or self._confirm(question)

    # ------------------------- file commands -------------------------
    def _create(self, args: list[str]) -> CommandResult:
        force = "--force" in args
        args = [a for a in args if a != "--force"]
        if len(args) < 2:
            return CommandResult(False, "create", "Usage: /create <path> [--force] <content>")
        result = self._engine.create(args[0], " ".join(args[1:]), overwrite=force)
        return CommandResult.from_mutation("create", result)

    def _read(self, args: list[str]) -> CommandResult:
        if not args:
            return CommandResult(False, "read", "Usage: /read <path>")
        return CommandResult.from_mutation("read", self._engine.read(args[0]))

    def _edit(self, args: list[str]) -> CommandResult:
        usage = CommandResult(
            False, "edit", "Usage: /edit <path> replace|find-replace|insert|append <args>"
        )
        if len(args) < 3:
            return usage
        path, mode = args[0], args[1].lower()
        if mode == "replace":
            result = self._engine.edit(path, "replace", new_content=" ".join(args[2:]))
        elif mode == "find-replace" and len(args) >= 4:
            result = self._engine.edit(
                path, "find-replace", search_text=args[2], replace_text=" ".join(args[3:])
            )
        elif mode == "insert" and len(args) >= 4:
            try:
                line_index: Optional[int] = int(args[2])
            except ValueError:
                line_index = None
            result = self._engine.edit(
                path, "insert", new_content=" ".join(args[3:]), line_index=line_index
            )
        elif mode == "append":
            result = self._engine.edit(path, "append", new_content=" ".join(args[2:]))
        else:
            return usage
        return CommandResult.from_mutation("edit", result)

    def _delete(self, args: list[str]) -> CommandResult:
        if not args:
            return CommandResult(False, "delete", "Usage: /delete <path>")
        if not self._approved(f"Delete {args[0]}?"):
            return CommandResult(True, "delete", "Delete cancelled.")
        return CommandResult.from_mutation("delete", self._engine.delete(args[0]))

    def _files(self, args: list[str]) -> CommandResult:
        include_ignored = "--all" in args
        rest = [a for a in args if a != "--all"]
        path = rest[0] if rest else "."
        result = self._engine.list_files(
            path, include_directories=True, include_ignored=include_ignored
        )
        return CommandResult.from_mutation("files", result)

    def _search(self, args: list[str]) -> CommandResult:
        if not args:
            return CommandResult(False, "search", "Usage: /search <pattern> [dir]")
        directory = args[1] if len(args) > 1 else "."
        return CommandResult.from_mutation("search", self._engine.search(args[0], directory))

    def _mkdir(self, args: list[str]) -> CommandResult:
        if not args:
            return CommandResult(False, "mkdir", "Usage: /mkdir <path>")
        return CommandResult.from_mutation("mkdir", self._engine.mkdir(args[0]))

    def _stat(self, args: list[str]) -> CommandResult:
        if not args:
            return CommandResult(False, "stat", "Usage: /stat <path>")
        return CommandResult.from_mutation("stat", self._engine.stat(args[0]))

    def _history(self, args: list[str]) -> CommandResult:
        stacks = self._engine.history()
        data = {
            "undo": [e.to_dict() for e in stacks["undo"]],
            "redo": [e.to_dict() for e in stacks["redo"]],
            "operations": [r.to_dict() for r in self._engine.operations()],
        }
        message = f"{len(data['undo'])} undoable, {len(data['redo'])} redoable change(s)"
        return CommandResult(True, "history", message, data=data)

    # ------------------------- plan commands -------------------------
    def _plan(self, args: list[str]) -> CommandResult:
        task = " ".join(args).strip()
        if not task:
            return CommandResult(False, "plan", "Please provide a task description")
        plan = self._plan_runner().create_plan(task)
        return CommandResult(
            True,
            "plan",
            f"Plan {plan.id} created with {len(plan.steps)} step(s). Use /execute to run it.",
            data=plan.to_dict(),
        )

    def _plans(self, args: list[str]) -> CommandResult:
        plans = self._plan_runner().plans()
        return CommandResult(
            True,
            "plans",
            f"{len(plans)} plan(s)",
            data={"plans": [p.to_dict() for p in plans]},
        )

    def _execute(self, args: list[str]) -> CommandResult:
        plan_id: Optional[int] = None
        if args:
            try:
                plan_id = int(args[0])
            except ValueError:
                return CommandResult(False, "execute", f"Invalid plan id: {args[0]}")
        runner = self._plan_runner()
        label = str(plan_id) if plan_id is not None else "the latest plan"
        if not self._approved(f"Execute {label}?"):
            return CommandResult(True, "execute", "Execution cancelled.")
        try:
            outcome = runner.run_plan(plan_id)
        except PlanNotFoundError as e:
            return CommandResult(False, "execute", f"{e}. Create one with /plan")
        if outcome.success:
            message = f"Plan completed: {outcome.completed_steps}/{outcome.total_steps} step(s)"
        else:
            message = (
                f"Plan failed after {outcome.completed_steps}/{outcome.total_steps} "
                f"completed step(s): {outcome.error}"
            )
        return CommandResult(outcome.success, "execute", message, data=outcome.to_dict())

    # ------------------------- configuration -------------------------
    def _config_snapshot(self) -> dict[str, Any]:
        return {
            "workspace_root": self._engine.workspace_root,
            "allow_outside_workspace": self._engine.sandbox.allow_outside,
            "max_undo_history": self._engine.max_undo_history,
            "show_diff_preview": self._engine.show_diff_preview,
        }

    def _config(self, args: list[str]) -> CommandResult:
        usage = "Usage: /config [workspace <path>|outside on|off|undo <n>|showdiff on|off]"
        if not args:
            return CommandResult(True, "config", "Configuration", data=self._config_snapshot())
        if len(args) < 2:
            return CommandResult(False, "config", usage)
        key, value = args[0].lower(), args[1]
        if key == "workspace":
            result = self._engine.configure(workspace_root=value)
        elif key in ("outside", "showdiff"):
            flag = _on_off(value)
            if flag is None:
                return CommandResult(False, "config", usage)
            if key == "outside":
                result = self._engine.configure(allow_outside_workspace=flag)
            else:
                result = self._engine.configure(show_diff_preview=flag)
        elif key == "undo":
            try:
                bound = int(value)
            except ValueError:
                return CommandResult(False, "config", usage)
            result = self._engine.configure(max_undo_history=bound)
        else:
            return CommandResult(False, "config", usage)
        if not result.success:
            return CommandResult.from_mutation("config", result)
        return CommandResult(True, "config", "Configuration updated", data=self._config_snapshot())
