# src/tickoff/cli/commands.py

from __future__ import annotations

import logging
import shlex
from collections.abc import Callable

from ..checklists.checklist_models import ChecklistView
from ..core.state import AppState

CommandHandler = Callable[[AppState, list[str]], str]

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /list, /check, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(self, state: AppState, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.

        Arguments follow shell quoting, so names with spaces can be quoted.
        """
        if not line.startswith("/"):
            return None

        try:
            parts = shlex.split(line[1:])
        except ValueError as e:
            return f"Cannot parse command: {e}."
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."
        return handler(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def render_checklist(view: ChecklistView) -> str:
    done = sum(1 for _, flag in view.tasks if flag)
    header = f"{view.name}  [{done}/{len(view.tasks)}]"
    if view.remaining_text is not None:
        header += f"  resets in {view.remaining_text}"
    elif view.schedule is not None:
        header += "  (reset time pending)"
    lines = [header]
    for i, (label, flag) in enumerate(view.tasks, start=1):
        lines.append(f"  {i}. [{'x' if flag else ' '}] {label}")
    if not view.tasks:
        lines.append("  (no tasks)")
    return "\n".join(lines)


def render_board(state: AppState) -> str:
    views = state.views()
    if not views:
        return "No checklists configured."
    return "\n\n".join(render_checklist(v) for v in views)


def _resolve_task(view: ChecklistView, ref: str) -> str | None:
    """Accept either the exact label or its 1-based number as shown by /list."""
    labels = [label for label, _ in view.tasks]
    if ref in labels:
        return ref
    if ref.isdigit():
        idx = int(ref) - 1
        if 0 <= idx < len(labels):
            return labels[idx]
    return None


def _set_flag(state: AppState, args: list[str], mode: str) -> str:
    if len(args) < 2:
        return f"Usage: /{mode} <checklist> <task>"
    name, ref = args[0], " ".join(args[1:])
    try:
        view = state.view(name)
    except KeyError:
        return f"No checklist named {name!r}."
    label = _resolve_task(view, ref)
    if label is None:
        return f"No task {ref!r} in {name!r}."

    try:
        if mode == "toggle":
            value = state.toggle_task(name, label)
        else:
            value = mode == "check"
            state.set_task(name, label, value)
    except KeyError:
        # Removed between view() and the write; only possible if the collection changed.
        return f"No task {ref!r} in {name!r}."

    logger.debug("Task %r in %r set to %s", label, name, value)
    return f"{name}: [{'x' if value else ' '}] {label}"


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_list(state: AppState, args: list[str]) -> str:
    return render_board(state)


def cmd_show(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /show <checklist>"
    name = " ".join(args)
    try:
        return render_checklist(state.view(name))
    except KeyError:
        return f"No checklist named {name!r}."


def cmd_check(state: AppState, args: list[str]) -> str:
    return _set_flag(state, args, "check")


def cmd_uncheck(state: AppState, args: list[str]) -> str:
    return _set_flag(state, args, "uncheck")


def cmd_toggle(state: AppState, args: list[str]) -> str:
    return _set_flag(state, args, "toggle")


def cmd_status(state: AppState, args: list[str]) -> str:
    settings = state.settings
    tick = getattr(settings, "tick_interval_seconds", "?")
    return (
        "Status:\n"
        f"  Checklists: {len(state.names())}\n"
        f"  Config: {getattr(settings, 'config_path', '?')}\n"
        f"  Records: {getattr(settings, 'records_dir', '?')}\n"
        f"  Time zone: {getattr(settings, 'timezone', 'UTC')}\n"
        f"  Engine tick: {tick}s"
    )


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="Show every checklist.", aliases=["ls"])
registry.register("show", cmd_show, help_text="Show one checklist: /show <checklist>.")
registry.register("check", cmd_check, help_text="Mark a task done: /check <checklist> <task|number>.")
registry.register("uncheck", cmd_uncheck, help_text="Mark a task not done: /uncheck <checklist> <task|number>.")
registry.register("toggle", cmd_toggle, help_text="Flip a task: /toggle <checklist> <task|number>.", aliases=["t"])
registry.register("status", cmd_status, help_text="Show paths, time zone and tick interval.")
