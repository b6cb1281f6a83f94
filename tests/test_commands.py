# tests/test_commands.py

from __future__ import annotations

from datetime import UTC, datetime

from tickoff.checklists.checklist_models import Checklist, ChecklistView
from tickoff.cli.commands import CommandRegistry, registry, render_checklist


def test_command_registry_routes_and_aliases(state) -> None:
    reg = CommandRegistry()
    called = {"a": 0}

    def handler(state, args):
        called["a"] += 1
        return "a:" + ",".join(args)

    reg.register("alpha", handler, "a", aliases=["al"])

    assert reg.handle(state, "/alpha x y") == "a:x,y"
    assert reg.handle(state, '/AL "x y"') == "a:x y"
    assert called["a"] == 2


def test_command_registry_unknown_and_non_command(state) -> None:
    reg = CommandRegistry()
    assert reg.handle(state, "hello") is None
    assert "Unknown command" in (reg.handle(state, "/nope") or "")
    assert "Empty command" in (reg.handle(state, "/") or "")
    assert "Cannot parse" in (reg.handle(state, '/alpha "open') or "")


def test_check_and_uncheck_by_label(state) -> None:
    assert registry.handle(state, "/check daily dishes") == "daily: [x] dishes"
    assert state.checklists[0].tasks["dishes"] is True

    assert registry.handle(state, "/uncheck daily laundry") == "daily: [ ] laundry"
    assert state.checklists[0].tasks["laundry"] is False


def test_toggle_by_number_and_multiword_label(state) -> None:
    # Tasks are numbered in label order: 1. dishes, 2. laundry
    assert registry.handle(state, "/toggle daily 2") == "daily: [ ] laundry"
    assert registry.handle(state, "/t oneoff buy milk") == "oneoff: [x] buy milk"
    assert state.checklists[1].tasks["buy milk"] is True


def test_unknown_checklist_and_task(state) -> None:
    assert registry.handle(state, "/check weekly dishes") == "No checklist named 'weekly'."
    assert registry.handle(state, "/check daily ironing") == "No task 'ironing' in 'daily'."
    assert registry.handle(state, "/check daily 9") == "No task '9' in 'daily'."
    assert (registry.handle(state, "/check daily") or "").startswith("Usage:")


def test_quoted_checklist_names(state) -> None:
    state.checklists.append(Checklist.fresh("house chores", ["sweep floor"]))
    assert registry.handle(state, '/check "house chores" sweep floor') == "house chores: [x] sweep floor"
    assert "house chores" in (registry.handle(state, '/show "house chores"') or "")


def test_list_shows_every_checklist(state) -> None:
    out = registry.handle(state, "/list") or ""
    assert "daily  [1/2]" in out
    assert "oneoff  [0/1]" in out
    assert "1. [ ] dishes" in out
    assert "2. [x] laundry" in out


def test_render_checklist_with_countdown(daily) -> None:
    view = ChecklistView.of(daily, datetime(2024, 1, 1, 21, 0, 5, tzinfo=UTC))
    assert render_checklist(view).splitlines()[0] == "daily  [1/2]  resets in 2:59:55"


def test_render_checklist_pending_and_empty() -> None:
    pending = Checklist.fresh("weekly", [], "@weekly")
    text = render_checklist(ChecklistView.of(pending, datetime(2024, 1, 1, tzinfo=UTC)))
    assert "(reset time pending)" in text
    assert "(no tasks)" in text


def test_help_and_status(state) -> None:
    help_text = registry.handle(state, "/help") or ""
    for name in ("list", "show", "check", "uncheck", "toggle", "status"):
        assert f"/{name}" in help_text
    status = registry.handle(state, "/status") or ""
    assert "Checklists: 2" in status
    assert "Engine tick: 0.01s" in status
