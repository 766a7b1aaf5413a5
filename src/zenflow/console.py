"""Interactive console for ZenFlow.

A line-based front-end over the task store and reminder engine. Tasks are
addressed by their 1-based position in the current list.

Commands:
    add <text> [@ <when>] [!alarm]   Add a task, optionally due, optionally ringing
    list                             Show all tasks
    upcoming                         Show the next scheduled tasks
    done <n>                         Toggle completion
    rate <n> <quality>               Rate a completed task (perfect/good/fair/needs work)
    due <n> <when>|none              Change or clear a due time
    delete <n>                       Delete a task
    dismiss                          Complete the ringing task and stop the alarm
    snooze                           Snooze the ringing task
    stats                            Completion statistics
    insights                         AI productivity insights
    help                             Show this help
    quit                             Exit
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable
from typing import TYPE_CHECKING, TextIO

from .insights.errors import InsightsError
from .tasks.models import QualityScore, Task
from .timeparse import format_due, parse_due_time

if TYPE_CHECKING:
    from .app import ZenFlowApp
    from .insights.client import InsightsService

logger = logging.getLogger(__name__)

HELP_TEXT = (__doc__ or "").split("Commands:", 1)[-1].rstrip()


class QuitRequested(Exception):
    """Raised by the quit command to leave the console loop."""


def format_task(index: int, task: Task) -> str:
    """Format one task line for the list view."""
    mark = "x" if task.completed else " "
    parts = [f"{index:>2}. [{mark}] {task.text}"]
    if task.due_date is not None:
        bell = "alarm" if task.alarm_enabled else "reminder"
        parts.append(f"({bell} {format_due(task.due_date)})")
    if task.completed:
        parts.append(f"<{task.quality.value}>")
    return " ".join(parts)


class Console:
    """Command interpreter bound to one running app."""

    def __init__(
        self,
        app: ZenFlowApp,
        insights: InsightsService | None = None,
        output: TextIO | None = None,
    ) -> None:
        """Initialize the console.

        Args:
            app: The running ZenFlow app.
            insights: Insights service, or None if insights are unavailable.
            output: Stream for alarm announcements (defaults to stdout).
        """
        self._app = app
        self._insights = insights
        self._output = output or sys.stdout
        self._commands: dict[str, Callable[[str], str]] = {
            "add": self._cmd_add,
            "list": self._cmd_list,
            "ls": self._cmd_list,
            "upcoming": self._cmd_upcoming,
            "done": self._cmd_done,
            "rate": self._cmd_rate,
            "due": self._cmd_due,
            "delete": self._cmd_delete,
            "rm": self._cmd_delete,
            "dismiss": self._cmd_dismiss,
            "snooze": self._cmd_snooze,
            "stats": self._cmd_stats,
            "insights": self._cmd_insights,
            "help": self._cmd_help,
            "quit": self._cmd_quit,
            "exit": self._cmd_quit,
        }
        app.controller.on_ring = self.announce_alarm

    def announce_alarm(self, task: Task) -> None:
        """Print the ringing alarm banner."""
        due = format_due(task.due_date) if task.due_date else "now"
        self._output.write(
            f"\n*** TIME ALERT: {task.text} (due {due}) ***\n"
            f"    Type 'dismiss' to complete it or 'snooze' for "
            f"{self._app.config.reminders.snooze_minutes} more minutes.\n"
        )
        self._output.flush()

    def handle(self, line: str) -> str:
        """Execute one command line and return the response text.

        Raises:
            QuitRequested: On the quit command.
        """
        line = line.strip()
        if not line:
            return ""

        name, _, args = line.partition(" ")
        command = self._commands.get(name.lower())
        if command is None:
            return f"Unknown command: {name}. Type 'help' for commands."
        return command(args.strip())

    def run(self, stream: TextIO | None = None) -> None:
        """Read commands until quit or end of input."""
        stream = stream or sys.stdin
        self._output.write("ZenFlow ready. Type 'help' for commands.\n")
        while True:
            self._output.write("> ")
            self._output.flush()
            line = stream.readline()
            if not line:
                break
            try:
                response = self.handle(line)
            except QuitRequested:
                break
            if response:
                self._output.write(response + "\n")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _resolve(self, arg: str) -> Task | None:
        """Find a task by its 1-based list position."""
        try:
            index = int(arg.split()[0])
        except (ValueError, IndexError):
            return None
        tasks = self._app.store.get_all()
        if 1 <= index <= len(tasks):
            return tasks[index - 1]
        return None

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def _cmd_add(self, args: str) -> str:
        alarm = False
        if args.endswith("!alarm"):
            alarm = True
            args = args[: -len("!alarm")].strip()

        text, _, when = args.partition("@")
        text = text.strip()
        if not text:
            return "Usage: add <text> [@ <when>] [!alarm]"

        due = None
        if when.strip():
            due = parse_due_time(when.strip())
            if due is None:
                return f"Couldn't understand the time '{when.strip()}'."

        task = self._app.store.add(text, due_date=due, alarm_enabled=alarm and due is not None)
        if due is None:
            return f"Added: {task.text}"
        kind = "Alarm" if task.alarm_enabled else "Reminder"
        return f"Added: {task.text}. {kind} at {format_due(due)}."

    def _cmd_list(self, _args: str) -> str:
        tasks = self._app.store.get_all()
        if not tasks:
            return "No tasks yet."
        return "\n".join(format_task(i, t) for i, t in enumerate(tasks, 1))

    def _cmd_upcoming(self, _args: str) -> str:
        upcoming = self._app.store.upcoming()
        if not upcoming:
            return "Nothing scheduled."
        return "\n".join(
            f"- {t.text} at {format_due(t.due_date)}" for t in upcoming if t.due_date
        )

    def _cmd_done(self, args: str) -> str:
        task = self._resolve(args)
        if task is None:
            return "Which task? Give its number from 'list'."
        updated = self._app.store.toggle(task.id)
        if updated is None:
            return "That task is gone."
        return f"{'Completed' if updated.completed else 'Reopened'}: {updated.text}"

    def _cmd_rate(self, args: str) -> str:
        task = self._resolve(args)
        _, _, raw_quality = args.partition(" ")
        if task is None or not raw_quality.strip():
            return "Usage: rate <n> <perfect|good|fair|needs work>"
        try:
            quality = QualityScore.parse(raw_quality)
        except ValueError:
            return f"Unknown rating '{raw_quality.strip()}'."
        updated = self._app.store.rate(task.id, quality)
        if updated is None:
            return "Only completed tasks can be rated."
        return f"Rated {updated.text}: {updated.quality.value}"

    def _cmd_due(self, args: str) -> str:
        task = self._resolve(args)
        _, _, when = args.partition(" ")
        if task is None or not when.strip():
            return "Usage: due <n> <when>|none"
        due = None
        if when.strip().lower() != "none":
            due = parse_due_time(when.strip())
            if due is None:
                return f"Couldn't understand the time '{when.strip()}'."
        updated = self._app.store.reschedule(task.id, due)
        if updated is None:
            return "That task is gone."
        if due is None:
            return f"Cleared due time: {updated.text}"
        return f"Rescheduled {updated.text} to {format_due(due)}"

    def _cmd_delete(self, args: str) -> str:
        task = self._resolve(args)
        if task is None or not self._app.store.delete(task.id):
            return "Which task? Give its number from 'list'."
        return f"Deleted: {task.text}"

    def _cmd_dismiss(self, _args: str) -> str:
        task = self._app.engine.dismiss_alarm()
        if task is None:
            return "No alarm is ringing."
        return f"Alarm dismissed. Completed: {task.text}"

    def _cmd_snooze(self, _args: str) -> str:
        task = self._app.engine.snooze_alarm()
        if task is None:
            return "No alarm is ringing."
        if task.due_date is None:
            return f"Alarm snoozed: {task.text}"
        return f"Snoozed {task.text} until {format_due(task.due_date)}"

    def _cmd_stats(self, _args: str) -> str:
        stats = self._app.store.stats()
        return (
            f"Success rate: {stats.perfect_percentage}% Perfect | "
            f"Active: {stats.active} | Archived: {stats.completed}"
        )

    def _cmd_insights(self, _args: str) -> str:
        if self._insights is None:
            return "Insights are not available. Set ANTHROPIC_API_KEY to enable them."
        try:
            report = self._insights.generate(self._app.load_notes(), self._app.store.get_all())
        except InsightsError as e:
            logger.error(f"Insights failed: {e}")
            return f"Couldn't generate insights: {e}"

        lines = [f"Score: {report.overall_score:.0f}/100", f"Verdict: {report.verdict}"]
        for insight in report.insights:
            lines.append(f"[{insight.category.value}] {insight.title}: {insight.description}")
        return "\n".join(lines)

    def _cmd_help(self, _args: str) -> str:
        return HELP_TEXT

    def _cmd_quit(self, _args: str) -> str:
        raise QuitRequested()


__all__ = [
    "Console",
    "QuitRequested",
    "format_task",
]
