"""Task entities and the ordered task list.

Three kinds of task are supported:
- PlainTask: a to-do with only a description
- DeadlineTask: something due by a date and time
- EventTask: something happening on a date, at a time or in a time window

Deadline and event tasks keep the exact date/time text they were created
with so the storage layer can write it back unchanged.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import date, datetime, time
from enum import Enum
from typing import ClassVar

DATE_FORMATS = ("%Y-%m-%d", "%d/%m/%Y")
TIME_FORMATS = ("%H:%M", "%H%M")

UNKNOWN_DESCRIPTION = "<unrecognised task>"


class InvalidTaskError(ValueError):
    """Raised when a task cannot be built from the given input."""


class TaskKind(Enum):
    """Kind of task. The value is the letter written to disk."""

    PLAIN = "T"
    DEADLINE = "D"
    EVENT = "E"
    UNKNOWN = "?"

    @classmethod
    def from_letter(cls, letter: str) -> TaskKind:
        """Map a kind letter to a kind, UNKNOWN if unrecognised."""
        for kind in cls:
            if kind is not cls.UNKNOWN and kind.value == letter:
                return kind
        return cls.UNKNOWN


def _parse_date(text: str) -> date:
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    raise InvalidTaskError(f"Unrecognised date: {text!r} (expected YYYY-MM-DD or DD/MM/YYYY)")


def _parse_time(text: str) -> time:
    for fmt in TIME_FORMATS:
        try:
            return datetime.strptime(text, fmt).time()
        except ValueError:
            continue
    raise InvalidTaskError(f"Unrecognised time: {text!r} (expected HH:MM or HHMM)")


def _split_schedule(schedule_text: str) -> tuple[str, str]:
    parts = schedule_text.split(" ")
    if len(parts) != 2 or not all(parts):
        raise InvalidTaskError(f"Schedule must be '<date> <time>', got {schedule_text!r}")
    return parts[0], parts[1]


def _check_description(description: str) -> None:
    # Must survive a single line of the task file split on "//"
    if not description or not description.strip():
        raise InvalidTaskError("Task description cannot be empty")
    if "\n" in description or "\r" in description:
        raise InvalidTaskError("Task description cannot contain line breaks")
    if "//" in description:
        raise InvalidTaskError("Task description cannot contain '//'")
    if description.endswith("/"):
        raise InvalidTaskError("Task description cannot end with '/'")


@dataclass
class Task:
    """Base task. Subclasses set ``kind``."""

    kind: ClassVar[TaskKind]

    description: str
    done: bool = False

    def mark_done(self) -> None:
        self.done = True

    def mark_undone(self) -> None:
        self.done = False

    @property
    def status_icon(self) -> str:
        return "✓" if self.done else " "

    @property
    def schedule(self) -> str | None:
        """Human-readable schedule, None for unscheduled tasks."""
        return None

    def __str__(self) -> str:
        text = f"[{self.kind.value}][{self.status_icon}] {self.description}"
        if self.schedule:
            text += f" ({self.schedule})"
        return text


@dataclass
class PlainTask(Task):
    """A to-do with no schedule."""

    kind: ClassVar[TaskKind] = TaskKind.PLAIN

    def __post_init__(self) -> None:
        _check_description(self.description)


@dataclass(init=False)
class ScheduledTask(Task):
    """A task bound to a date and time.

    ``date_input`` and ``time_input`` hold the text exactly as given.
    """

    date_input: str = ""
    time_input: str = ""
    date: date = field(init=False, repr=False, compare=False)
    start: time = field(init=False, repr=False, compare=False)

    def __init__(self, description: str, schedule_text: str, done: bool = False) -> None:
        _check_description(description)
        self.description = description
        self.done = done
        self.date_input, self.time_input = _split_schedule(schedule_text)
        self.date = _parse_date(self.date_input)
        self._parse_time_input(self.time_input)

    def _parse_time_input(self, text: str) -> None:
        self.start = _parse_time(text)

    @property
    def schedule_text(self) -> str:
        return f"{self.date_input} {self.time_input}"


@dataclass(init=False)
class DeadlineTask(ScheduledTask):
    """A task due by a date and time."""

    kind: ClassVar[TaskKind] = TaskKind.DEADLINE

    @property
    def schedule(self) -> str:
        return f"by {self.date:%d %b %Y} {self.start:%H:%M}"


@dataclass(init=False)
class EventTask(ScheduledTask):
    """A task happening on a date, at a time or within a time window."""

    kind: ClassVar[TaskKind] = TaskKind.EVENT

    end: time | None = field(default=None, init=False, repr=False, compare=False)

    def _parse_time_input(self, text: str) -> None:
        start_text, sep, end_text = text.partition("-")
        self.start = _parse_time(start_text)
        self.end = _parse_time(end_text) if sep else None
        if self.end is not None and self.end < self.start:
            raise InvalidTaskError(f"Event window ends before it starts: {text!r}")

    @property
    def schedule(self) -> str:
        window = f"{self.start:%H:%M}"
        if self.end is not None:
            window += f"-{self.end:%H:%M}"
        return f"at {self.date:%d %b %Y} {window}"


@dataclass(init=False)
class UnknownTask(Task):
    """Placeholder for a stored record whose kind letter is not recognised.

    The original line is kept so it can be written back untouched.
    """

    kind: ClassVar[TaskKind] = TaskKind.UNKNOWN

    raw_line: str = ""

    def __init__(self, raw_line: str) -> None:
        self.description = UNKNOWN_DESCRIPTION
        self.done = False
        self.raw_line = raw_line

    def mark_done(self) -> None:
        raise InvalidTaskError("An unrecognised task cannot be changed")

    def mark_undone(self) -> None:
        raise InvalidTaskError("An unrecognised task cannot be changed")


@dataclass
class TaskList:
    """Ordered collection of tasks. Order is insertion order."""

    tasks: list[Task] = field(default_factory=list)

    def add(self, task: Task) -> None:
        """Append a task to the end of the list."""
        self.tasks.append(task)

    def get(self, index: int) -> Task:
        """Get a task by its 1-based position."""
        return self.tasks[self._offset(index)]

    def remove(self, index: int) -> Task:
        """Remove and return the task at a 1-based position."""
        return self.tasks.pop(self._offset(index))

    def find(self, keyword: str) -> list[tuple[int, Task]]:
        """Return (position, task) pairs whose description contains keyword."""
        needle = keyword.lower()
        return [
            (i, task)
            for i, task in enumerate(self.tasks, start=1)
            if needle in task.description.lower()
        ]

    def pending(self) -> list[tuple[int, Task]]:
        """Return (position, task) pairs for tasks not yet done."""
        return [(i, task) for i, task in enumerate(self.tasks, start=1) if not task.done]

    def _offset(self, index: int) -> int:
        if not 1 <= index <= len(self.tasks):
            raise IndexError(f"No task number {index} (list has {len(self.tasks)} tasks)")
        return index - 1

    def __len__(self) -> int:
        return len(self.tasks)

    def __iter__(self) -> Iterator[Task]:
        return iter(self.tasks)
