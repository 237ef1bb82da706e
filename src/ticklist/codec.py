"""Line codec: one task <-> one line of the task file.

Line layout, fields separated by ``//``::

    T//<done>//<description>
    D//<done>//<description>//<date>//<time>
    E//<done>//<description>//<date>//<time>

The delimiter is not escaped. Task constructors reject descriptions that
would not survive a round trip (line breaks, ``//``, a trailing ``/``).
"""

from __future__ import annotations

from enum import Enum

from ticklist.tasks import (
    DeadlineTask,
    EventTask,
    InvalidTaskError,
    PlainTask,
    ScheduledTask,
    Task,
    TaskKind,
    UnknownTask,
)

DELIMITER = "//"
DONE_MARK = "✓"
NOT_DONE_MARK = "✘"


class CorruptionReason(Enum):
    """Why a stored line could not be decoded."""

    MISSING_FIELDS = "missing fields"
    INVALID_TASK = "invalid task"
    UNKNOWN_KIND = "unknown kind"
    ENCODING = "invalid encoding"


class CorruptedRecordError(ValueError):
    """A stored line cannot be decoded into a task."""

    def __init__(
        self,
        reason: CorruptionReason,
        detail: str,
        line: str,
        line_number: int | None = None,
    ) -> None:
        self.reason = reason
        self.detail = detail
        self.line = line
        self.line_number = line_number
        super().__init__(str(self))

    def __str__(self) -> str:
        where = f"line {self.line_number}" if self.line_number is not None else "record"
        return f"Corrupted {where} ({self.reason.value}): {self.detail} [{self.line!r}]"


def encode_task(task: Task) -> str:
    """Serialise a task to a single newline-terminated line."""
    if isinstance(task, UnknownTask):
        return task.raw_line + "\n"

    fields = [
        task.kind.value,
        DONE_MARK if task.done else NOT_DONE_MARK,
        task.description,
    ]
    if isinstance(task, ScheduledTask):
        fields.extend([task.date_input, task.time_input])

    return DELIMITER.join(fields) + "\n"


def decode_task(line: str, *, strict: bool = False) -> Task:
    """Parse one stored line back into a task.

    Unrecognised kind letters give an UnknownTask, or raise
    CorruptedRecordError when ``strict`` is set.

    Raises:
        CorruptedRecordError: If the line is truncated or the task it
            describes is invalid.
    """
    line = line.rstrip("\r\n")
    fields = line.split(DELIMITER)

    if not fields[0]:
        raise CorruptedRecordError(CorruptionReason.MISSING_FIELDS, "no kind letter", line)

    kind = TaskKind.from_letter(fields[0][0])
    if kind is TaskKind.UNKNOWN:
        if strict:
            raise CorruptedRecordError(
                CorruptionReason.UNKNOWN_KIND,
                f"unrecognised kind letter {fields[0][0]!r}",
                line,
            )
        return UnknownTask(line)

    required = 5 if kind in (TaskKind.DEADLINE, TaskKind.EVENT) else 3
    if len(fields) < required:
        raise CorruptedRecordError(
            CorruptionReason.MISSING_FIELDS,
            f"expected {required} fields for kind {kind.value}, found {len(fields)}",
            line,
        )

    done = fields[1] == DONE_MARK
    description = fields[2]

    try:
        if kind is TaskKind.PLAIN:
            return PlainTask(description, done)
        schedule_text = f"{fields[3]} {fields[4]}"
        if kind is TaskKind.DEADLINE:
            return DeadlineTask(description, schedule_text, done)
        return EventTask(description, schedule_text, done)
    except InvalidTaskError as e:
        raise CorruptedRecordError(CorruptionReason.INVALID_TASK, str(e), line) from e
