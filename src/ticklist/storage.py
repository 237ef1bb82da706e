"""Task file persistence.

The task file is plain UTF-8 text, one task per line (see ticklist.codec).
Loading a missing file creates it and yields an empty list. Saving always
rewrites the whole file.
"""

from __future__ import annotations

from pathlib import Path

from rich.console import Console
from rich.markup import escape

from ticklist.codec import CorruptedRecordError, CorruptionReason, decode_task, encode_task
from ticklist.tasks import TaskList

_stderr = Console(stderr=True)


def load_tasks(
    path: Path,
    *,
    strict: bool = False,
    console: Console | None = None,
) -> TaskList:
    """Load the task list stored at ``path``.

    If the file does not exist it is created, along with any missing parent
    directories, and an empty list is returned. Failure to create it is
    reported on ``console`` but does not raise.

    Args:
        path: Task file location
        strict: Treat unrecognised kind letters as corruption
        console: Optional Rich console for diagnostics

    Returns:
        The tasks in file order

    Raises:
        CorruptedRecordError: If any line cannot be decoded. Nothing is
            returned for the lines that did decode.
    """
    if console is None:
        console = _stderr

    if not path.exists():
        _create_empty(path, console)
        return TaskList()

    data = path.read_bytes()
    try:
        content = data.decode("utf-8")
    except UnicodeDecodeError as e:
        line_number = data.count(b"\n", 0, e.start) + 1
        line = data.split(b"\n")[line_number - 1].rstrip(b"\r").decode("utf-8", errors="replace")
        raise CorruptedRecordError(
            CorruptionReason.ENCODING, f"not valid UTF-8 ({e.reason})", line, line_number
        ) from e

    lines = content.replace("\r\n", "\n").replace("\r", "\n").split("\n")
    # Trailing blank lines only
    while lines and not lines[-1].strip():
        lines.pop()

    tasks = TaskList()
    for line_number, line in enumerate(lines, start=1):
        try:
            tasks.add(decode_task(line, strict=strict))
        except CorruptedRecordError as e:
            e.line_number = line_number
            raise

    return tasks


def save_tasks(
    task_list: TaskList,
    path: Path,
    *,
    console: Console | None = None,
) -> bool:
    """Write the whole task list to ``path``, replacing its contents.

    Args:
        task_list: Tasks to store
        path: Task file location
        console: Optional Rich console for diagnostics

    Returns:
        True if the file was written, False on any I/O failure
    """
    if console is None:
        console = _stderr

    content = "".join(encode_task(task) for task in task_list)

    try:
        with open(path, "w", encoding="utf-8") as f:
            f.write(content)
    except OSError as e:
        console.print(f"[red]Unable to save tasks:[/red] {escape(str(path))}: {e.strerror or e}")
        return False

    return True


def _create_empty(path: Path, console: Console) -> None:
    """Create an empty task file, reporting rather than raising on failure."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.touch()
    except OSError as e:
        console.print(
            f"[yellow]Warning:[/yellow] unable to create {escape(str(path))}: {e.strerror or e}"
        )
