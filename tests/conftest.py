"""Shared fixtures for ticklist tests."""

from __future__ import annotations

import io
import os
from collections.abc import Generator
from pathlib import Path

import pytest
from rich.console import Console


@pytest.fixture
def temp_project(tmp_path: Path) -> Generator[Path, None, None]:
    """Create a temporary project directory and change to it."""
    original_dir = os.getcwd()
    os.chdir(tmp_path)
    try:
        yield tmp_path
    finally:
        os.chdir(original_dir)


@pytest.fixture
def temp_ticklist_dir(temp_project: Path) -> Path:
    """Create a temporary .ticklist directory."""
    ticklist_dir = temp_project / ".ticklist"
    ticklist_dir.mkdir()
    return ticklist_dir


@pytest.fixture
def console_output() -> io.StringIO:
    """Buffer that captured console output is written to."""
    return io.StringIO()


@pytest.fixture
def console(console_output: io.StringIO) -> Console:
    """Rich console writing plain text into ``console_output``."""
    return Console(file=console_output, width=200, color_system=None)


@pytest.fixture
def sample_lines() -> list[str]:
    """Stored lines covering every task kind."""
    return [
        "T//✘//buy milk",
        "D//✓//submit report//2024-01-15//18:00",
        "E//✘//team sync//16/01/2024//10:00-11:00",
    ]


@pytest.fixture
def sample_tasks_file(temp_ticklist_dir: Path, sample_lines: list[str]) -> Path:
    """Write a sample task file at the default location."""
    path = temp_ticklist_dir / "tasks.txt"
    path.write_text("\n".join(sample_lines) + "\n", encoding="utf-8")
    return path
