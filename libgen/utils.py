"""Shared utility functions for the library generator.

Provides JSON I/O, file-system helpers and Rich-based console output.  All
operator-facing text goes through the module-level ``console`` so tests can
capture or silence it in one place.
"""

from __future__ import annotations

import asyncio
import json
import stat
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.rule import Rule

console = Console()

# ---------------------------------------------------------------------------
# JSON I/O
# ---------------------------------------------------------------------------


def load_json(path: str | Path) -> dict[str, Any]:
    """Load and parse a JSON file.

    Args:
        path: Path to the JSON file.

    Returns:
        Parsed dictionary.

    Raises:
        FileNotFoundError: If the file does not exist.
        json.JSONDecodeError: If the file is not valid JSON.
    """
    file_path = Path(path)
    raw = file_path.read_text(encoding="utf-8")
    data = json.loads(raw)
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object in {file_path}")
    return data


def dump_json(data: dict[str, Any] | list[Any]) -> str:
    """Serialise *data* the way every generator file is written."""
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


async def save_json(data: dict[str, Any] | list[Any], path: str | Path) -> None:
    """Save data as pretty-printed JSON.

    Parent directories are created automatically.  The write itself runs in
    a worker thread so it never blocks the event loop.

    Args:
        data: Serialisable data (dict or list).
        path: Destination file path.
    """
    await asyncio.to_thread(write_text, Path(path), dump_json(data))


# ---------------------------------------------------------------------------
# File-system helpers
# ---------------------------------------------------------------------------


def write_text(path: Path, content: str) -> None:
    """Synchronous helper: create parent dirs and write content."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def make_executable(path: Path) -> None:
    """Set the executable bit on a file."""
    current = path.stat().st_mode
    path.chmod(current | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


BANNER = r"""
  _ _ _
 | (_) |__   __ _  ___ _ __
 | | | '_ \ / _` |/ _ \ '_ \
 | | | |_) | (_| |  __/ | | |
 |_|_|_.__/ \__, |\___|_| |_|
            |___/   java library generator
"""


def print_banner(version: str) -> None:
    """Print the greeting banner with the running tool version."""
    console.print(Panel(f"[yellow]{BANNER}[/yellow]", border_style="yellow", expand=False))
    console.print(f"  v.[green]{version}[/green]")
    console.print()


def print_phase_header(name: str) -> None:
    """Print a dim full-width rule announcing a pipeline phase."""
    console.print(Rule(f"[bold cyan]{name}[/bold cyan]", style="cyan"))


def print_file_action(action: str, rel_path: str) -> None:
    """Print one materialised file, yeoman style: ``   create  path``."""
    color = {"create": "green", "update": "cyan", "skip": "yellow"}.get(action, "white")
    console.print(f"[{color}]{action:>10}[/{color}] {rel_path}")


def print_skip(message: str) -> None:
    """Print a deliberate skip of a whole generation step."""
    print_file_action("skip", message)


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{message}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{message}[/bold red]")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{message}[/bold yellow]")
