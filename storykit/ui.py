#!/usr/bin/env python3
"""
Terminal UI
===========
Rich-based tables and batch progress for the CLI.

Usage:
    from storykit.ui import BatchProgress

    with BatchProgress(total=8) as progress:
        run_batch(names, callback=progress.advance)
"""

import sys
from typing import List, Optional

from rich import box
from rich.console import Console
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.table import Table

from storykit.chain import ChainModel
from storykit.sources import StoryEntry


def stories_table(entries: List[StoryEntry], corpus_dir=None) -> Table:
    """Table of catalog stories and whether their files are present."""
    table = Table(title="Stories", box=box.SIMPLE)
    table.add_column("Name", style="bold")
    table.add_column("Title")
    table.add_column("File")
    table.add_column("Status")
    for entry in entries:
        present = entry.path(corpus_dir).is_file()
        status = "[green]ok[/green]" if present else "[red]missing[/red]"
        table.add_row(entry.name, entry.title, entry.file, status)
    return table


def model_table(model: ChainModel, top: int = 10) -> Table:
    """Summary of a chain: flags, sizes and the most branching phrases."""
    table = Table(title=f"Order-{model.chain_length} chain", box=box.SIMPLE)
    table.add_column("Phrase")
    table.add_column("Successors", justify="right")
    table.add_column("Distinct", justify="right")

    ranked = sorted(model.mapping.items(), key=lambda kv: -len(kv[1]))
    for phrase, successors in ranked[:top]:
        table.add_row(phrase, str(len(successors)), str(len(set(successors))))

    table.caption = (
        f"{len(model)} phrases, {model.transition_count()} transitions, "
        f"capitals={model.flags.contains_capitals}, "
        f"punctuation={model.flags.contains_punctuation}"
    )
    return table


class BatchProgress:
    """
    Progress bar for batch runs.

    Falls back to silence when stdout is not a terminal or quiet is set, so
    piped output stays clean.
    """

    def __init__(self, total: int, quiet: bool = False, console: Optional[Console] = None):
        self.total = total
        self.console = console or Console(stderr=True)
        self.use_rich = not quiet and self.console.is_terminal and sys.stdout.isatty()
        self.progress: Optional[Progress] = None
        self._task = None
        self.failed = 0

    def __enter__(self):
        if self.use_rich:
            self.progress = Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                BarColumn(),
                TextColumn("{task.completed}/{task.total}"),
                TimeElapsedColumn(),
                console=self.console,
                transient=True,
            )
            self.progress.__enter__()
            self._task = self.progress.add_task("Generating", total=self.total)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.progress:
            self.progress.__exit__(exc_type, exc_val, exc_tb)
        return False

    def advance(self, result):
        """Batch callback: one source finished."""
        if not result.ok:
            self.failed += 1
        if self.progress:
            self.progress.update(self._task, advance=1, description=f"Generated {result.name}")


__all__ = [
    'stories_table',
    'model_table',
    'BatchProgress',
]
