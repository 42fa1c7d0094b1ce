#!/usr/bin/env python3
"""
Token Sources
=============
Input collaborators that feed words to the chain builder.

- FileSource: a text file, read until exhausted
- TextSource: an in-memory string, read until exhausted
- StreamSource: an interactive stream (stdin), read until the end marker

Bounded sources have `sentinel = None`, so the end marker is an ordinary word
inside a file. Only interactive sources stop on it.

The story catalog maps short names to the bundled novel files listed in
app.yaml.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, List, Optional, TextIO

from storykit.errors import SourceUnavailableError
from storykit.settings import get_setting, resolve_path

logger = logging.getLogger(__name__)


def default_sentinel() -> str:
    sentinel = get_setting("input.end_sentinel")
    if sentinel is None:
        raise ValueError("input.end_sentinel must be set in app.yaml")
    return sentinel


# =============================================================================
# Sources
# =============================================================================

class TokenSource:
    """Base class for token sources."""

    sentinel: Optional[str] = None
    name: str = "<source>"

    def __iter__(self) -> Iterator[str]:
        return self.tokens()

    def tokens(self) -> Iterator[str]:
        raise NotImplementedError

    @property
    def bounded(self) -> bool:
        return self.sentinel is None

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class TextSource(TokenSource):
    """Words of an in-memory string."""

    def __init__(self, text: str, name: str = "<text>"):
        self.text = text
        self.name = name

    def tokens(self) -> Iterator[str]:
        yield from self.text.split()


class FileSource(TokenSource):
    """Words of a text file."""

    def __init__(self, path, encoding: Optional[str] = None):
        self.path = Path(path)
        self.name = str(path)
        self.encoding = encoding or get_setting("input.encoding", "utf-8")
        if not self.path.is_file():
            raise SourceUnavailableError(self.name, "file not found")

    def tokens(self) -> Iterator[str]:
        try:
            f = open(self.path, 'r', encoding=self.encoding)
        except OSError as e:
            raise SourceUnavailableError(self.name, str(e)) from e
        with f:
            try:
                for line in f:
                    yield from line.split()
            except (UnicodeDecodeError, OSError) as e:
                raise SourceUnavailableError(self.name, str(e)) from e


class StreamSource(TokenSource):
    """Words typed into a stream, up to the end marker.

    Lines are read lazily so nothing after the marker is consumed.
    """

    def __init__(self, stream: TextIO, sentinel: Optional[str] = None, name: str = "<stdin>"):
        self.stream = stream
        self.sentinel = sentinel if sentinel is not None else default_sentinel()
        self.name = name

    def tokens(self) -> Iterator[str]:
        for line in self.stream:
            for token in line.split():
                yield token
                if token == self.sentinel:
                    return


# =============================================================================
# Story Catalog
# =============================================================================

@dataclass
class StoryEntry:
    """A bundled corpus."""
    name: str
    title: str
    file: str

    def path(self, corpus_dir: Optional[Path] = None) -> Path:
        return (corpus_dir or corpus_directory()) / self.file


def corpus_directory() -> Path:
    return resolve_path(get_setting("corpus.directory", "."))


def load_story_catalog() -> Dict[str, StoryEntry]:
    """Story name -> entry, in app.yaml order."""
    stories = get_setting("stories", {}) or {}
    catalog = {}
    for name, info in stories.items():
        if not isinstance(info, dict) or not info.get("file"):
            raise ValueError(f"stories.{name}.file must be set in app.yaml")
        catalog[name] = StoryEntry(name=name, title=info.get("title", name), file=info["file"])
    return catalog


def list_stories() -> List[StoryEntry]:
    return list(load_story_catalog().values())


def story_source(name: str, corpus_dir: Optional[Path] = None) -> FileSource:
    """
    Open a catalog story as a token source.

    Raises:
        SourceUnavailableError: unknown story name or missing file
    """
    catalog = load_story_catalog()
    entry = catalog.get(name)
    if entry is None:
        available = ', '.join(catalog)
        raise SourceUnavailableError(name, f"unknown story; available: {available}")
    path = entry.path(corpus_dir)
    logger.debug(f"Story '{name}' -> {path}")
    return FileSource(path)


__all__ = [
    'TokenSource',
    'TextSource',
    'FileSource',
    'StreamSource',
    'StoryEntry',
    'corpus_directory',
    'load_story_catalog',
    'list_stories',
    'story_source',
    'default_sentinel',
]
