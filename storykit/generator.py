#!/usr/bin/env python3
"""
Story Generator
===============
One corpus, one chain, one generated story.

Usage:
    from storykit import StoryGenerator

    gen = StoryGenerator.from_story("alice")
    gen.set_output_length(100)
    print(f"Seed for given passage: {gen.get_seed()}")
    gen.make_story()
    print(gen.story)
"""

import logging
import random
from pathlib import Path
from typing import List, Optional, TextIO

from storykit.chain import ChainBuilder, ChainModel
from storykit.config import GeneratorConfig
from storykit.sources import (
    FileSource,
    StreamSource,
    TextSource,
    TokenSource,
    story_source,
)
from storykit.walker import ChainWalker

logger = logging.getLogger(__name__)


class StoryGenerator:
    """Builds a chain from a token source and walks it."""

    def __init__(self, source: TokenSource, config: Optional[GeneratorConfig] = None):
        self.source = source
        self.config = config or GeneratorConfig()
        self._rng = self.config.make_rng()
        self._model: Optional[ChainModel] = None
        self._tokens: Optional[List[str]] = None
        self._story: Optional[str] = None

    # -- constructors -------------------------------------------------------

    @classmethod
    def from_file(cls, path, config: Optional[GeneratorConfig] = None) -> 'StoryGenerator':
        return cls(FileSource(Path(path)), config)

    @classmethod
    def from_story(cls, name: str, config: Optional[GeneratorConfig] = None) -> 'StoryGenerator':
        return cls(story_source(name), config)

    @classmethod
    def from_stream(cls, stream: TextIO, config: Optional[GeneratorConfig] = None) -> 'StoryGenerator':
        return cls(StreamSource(stream), config)

    @classmethod
    def from_text(cls, text: str, config: Optional[GeneratorConfig] = None) -> 'StoryGenerator':
        return cls(TextSource(text), config)

    # -- settings -----------------------------------------------------------

    def get_seed(self) -> int:
        return self.config.random_seed

    def set_seed(self, seed: int):
        """Reseed; the next story starts from a fresh generator."""
        self.config.random_seed = seed
        self._rng = random.Random(seed)

    def set_chain_length(self, length: int):
        """Takes effect on the next build. Drops any chain already built."""
        if length < 1:
            raise ValueError(f"chain_length must be at least 1, got {length}")
        self.config.chain_length = length
        self._model = None

    def set_output_length(self, length: int):
        """Minimum number of words; output runs on to the end of the sentence."""
        if length < 0:
            raise ValueError(f"output length cannot be negative, got {length}")
        self.config.output_words = length

    def set_output_width(self, width: int):
        if width < 1:
            raise ValueError(f"output width must be positive, got {width}")
        self.config.output_width = width

    # -- generation ---------------------------------------------------------

    @property
    def model(self) -> Optional[ChainModel]:
        return self._model

    @property
    def story(self) -> Optional[str]:
        return self._story

    def _source_tokens(self):
        """Tokens to build from. Streams are read once and kept for rebuilds."""
        if self.source.bounded:
            return self.source
        if self._tokens is None:
            self._tokens = list(self.source)
        return self._tokens

    def build(self) -> ChainModel:
        """Read the source and build the chain (once per chain length)."""
        if self._model is None:
            builder = ChainBuilder(self.config.chain_length)
            self._model = builder.build(self._source_tokens(), sentinel=self.source.sentinel)
        return self._model

    def make_story(self) -> str:
        """
        Build the chain if needed and generate a story.

        Raises:
            EmptyInputError: the source had fewer words than the chain length
            EmptyModelError: the chain has no phrases to walk
            SourceUnavailableError: the source could not be read
        """
        model = self.build()
        walker = ChainWalker(self._rng)
        self._story = walker.generate(
            model,
            target_word_count=self.config.output_words,
            line_width=self.config.output_width,
            max_overrun=self.config.max_overrun_words,
        )
        logger.debug(f"Generated {len(self._story)} characters from {self.source.name}")
        return self._story


__all__ = ['StoryGenerator']
