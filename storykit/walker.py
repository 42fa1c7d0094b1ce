#!/usr/bin/env python3
"""
Chain Walker
============
Generates text by a random walk over a ChainModel.

The walk starts from a random phrase (a capitalized one if the corpus has
capitals) and repeatedly moves to a random successor, emitting only the new
last word. When a phrase has no successors, a fresh phrase is drawn from the
whole model and emitted in full. If the corpus has both capitals and
periods, the fresh phrase starts a sentence after a period and continues one
otherwise.

After the target word count the walk keeps going until a word ends with a
period, unless the corpus has no periods at all.
"""

import logging
import random
from dataclasses import dataclass, field
from typing import List, Optional

from .chain import ChainModel, last_word, starts_with_capital
from .errors import EmptyModelError

logger = logging.getLogger(__name__)


@dataclass
class GenerationState:
    """Mutable state of a single walk."""
    seed: str
    output: List[str] = field(default_factory=list)
    line_chars: int = 0
    word_count: int = 0
    continue_output: bool = True

    def emit(self, text: str, line_width: int):
        self.output.append(text + ' ')
        self.line_chars += len(text) + 1
        if self.line_chars >= line_width:
            self.output.append('\n')
            self.line_chars = 0

    @property
    def text(self) -> str:
        return ''.join(self.output)


class ChainWalker:
    """Random walk text generator."""

    def __init__(self, rng: Optional[random.Random] = None):
        """
        Args:
            rng: Random generator owned by this walker. Pass a seeded
                instance for reproducible output.
        """
        self.rng = rng if rng is not None else random.Random()

    def _choose(self, phrases: List[str]) -> str:
        return phrases[self.rng.randrange(len(phrases))]

    def _choose_where(self, phrases: List[str], capital: bool) -> str:
        """Uniform pick among phrases whose capitalization matches."""
        pool = [p for p in phrases if starts_with_capital(p) == capital]
        if not pool:
            logger.debug(f"No phrases with capital={capital}, sampling from all phrases")
            pool = phrases
        return self._choose(pool)

    def _pick_seed(self, model: ChainModel, phrases: List[str]) -> str:
        if model.flags.contains_capitals:
            return self._choose_where(phrases, capital=True)
        return self._choose(phrases)

    def _reseed(self, model: ChainModel, phrases: List[str], previous: str) -> str:
        """Pick a new phrase after a dead end."""
        flags = model.flags
        if flags.contains_capitals and flags.contains_punctuation:
            sentence_ended = '.' in last_word(previous)
            return self._choose_where(phrases, capital=sentence_ended)
        return self._choose(phrases)

    def generate(self,
                 model: ChainModel,
                 target_word_count: int = 500,
                 line_width: int = 70,
                 max_overrun: Optional[int] = None) -> str:
        """
        Generate text from a chain.

        Args:
            model: Built chain
            target_word_count: Minimum number of words to emit
            line_width: Line break is inserted once a line reaches this width
            max_overrun: Give up finishing the sentence after this many steps
                past the target. A chain can cycle without ever reaching a
                period; None means no limit.

        Returns:
            Generated text with embedded line breaks

        Raises:
            EmptyModelError: if the model has no phrases
        """
        phrases = model.keys
        if not phrases:
            raise EmptyModelError("Cannot generate text from an empty chain")

        seed = self._pick_seed(model, phrases)
        state = GenerationState(seed=seed, word_count=model.chain_length)
        state.output.append(seed + ' ')
        state.line_chars = len(seed)

        while state.word_count < target_word_count or state.continue_output:
            successors = model.successors(state.seed)

            if successors is None:
                state.seed = self._reseed(model, phrases, state.seed)
                increment = state.seed
            else:
                state.seed = self._choose(successors)
                increment = last_word(state.seed)

            state.emit(increment, line_width)
            state.word_count += 1

            if state.word_count >= target_word_count:
                if not model.flags.contains_punctuation:
                    state.continue_output = False
                elif last_word(increment).endswith('.'):
                    state.continue_output = False
                elif max_overrun is not None and state.word_count - target_word_count >= max_overrun:
                    logger.warning(f"No sentence end within {max_overrun} words past target, stopping")
                    state.continue_output = False

        return state.text


def generate_text(model: ChainModel,
                  target_word_count: int = 500,
                  line_width: int = 70,
                  rng: Optional[random.Random] = None,
                  max_overrun: Optional[int] = None) -> str:
    """Generate text in one call. See ChainWalker.generate()."""
    return ChainWalker(rng).generate(model, target_word_count, line_width, max_overrun)


__all__ = [
    'GenerationState',
    'ChainWalker',
    'generate_text',
]
