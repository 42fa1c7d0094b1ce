#!/usr/bin/env python3
"""
Phrase Chain Builder
====================
Builds a word-level Markov chain from a stream of tokens.

Every run of `chain_length` consecutive words is a phrase. The model maps
each phrase to the list of phrases observed to follow it, one entry per
occurrence, so a successor seen three times appears three times in the list.
Sampling uniformly from that list reproduces the corpus frequencies.

Example:
    tokens: the cat sat on the mat. the cat ran.
    order 2: "the cat" -> ["cat sat", "cat ran."]

Two style flags are collected while reading:
- contains_capitals: some phrase starts with an uppercase letter
- contains_punctuation: some phrase ends with a period
"""

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional

from .errors import EmptyInputError

logger = logging.getLogger(__name__)

# Cosmetic emphasis markers (_like this_) in source texts
EMPHASIS_MARKER = '_'


def clean_token(token: str) -> str:
    """Strip emphasis markers from a token."""
    return token.replace(EMPHASIS_MARKER, '')


def starts_with_capital(phrase: str) -> bool:
    """True if the phrase starts with an uppercase ASCII letter."""
    return bool(phrase) and 'A' <= phrase[0] <= 'Z'


def last_word(phrase: str) -> str:
    return phrase[phrase.rfind(' ') + 1:]


# =============================================================================
# MODEL
# =============================================================================

@dataclass
class StyleFlags:
    """Corpus style detected while building the chain."""
    contains_capitals: bool = False
    contains_punctuation: bool = False

    def observe(self, phrase: str):
        """Update flags from a phrase. Flags never go back to False."""
        if not self.contains_capitals and starts_with_capital(phrase):
            self.contains_capitals = True
        if not self.contains_punctuation and phrase.endswith('.'):
            self.contains_punctuation = True


@dataclass
class ChainModel:
    """Word-level Markov chain of a fixed order."""
    chain_length: int
    mapping: Dict[str, List[str]] = field(default_factory=dict)
    flags: StyleFlags = field(default_factory=StyleFlags)

    def __len__(self) -> int:
        return len(self.mapping)

    def __contains__(self, phrase: str) -> bool:
        return phrase in self.mapping

    @property
    def keys(self) -> List[str]:
        """All phrases with at least one successor, in first-seen order."""
        return list(self.mapping.keys())

    def successors(self, phrase: str) -> Optional[List[str]]:
        """Successor list for a phrase, or None for a dead end."""
        return self.mapping.get(phrase)

    def transition_count(self) -> int:
        return sum(len(v) for v in self.mapping.values())

    def to_dict(self) -> dict:
        """Serialize model to dictionary"""
        return {
            'chain_length': self.chain_length,
            'contains_capitals': self.flags.contains_capitals,
            'contains_punctuation': self.flags.contains_punctuation,
            'mapping': {k: list(v) for k, v in self.mapping.items()},
        }


# =============================================================================
# BUILDER
# =============================================================================

class ChainBuilder:
    """Builds ChainModels from token streams."""

    def __init__(self, chain_length: int = 2):
        if chain_length < 1:
            raise ValueError(f"chain_length must be at least 1, got {chain_length}")
        self.chain_length = chain_length

    def _tokens(self, tokens: Iterable[str], sentinel: Optional[str]) -> Iterator[str]:
        """Clean tokens, dropping ones that were only emphasis markers.

        When a sentinel is given it is yielded verbatim and ends the stream.
        It is compared before cleaning, so it must appear exactly.
        """
        for token in tokens:
            if sentinel is not None and token == sentinel:
                yield token
                return
            token = clean_token(token)
            if token:
                yield token

    def build(self, tokens: Iterable[str], sentinel: Optional[str] = None) -> ChainModel:
        """
        Build a chain from a token stream.

        Args:
            tokens: Whitespace-delimited words, in reading order
            sentinel: End-of-input marker for interactive sources. Bounded
                sources pass None and the marker is just another word.

        Returns:
            The built ChainModel

        Raises:
            EmptyInputError: if fewer than chain_length tokens were read
        """
        model = ChainModel(chain_length=self.chain_length)
        stream = self._tokens(tokens, sentinel)

        window = deque(maxlen=self.chain_length)
        for token in stream:
            if sentinel is not None and token == sentinel:
                break
            window.append(token)
            if len(window) == self.chain_length:
                break

        if len(window) < self.chain_length:
            raise EmptyInputError(self.chain_length, len(window))

        # The last phrase of a bounded source is never observed; the phrase
        # before the sentinel is.
        key = ' '.join(window)
        for token in stream:
            model.flags.observe(key)
            if sentinel is not None and token == sentinel:
                break
            window.append(token)
            successor = ' '.join(window)
            model.mapping.setdefault(key, []).append(successor)
            key = successor

        logger.debug(
            f"Built order-{self.chain_length} chain: {len(model)} phrases, "
            f"{model.transition_count()} transitions, flags={model.flags}"
        )
        return model


def build_chain(tokens: Iterable[str], chain_length: int = 2,
                sentinel: Optional[str] = None) -> ChainModel:
    """Build a chain in one call. See ChainBuilder.build()."""
    return ChainBuilder(chain_length).build(tokens, sentinel=sentinel)


__all__ = [
    'StyleFlags',
    'ChainModel',
    'ChainBuilder',
    'build_chain',
    'clean_token',
    'starts_with_capital',
    'last_word',
]
