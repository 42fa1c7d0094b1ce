#!/usr/bin/env python3
"""
Errors
======
Exceptions raised by the chain builder, the walker and the input sources.
"""


class StoryKitError(Exception):
    """Base class for StoryKit errors."""


class EmptyInputError(StoryKitError):
    """The token source ended before a full phrase could be read."""

    def __init__(self, chain_length: int, token_count: int):
        self.chain_length = chain_length
        self.token_count = token_count
        super().__init__(
            f"Need at least {chain_length} tokens to build a chain, got {token_count}"
        )


class EmptyModelError(StoryKitError):
    """Generation was attempted against a chain with no phrases."""


class SourceUnavailableError(StoryKitError):
    """An input source could not be found or opened."""

    def __init__(self, source: str, reason: str = ""):
        self.source = source
        self.reason = reason
        message = f"Source unavailable: {source}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


__all__ = [
    'StoryKitError',
    'EmptyInputError',
    'EmptyModelError',
    'SourceUnavailableError',
]
