#!/usr/bin/env python3
"""
Configuration Management
========================
Generation settings with defaults from app.yaml.

Usage:
    config = GeneratorConfig(chain_length=3, random_seed=42)
    rng = config.make_rng()
"""

import random
import time
from dataclasses import dataclass
from typing import Optional

from storykit.settings import get_setting


def current_time_seed() -> int:
    """Milliseconds since the epoch, the default random seed."""
    return int(time.time() * 1000)


@dataclass
class GeneratorConfig:
    """Settings for one generation run."""
    chain_length: Optional[int] = None         # Words per phrase
    output_words: Optional[int] = None         # Minimum words emitted
    output_width: Optional[int] = None         # Line break threshold (characters)
    random_seed: Optional[int] = None          # Defaults to current time
    max_overrun_words: Optional[int] = None    # Cap on sentence completion

    def __post_init__(self):
        cfg = get_setting("generation", {}) or {}
        if self.chain_length is None:
            self.chain_length = cfg.get("chain_length")
        if self.output_words is None:
            self.output_words = cfg.get("output_words")
        if self.output_width is None:
            self.output_width = cfg.get("output_width")
        if self.max_overrun_words is None:
            self.max_overrun_words = cfg.get("max_overrun_words")
        if self.random_seed is None:
            self.random_seed = current_time_seed()

        missing = [
            name for name, value in (
                ("chain_length", self.chain_length),
                ("output_words", self.output_words),
                ("output_width", self.output_width),
            )
            if value is None
        ]
        if missing:
            raise ValueError(f"generation settings missing in app.yaml: {', '.join(missing)}")

        self.validate()

    def validate(self):
        if self.chain_length < 1:
            raise ValueError(f"chain_length must be at least 1, got {self.chain_length}")
        if self.output_words < 0:
            raise ValueError(f"output_words cannot be negative, got {self.output_words}")
        if self.output_width < 1:
            raise ValueError(f"output_width must be positive, got {self.output_width}")
        if self.max_overrun_words is not None and self.max_overrun_words < 0:
            raise ValueError(f"max_overrun_words cannot be negative, got {self.max_overrun_words}")

    def make_rng(self) -> random.Random:
        """A fresh generator seeded with random_seed."""
        return random.Random(self.random_seed)


__all__ = [
    'GeneratorConfig',
    'current_time_seed',
]
