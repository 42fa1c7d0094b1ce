#!/usr/bin/env python3
"""
Batch Generation
================
Generates one text per source, sequentially or in a thread pool.

Each source gets its own builder, chain, walker and random generator, so
runs share nothing and can go in parallel. A source that fails (missing file,
too few words, empty chain) is logged and recorded on its result; the other
sources still run.

Usage:
    from storykit.batch import run_catalog

    for result in run_catalog(workers=4):
        print(f"Seed for given passage: {result.seed}")
        print(result.text)
"""

import logging
import random
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Union

from storykit.chain import ChainBuilder
from storykit.config import GeneratorConfig
from storykit.errors import StoryKitError
from storykit.settings import get_setting
from storykit.sources import TokenSource, list_stories, story_source
from storykit.walker import ChainWalker

logger = logging.getLogger(__name__)

# A source, or a catalog story name resolved when the run starts
SourceSpec = Union[TokenSource, str]


@dataclass
class StoryResult:
    """Outcome of one source in a batch."""
    name: str
    seed: int
    text: Optional[str] = None
    error: Optional[str] = None
    phrases: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None


def _source_name(item: SourceSpec) -> str:
    return item if isinstance(item, str) else item.name


def generate_one(item: SourceSpec, config: GeneratorConfig, seed: int) -> StoryResult:
    """Build and walk a chain for one source. Core errors are recorded, not raised."""
    result = StoryResult(name=_source_name(item), seed=seed)
    try:
        source = story_source(item) if isinstance(item, str) else item
        model = ChainBuilder(config.chain_length).build(source, sentinel=source.sentinel)
        result.phrases = len(model)
        walker = ChainWalker(random.Random(seed))
        result.text = walker.generate(
            model,
            target_word_count=config.output_words,
            line_width=config.output_width,
            max_overrun=config.max_overrun_words,
        )
    except StoryKitError as e:
        logger.warning(f"Generation failed for {result.name}: {e}")
        result.error = str(e)
    return result


def run_batch(sources: Iterable[SourceSpec],
              config: Optional[GeneratorConfig] = None,
              workers: int = 1,
              callback: Callable = None) -> List[StoryResult]:
    """
    Generate text for several sources.

    Args:
        sources: Token sources or catalog story names
        config: Shared settings. Source i is seeded with random_seed + i.
        workers: 1 runs in order; more uses a thread pool
        callback: Optional callback(result) for each completion

    Returns:
        Results in the same order as sources
    """
    if workers < 1:
        raise ValueError("workers must be at least 1")
    config = config or GeneratorConfig()
    items = list(sources)
    seeds = [config.random_seed + i for i in range(len(items))]

    if workers == 1:
        results = []
        for item, seed in zip(items, seeds):
            result = generate_one(item, config, seed)
            if callback:
                callback(result)
            results.append(result)
        return results

    results: List[Optional[StoryResult]] = [None] * len(items)
    with ThreadPoolExecutor(max_workers=workers) as executor:
        future_to_index = {
            executor.submit(generate_one, item, config, seed): i
            for i, (item, seed) in enumerate(zip(items, seeds))
        }
        for future in as_completed(future_to_index):
            result = future.result()
            results[future_to_index[future]] = result
            if callback:
                callback(result)
    return results


def run_catalog(config: Optional[GeneratorConfig] = None,
                workers: Optional[int] = None,
                callback: Callable = None) -> List[StoryResult]:
    """Run every catalog story with the batch defaults from app.yaml."""
    cfg = get_setting("batch", {}) or {}
    if config is None:
        config = GeneratorConfig(output_words=cfg.get("output_words"))
    if workers is None:
        workers = cfg.get("workers", 1)
    names = [entry.name for entry in list_stories()]
    return run_batch(names, config=config, workers=workers, callback=callback)


__all__ = [
    'StoryResult',
    'generate_one',
    'run_batch',
    'run_catalog',
]
