#!/usr/bin/env python3
"""
StoryKit - Markov Chain Story Generator
=======================================

Learns which short word sequences follow which in a body of English prose,
then writes new text by walking those statistics at random.

Quick Start
-----------
    from storykit import StoryGenerator

    gen = StoryGenerator.from_file("alice.txt")
    gen.set_seed(42)
    print(gen.make_story())

    # Or the two steps on their own
    from storykit import build_chain, generate_text
    import random

    model = build_chain("the cat sat on the mat. the cat ran.".split(), 2)
    text = generate_text(model, 50, 70, random.Random(1))

Modules
-------
    storykit.chain     - Chain builder (phrases -> successor phrases)
    storykit.walker    - Random walk text generation
    storykit.sources   - File, text and stdin token sources; story catalog
    storykit.batch     - Several sources at once
    storykit.config    - Generation settings

CLI Usage
---------
    python -m storykit generate alice.txt -n 200
    python -m storykit batch
    python -m storykit stories
"""

__version__ = "0.1.0"
__author__ = "StoryKit"

from .errors import (
    StoryKitError,
    EmptyInputError,
    EmptyModelError,
    SourceUnavailableError,
)
from .chain import (
    StyleFlags,
    ChainModel,
    ChainBuilder,
    build_chain,
)
from .walker import (
    ChainWalker,
    GenerationState,
    generate_text,
)
from .config import GeneratorConfig
from .sources import (
    TokenSource,
    TextSource,
    FileSource,
    StreamSource,
    list_stories,
    story_source,
)
from .generator import StoryGenerator
from .batch import StoryResult, run_batch, run_catalog

__all__ = [
    '__version__',
    # Errors
    'StoryKitError',
    'EmptyInputError',
    'EmptyModelError',
    'SourceUnavailableError',
    # Core
    'StyleFlags',
    'ChainModel',
    'ChainBuilder',
    'build_chain',
    'ChainWalker',
    'GenerationState',
    'generate_text',
    # Configuration
    'GeneratorConfig',
    # Sources
    'TokenSource',
    'TextSource',
    'FileSource',
    'StreamSource',
    'list_stories',
    'story_source',
    # High level
    'StoryGenerator',
    'StoryResult',
    'run_batch',
    'run_catalog',
]
