#!/usr/bin/env python3
"""
StoryKit CLI
============
Command-line interface for Markov chain story generation.

Usage:
    storykit generate alice.txt -n 200
    storykit generate --story dorian --seed 42
    storykit generate -          (type text, finish with \\end)
    storykit batch --workers 4
    storykit stories
    storykit inspect --story alice --top 20
"""

import argparse
import json
import logging
import sys

from storykit import __version__
from storykit.errors import StoryKitError

# =============================================================================
# Utilities
# =============================================================================

class Output:
    """Handles CLI output with quiet mode support."""

    def __init__(self, quiet: bool = False):
        self.quiet = quiet

    def print(self, *args, **kwargs):
        if not self.quiet:
            print(*args, **kwargs)

    def text(self, text: str):
        """Generated text is the product, so it ignores quiet mode."""
        print(text)

    def error(self, msg: str):
        print(f"Error: {msg}", file=sys.stderr)


def build_config(args):
    """GeneratorConfig from the common generation flags."""
    from storykit.config import GeneratorConfig

    return GeneratorConfig(
        chain_length=getattr(args, 'chain_length', None),
        output_words=getattr(args, 'words', None),
        output_width=getattr(args, 'width', None),
        random_seed=getattr(args, 'seed', None),
    )


def open_source(args, out: Output):
    """Token source from a file argument, --story, or stdin."""
    from storykit.sources import FileSource, StreamSource, story_source
    from storykit.settings import get_setting

    if getattr(args, 'story', None):
        return story_source(args.story)
    if args.file and args.file != '-':
        return FileSource(args.file)

    if sys.stdin.isatty():
        out.print(get_setting("input.prompt", ""))
    return StreamSource(sys.stdin)


def add_generation_args(p, words_default_help: str):
    p.add_argument('-k', '--chain-length', type=int, help='Words per phrase (default: 2)')
    p.add_argument('-n', '--words', type=int, help=words_default_help)
    p.add_argument('-w', '--width', type=int, help='Output line width (default: 70)')
    p.add_argument('--seed', type=int, help='Random seed (default: current time)')


# =============================================================================
# Commands
# =============================================================================

def cmd_generate(args, out: Output):
    """Generate a story from one source."""
    from storykit.generator import StoryGenerator

    config = build_config(args)
    source = open_source(args, out)
    gen = StoryGenerator(source, config)

    if args.show_seed:
        out.print(f"Seed for given passage: {gen.get_seed()}")

    out.text(gen.make_story())
    return 0


def cmd_batch(args, out: Output):
    """Generate one story per catalog entry."""
    from storykit.batch import run_batch
    from storykit.settings import get_setting
    from storykit.sources import list_stories
    from storykit.ui import BatchProgress

    cfg = get_setting("batch", {}) or {}
    if args.words is None:
        args.words = cfg.get("output_words")
    workers = args.workers if args.workers is not None else cfg.get("workers", 1)

    names = args.names or [entry.name for entry in list_stories()]
    config = build_config(args)

    with BatchProgress(total=len(names), quiet=out.quiet) as progress:
        results = run_batch(names, config=config, workers=workers, callback=progress.advance)

    for result in results:
        if result.ok:
            out.print(f"Seed for given passage: {result.seed}")
            out.text(result.text)
            out.print()
        else:
            out.error(f"{result.name}: {result.error}")

    return 0 if all(r.ok for r in results) else 1


def cmd_stories(args, out: Output):
    """List the story catalog."""
    from rich.console import Console
    from storykit.sources import list_stories
    from storykit.ui import stories_table

    entries = list_stories()
    if args.json:
        data = [{'name': e.name, 'title': e.title, 'file': e.file} for e in entries]
        print(json.dumps(data, indent=2))
    elif not out.quiet:
        Console().print(stories_table(entries))
    return 0


def cmd_inspect(args, out: Output):
    """Show statistics of the chain built from a source."""
    from rich.console import Console
    from storykit.chain import ChainBuilder
    from storykit.config import GeneratorConfig
    from storykit.settings import get_setting
    from storykit.ui import model_table

    chain_length = args.chain_length if args.chain_length is not None else GeneratorConfig().chain_length
    source = open_source(args, out)
    model = ChainBuilder(chain_length).build(source, sentinel=source.sentinel)

    if args.json:
        print(json.dumps(model.to_dict(), indent=2))
    elif not out.quiet:
        top = args.top if args.top is not None else get_setting("inspect.top_keys", 10)
        Console().print(model_table(model, top=top))
    return 0


# =============================================================================
# Main
# =============================================================================

def main(argv=None):
    parser = argparse.ArgumentParser(
        prog='storykit',
        description='StoryKit - Markov Chain Story Generator',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s generate alice.txt -n 200 -w 60
  %(prog)s generate --story dorian --seed 42 --show-seed
  %(prog)s generate -k 3 -          (read stdin until \\end)
  %(prog)s batch alice fairy --workers 2
  %(prog)s stories
  %(prog)s inspect --story alice --top 20
"""
    )

    parser.add_argument('--version', '-V', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('--quiet', '-q', action='store_true', help='Suppress non-essential output')
    parser.add_argument('--verbose', '-v', action='store_true', help='Debug logging')

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # --- generate ---
    p = subparsers.add_parser('generate', aliases=['gen', 'g'], help='Generate a story')
    p.add_argument('file', nargs='?', help="Text file to learn from ('-' or omitted: stdin)")
    p.add_argument('--story', '-s', help='Catalog story name instead of a file')
    add_generation_args(p, 'Minimum number of words (default: 500)')
    p.add_argument('--show-seed', action='store_true', help='Print the random seed first')

    # --- batch ---
    p = subparsers.add_parser('batch', aliases=['b'], help='Generate a story per catalog entry')
    p.add_argument('names', nargs='*', help='Story names (default: whole catalog)')
    add_generation_args(p, 'Minimum number of words (default: 100)')
    p.add_argument('--workers', type=int, help='Stories generated in parallel (default: 1)')

    # --- stories ---
    p = subparsers.add_parser('stories', aliases=['ls'], help='List catalog stories')
    p.add_argument('--json', '-j', action='store_true', help='Output as JSON')

    # --- inspect ---
    p = subparsers.add_parser('inspect', aliases=['i'], help='Show chain statistics')
    p.add_argument('file', nargs='?', help="Text file ('-' or omitted: stdin)")
    p.add_argument('--story', '-s', help='Catalog story name instead of a file')
    p.add_argument('-k', '--chain-length', type=int, help='Words per phrase (default: 2)')
    p.add_argument('--top', '-t', type=int, help='Phrases to list (default: 10)')
    p.add_argument('--json', '-j', action='store_true', help='Dump the whole chain as JSON')

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
    )

    if not args.command:
        parser.print_help()
        return 0

    # Handle aliases
    cmd_map = {
        'gen': 'generate', 'g': 'generate',
        'b': 'batch',
        'ls': 'stories',
        'i': 'inspect',
    }
    command = cmd_map.get(args.command, args.command)

    out = Output(quiet=args.quiet)

    commands = {
        'generate': cmd_generate,
        'batch': cmd_batch,
        'stories': cmd_stories,
        'inspect': cmd_inspect,
    }

    handler = commands.get(command)
    if handler:
        try:
            return handler(args, out)
        except KeyboardInterrupt:
            out.print("\nCancelled.")
            return 130
        except (StoryKitError, ValueError) as e:
            out.error(str(e))
            if args.verbose:
                import traceback
                traceback.print_exc()
            return 1

    parser.print_help()
    return 0


if __name__ == '__main__':
    sys.exit(main())
