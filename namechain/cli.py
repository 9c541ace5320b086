#!/usr/bin/env python3
"""
namechain CLI
=============
Command-line interface for training a name chain and sampling from it.

Usage:
    namechain generate -n 20 --seed 42
    namechain generate --corpus my_names.txt --order 2 --novel
    namechain inspect --context "^Ja"
    namechain stats
"""

import argparse
import logging
import random
import sys

from rich.console import Console
from rich.table import Table
from rich import box

from namechain import __version__
from namechain.names import NameModel, NameModelConfig, load_corpus, default_corpus_path
from namechain.settings import get_setting

logger = logging.getLogger(__name__)


# =============================================================================
# Utilities
# =============================================================================

class Output:
    """Handles CLI output with quiet mode support."""

    def __init__(self, quiet: bool = False):
        self.quiet = quiet
        self.console = Console()

    def print(self, *args, **kwargs):
        if not self.quiet:
            print(*args, **kwargs)

    def result(self, line: str):
        """Primary output; printed even in quiet mode."""
        print(line)

    def error(self, msg: str):
        print(f"Error: {msg}", file=sys.stderr)

    def table(self, headers: list, rows: list, title: str = None):
        """Print a rich table."""
        if self.quiet:
            return
        table = Table(title=title, box=box.SIMPLE)
        for h in headers:
            table.add_column(str(h))
        for row in rows:
            table.add_row(*(str(c) for c in row))
        self.console.print(table)


def configure_logging(verbose: bool = False):
    level = "DEBUG" if verbose else str(get_setting("logging.level", "WARNING")).upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
    )


def build_model(args) -> NameModel:
    """Train a NameModel from the corpus and options in ``args``."""
    config = NameModelConfig(
        order=getattr(args, 'order', None),
        max_length=getattr(args, 'max_length', None),
    )
    seed = getattr(args, 'seed', None)
    rng = random.Random(seed) if seed is not None else None

    corpus_path = args.corpus or default_corpus_path()
    names = load_corpus(corpus_path)
    return NameModel(config=config, rng=rng).train(names)


# =============================================================================
# Commands
# =============================================================================

def cmd_generate(args, out: Output):
    """Generate names."""
    model = build_model(args)
    count = args.count if args.count is not None else get_setting("generation.count", 100)
    novel = args.novel or bool(get_setting("generation.novel_only", False))
    unique = args.unique or bool(get_setting("generation.unique", False))

    names = model.generate_batch(count, novel_only=novel, unique=unique)
    if not names:
        out.error("No names generated.")
        return 1

    for name in names:
        out.result(name)
    return 0


def cmd_inspect(args, out: Output):
    """List (context, successor, count) triples."""
    model = build_model(args)
    chain = model.chain
    limit = args.limit if args.limit is not None else get_setting("inspect.limit", 50)

    if args.dump:
        out.result(chain.dump())
        return 0

    if args.context is not None:
        if args.context not in chain:
            out.error(f"Context not in chain: {args.context!r}")
            return 1
        counts = chain.counts(args.context)
        rows = [[args.context, s, c] for s, c in counts.items()]
    else:
        rows = [list(t) for t in chain.items()]

    shown = rows[:limit] if limit else rows
    out.table(['Context', 'Next', 'Count'], shown,
              title=f"{len(shown)} of {len(rows)} transitions")
    return 0


def cmd_stats(args, out: Output):
    """Show chain statistics."""
    model = build_model(args)
    chain = model.chain
    out.table(['Metric', 'Value'], [
        ['Order', model.order],
        ['Records', model.records],
        ['Skipped', model.skipped],
        ['Contexts', len(chain)],
        ['Transitions', chain.transition_count()],
    ])
    return 0


# =============================================================================
# Main
# =============================================================================

def add_model_arguments(p):
    p.add_argument('--corpus', '-c', help='Training corpus, one name per line (default: bundled)')
    p.add_argument('--order', '-o', type=int, help='Context length (default: from app.yaml)')
    p.add_argument('--seed', type=int, help='Seed for reproducible output')


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog='namechain',
        description='namechain - Markov Chain Name Generator',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s generate -n 20 --seed 42
  %(prog)s generate --corpus names.txt --order 2 --novel --unique
  %(prog)s inspect --context "^Ja"
  %(prog)s stats
"""
    )

    parser.add_argument('--version', '-V', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('--quiet', '-q', action='store_true', help='Suppress non-essential output')
    parser.add_argument('--verbose', '-v', action='store_true', help='Debug logging and tracebacks')

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # --- generate ---
    p = subparsers.add_parser('generate', aliases=['gen', 'g'], help='Generate names')
    add_model_arguments(p)
    p.add_argument('-n', '--count', type=int, help='Number of names (default: from app.yaml)')
    p.add_argument('--max-length', type=int, help='Abort names longer than this')
    p.add_argument('--novel', action='store_true', help='Reject names found in the corpus')
    p.add_argument('--unique', '-u', action='store_true', help='Reject duplicates')

    # --- inspect ---
    p = subparsers.add_parser('inspect', aliases=['i'], help='List learned transitions')
    add_model_arguments(p)
    p.add_argument('--context', help='Only show successors of this context')
    p.add_argument('--limit', '-l', type=int, help='Max rows (0 = all)')
    p.add_argument('--dump', action='store_true', help='Plain debug listing')

    # --- stats ---
    p = subparsers.add_parser('stats', help='Show chain statistics')
    add_model_arguments(p)

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    cmd_map = {
        'gen': 'generate', 'g': 'generate',
        'i': 'inspect',
    }
    command = cmd_map.get(args.command, args.command)

    configure_logging(args.verbose)
    out = Output(quiet=args.quiet)

    commands = {
        'generate': cmd_generate,
        'inspect': cmd_inspect,
        'stats': cmd_stats,
    }

    handler = commands.get(command)
    if handler:
        try:
            return handler(args, out)
        except KeyboardInterrupt:
            out.print("\nCancelled.")
            return 130
        except Exception as e:
            out.error(str(e))
            if args.verbose:
                import traceback
                traceback.print_exc()
            return 1

    parser.print_help()
    return 0


if __name__ == '__main__':
    sys.exit(main())
