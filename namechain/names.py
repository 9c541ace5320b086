#!/usr/bin/env python3
"""
Markov Chain Name Generator
===========================
Trains a character-level Markov chain on a list of names and samples new
names from it.

Each training name is wrapped in start/end markers. With order 3 and the
markers '^' and '$', the name "Anna" contributes:

    '^'   -> 'A'        bootstrap prefixes, one per position < order
    '^A'  -> 'n'
    '^An' -> 'n'
    'Ann' -> 'a'        sliding window of `order` characters
    'nna' -> '$'        last window -> end marker

Generation mirrors this: start from '^', extend the bootstrap prefix to
`order` characters, then keep feeding the last `order` characters back in
until the end marker is drawn.
"""

from __future__ import annotations

import logging
import random
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

from .chain import MarkovChain
from .errors import NotFoundError
from .settings import get_setting, resolve_path

logger = logging.getLogger(__name__)


class NameTooLongError(ValueError):
    """Raised when a generated name runs past ``max_length``."""


# =============================================================================
# Configuration
# =============================================================================

@dataclass
class NameModelConfig:
    """Driver configuration; unset fields are read from app.yaml."""
    order: Optional[int] = None
    start_marker: Optional[str] = None
    end_marker: Optional[str] = None
    workers: Optional[int] = None
    max_length: Optional[int] = None
    max_attempts: Optional[int] = None

    def __post_init__(self):
        model = get_setting("model", {}) or {}
        if self.order is None:
            self.order = model.get("order")
        if self.start_marker is None:
            self.start_marker = model.get("start_marker")
        if self.end_marker is None:
            self.end_marker = model.get("end_marker")
        if self.workers is None:
            self.workers = get_setting("training.workers", 1)
        if self.max_length is None:
            self.max_length = get_setting("generation.max_length")
        if self.max_attempts is None:
            self.max_attempts = get_setting("generation.max_attempts")

        missing = [
            name for name, value in (
                ("model.order", self.order),
                ("model.start_marker", self.start_marker),
                ("model.end_marker", self.end_marker),
                ("generation.max_attempts", self.max_attempts),
            )
            if value is None
        ]
        if missing:
            raise ValueError(f"settings missing in app.yaml: {', '.join(missing)}")

        if self.order < 1:
            raise ValueError(f"order must be >= 1, got {self.order}")
        if len(self.start_marker) != 1 or len(self.end_marker) != 1:
            raise ValueError("start and end markers must be single characters")
        if self.start_marker == self.end_marker:
            raise ValueError("start and end markers must differ")


# =============================================================================
# Corpus
# =============================================================================

def load_corpus(path) -> list[str]:
    """Read one training record per line, stripped, blanks dropped."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Corpus not found: {path}")
    names = []
    with path.open(encoding="utf-8") as fh:
        for line in fh:
            line = line.strip()
            if line:
                names.append(line)
    logger.debug(f"Loaded {len(names)} records from {path}")
    return names


def default_corpus_path() -> Path:
    return resolve_path(get_setting("corpus.path", "data/names.txt"))


def format_name(name: str) -> str:
    """First character unchanged, the rest lower-cased."""
    return name[:1] + name[1:].lower()


# =============================================================================
# Model
# =============================================================================

class NameModel:
    """Trains and samples a character-level name chain."""

    def __init__(self,
                 config: Optional[NameModelConfig] = None,
                 rng: Optional[random.Random] = None):
        self.config = config or NameModelConfig()
        self.chain: MarkovChain[str] = MarkovChain(rng=rng)
        self.corpus: set[str] = set()
        self.records = 0
        self.skipped = 0

    @property
    def order(self) -> int:
        return self.config.order

    @property
    def start(self) -> str:
        return self.config.start_marker

    @property
    def end(self) -> str:
        return self.config.end_marker

    def _accepts(self, line: str) -> bool:
        if len(line) < self.order:
            return False
        if self.start in line or self.end in line:
            logger.warning(f"Skipping record containing a marker character: {line!r}")
            return False
        return True

    def train_record(self, line: str) -> bool:
        """
        Feed one name into the chain.

        Returns:
            False if the record was skipped (too short or holds a marker)
        """
        line = line.strip()
        if not self._accepts(line):
            return False

        order = self.order
        update = self.chain.update
        for i in range(order):
            update(self.start + line[:i], line[i])
        update(line[-order:], self.end)
        for i in range(len(line) - order):
            update(line[i:i + order], line[i + order])

        self.corpus.add(format_name(line))
        return True

    def train(self, names: Iterable[str]) -> "NameModel":
        """Train on every record; returns self for chaining."""
        names = list(names)
        workers = self.config.workers or 1
        if workers > 1 and len(names) > 1:
            with ThreadPoolExecutor(max_workers=workers) as pool:
                accepted = list(pool.map(self.train_record, names))
        else:
            accepted = [self.train_record(name) for name in names]
        self.records += sum(accepted)
        self.skipped += len(accepted) - sum(accepted)
        logger.info(
            f"Trained on {self.records} records ({self.skipped} skipped), "
            f"{len(self.chain)} contexts"
        )
        return self

    def generate_raw(self, rng: Optional[random.Random] = None) -> str:
        """
        Generate one marker-wrapped string, e.g. '^Anna$'.

        Raises:
            NotFoundError: If generation drifts into an untrained context
            NameTooLongError: If the configured ``max_length`` is exceeded
        """
        order = self.order
        max_length = self.config.max_length
        text = self.start
        for _ in range(1, order):
            text += self.chain.generate(text, rng)
        while True:
            symbol = self.chain.generate(text[-order:], rng)
            if symbol == self.end:
                return text + symbol
            text += symbol
            if max_length and len(text) - len(self.start) > max_length:
                raise NameTooLongError(f"Generated text exceeded max_length={max_length}")

    def generate(self, rng: Optional[random.Random] = None) -> str:
        """Generate one formatted name (markers stripped)."""
        text = self.generate_raw(rng)
        return format_name(text[len(self.start):-len(self.end)])

    def generate_batch(self,
                       count: int,
                       novel_only: bool = False,
                       unique: bool = False,
                       rng: Optional[random.Random] = None) -> list[str]:
        """
        Generate up to ``count`` names.

        Failed strings (untrained context, too long, rejected by
        ``novel_only``/``unique``) are retried up to ``max_attempts`` times
        per requested name; the batch may come back short.
        """
        results = []
        seen = set()
        attempts = 0
        max_attempts = count * self.config.max_attempts

        while len(results) < count and attempts < max_attempts:
            attempts += 1
            try:
                name = self.generate(rng)
            except NotFoundError as e:
                logger.warning(f"Aborted name: {e}")
                continue
            except NameTooLongError as e:
                logger.debug(f"Aborted name: {e}")
                continue

            if not name:
                continue
            if novel_only and name in self.corpus:
                continue
            if unique and name in seen:
                continue
            seen.add(name)
            results.append(name)

        if len(results) < count:
            logger.warning(f"Generated {len(results)}/{count} names after {attempts} attempts")
        return results


def train_names(names: Iterable[str],
                config: Optional[NameModelConfig] = None,
                rng: Optional[random.Random] = None) -> NameModel:
    """Convenience: build a NameModel and train it on ``names``."""
    return NameModel(config=config, rng=rng).train(names)


__all__ = [
    "NameModel",
    "NameModelConfig",
    "NameTooLongError",
    "load_corpus",
    "default_corpus_path",
    "format_name",
    "train_names",
]
