#!/usr/bin/env python3
"""
namechain - Markov Chain Name Generator
=======================================

A fixed-order Markov chain over arbitrary hashable symbols, plus a
character-level driver that learns from a list of names and samples new,
plausible ones.

Quick Start
-----------
    from namechain import NameModel, load_corpus, default_corpus_path

    model = NameModel().train(load_corpus(default_corpus_path()))
    names = model.generate_batch(10)

    # Or use the engine directly
    from namechain import MarkovChain

    chain = MarkovChain(rng=random.Random(7))
    chain.update("^ab", "c")
    chain.generate("^ab")

Modules
-------
    namechain.chain    - MarkovChain, Target, default random source
    namechain.sampler  - WeightedSampler (cumulative counts + bisect)
    namechain.errors   - NotFoundError, EmptyDistributionError
    namechain.names    - NameModel driver, corpus loading
    namechain.settings - app.yaml settings

CLI Usage
---------
    python -m namechain generate -n 20 --seed 42
    python -m namechain inspect --context "^Ja"
    python -m namechain stats
"""

__version__ = "0.1.0"
__author__ = "namechain"

from .errors import ChainError, NotFoundError, EmptyDistributionError
from .sampler import WeightedSampler
from .chain import MarkovChain, Target, default_rng
from .names import (
    NameModel,
    NameModelConfig,
    NameTooLongError,
    load_corpus,
    default_corpus_path,
    format_name,
    train_names,
)
from .settings import get_setting, load_app_config

__all__ = [
    '__version__',
    # Engine
    'MarkovChain',
    'Target',
    'WeightedSampler',
    'default_rng',
    # Errors
    'ChainError',
    'NotFoundError',
    'EmptyDistributionError',
    'NameTooLongError',
    # Driver
    'NameModel',
    'NameModelConfig',
    'load_corpus',
    'default_corpus_path',
    'format_name',
    'train_names',
    # Settings
    'get_setting',
    'load_app_config',
]
