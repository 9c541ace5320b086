#!/usr/bin/env python3
"""
Engine Errors
=============
Typed failures raised by the Markov chain engine.
"""


class ChainError(Exception):
    """Base class for Markov chain errors."""


class NotFoundError(ChainError, LookupError):
    """Raised when a context was never observed during training."""

    def __init__(self, context):
        self.context = context
        super().__init__(f"Context not in chain: {context!r}")


class EmptyDistributionError(ChainError, ValueError):
    """Raised when a sampler is built from counts with no mass."""


__all__ = [
    "ChainError",
    "NotFoundError",
    "EmptyDistributionError",
]
