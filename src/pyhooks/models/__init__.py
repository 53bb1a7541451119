"""Public models for pyhooks."""

from pyhooks.models.fetch import FetchState, FetchTarget

__all__ = [
    "FetchState",
    "FetchTarget",
]
