"""Abstract quote provider interface.

The batch scheduler only needs ``fetch``; tests swap in in-memory
providers that count calls and concurrency.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from core.models import AttributeKind


class QuoteProvider(ABC):
    """Abstract interface for resolving one attribute of one ticker."""

    @property
    def name(self) -> str:
        return type(self).__name__

    @abstractmethod
    async def fetch(self, ticker: str, kind: AttributeKind) -> float:
        """Resolve ``kind`` for ``ticker``.

        Returns: the value, or 0.0 when no data could be obtained.
        Must not raise for per-ticker failures.
        """
        ...
