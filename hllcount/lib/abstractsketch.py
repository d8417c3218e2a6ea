from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable


class AbstractSketch(ABC):
    """Base class for all distinct-count sketches."""

    @abstractmethod
    def insert(self, element: Any) -> None:
        """Observe one element."""
        pass

    @abstractmethod
    def merge(self, other: 'AbstractSketch') -> None:
        """Fold another sketch of the same kind into this one."""
        pass

    @abstractmethod
    def estimate_cardinality(self) -> float:
        """Return the (approximate) number of distinct elements observed."""
        pass

    @abstractmethod
    def similarity_values(self, other: 'AbstractSketch') -> Dict[str, float]:
        """Estimate similarity with another sketch.

        Returns:
            Dictionary of similarity measures
        """
        pass

    @property
    def estimated_unique_count(self) -> float:
        """Current cardinality estimate."""
        return self.estimate_cardinality()

    def add_string(self, s: str) -> None:
        """Add a string to the sketch."""
        self.insert(s)

    def add_batch(self, items: Iterable[Any]) -> None:
        """Add multiple elements to the sketch.

        Args:
            items: Iterable of elements to add to the sketch
        """
        for item in items:
            self.insert(item)
