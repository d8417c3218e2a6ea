from __future__ import annotations
from typing import Any, Dict, Iterable, Set
from hllcount.lib.abstractsketch import AbstractSketch
from hllcount.lib.hashing import encode_element


class ExactCounter(AbstractSketch):
    """Exact distinct counter backed by a set.

    Memory grows with the number of distinct elements; useful as a
    reference when measuring HyperLogLog error. Elements are keyed by the
    bytes a sketch would hash, so 1 and 1.0 are distinct here too.
    """

    def __init__(self):
        """Initialize exact counter."""
        super().__init__()
        self.elements: Set[bytes] = set()

    def insert(self, element: Any) -> None:
        """Add an element to the counter."""
        self.elements.add(encode_element(element))

    def add_batch(self, items: Iterable[Any]) -> None:
        """Add multiple elements to the counter.

        Args:
            items: Iterable of elements
        """
        self.elements.update(encode_element(item) for item in items)

    def estimate_cardinality(self) -> float:
        """Return exact cardinality."""
        return float(len(self.elements))

    def merge(self, other: 'ExactCounter') -> None:
        """Merge another counter into this one."""
        if not isinstance(other, ExactCounter):
            raise TypeError("Can only merge with another ExactCounter")
        self.elements.update(other.elements)

    def similarity_values(self, other: 'AbstractSketch') -> Dict[str, float]:
        """Compute exact Jaccard similarity.

        Returns:
            Dictionary containing 'jaccard_similarity'
        """
        if not isinstance(other, ExactCounter):
            raise ValueError("Can only compare with another ExactCounter")

        union = len(self.elements | other.elements)
        if union == 0:
            return {'jaccard_similarity': 0.0}
        intersection = len(self.elements & other.elements)
        return {'jaccard_similarity': intersection / union}

    def __len__(self) -> int:
        return len(self.elements)
