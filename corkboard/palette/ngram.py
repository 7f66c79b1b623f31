"""
FILE: corkboard/palette/ngram.py
PURPOSE: Character n-gram similarity index over a fixed vocabulary
EXPORTS:
  - ngrams(text, arity) -> Counter
  - similarity(a, b, warp) -> float
  - NGramIndex
NOTES:
  - Keys are lowercased and padded with arity-1 spaces on both sides, so
    word starts and ends form their own grams
  - Similarity is the warped ratio of shared grams to all grams:
        (all**warp - diff**warp) / all**warp,  diff = all - same
    warp=1 is plain Jaccard-style overlap; larger warps favour partial matches
  - Only items sharing at least one gram with the query are scored
"""

from collections import Counter, defaultdict
from typing import Dict, Generic, List, Set, Tuple, TypeVar

T = TypeVar("T")


def ngrams(text: str, arity: int = 2) -> Counter:
    pad = " " * (arity - 1)
    padded = f"{pad}{text.lower()}{pad}"
    return Counter(padded[i:i + arity] for i in range(len(padded) - arity + 1))


def _score(query: Counter, item: Counter, warp: float) -> float:
    same = sum((query & item).values())
    total = sum(query.values()) + sum(item.values()) - same
    if total == 0:
        return 0.0
    diff = total - same
    return (total ** warp - diff ** warp) / total ** warp


def similarity(a: str, b: str, arity: int = 2, warp: float = 2.0) -> float:
    return _score(ngrams(a, arity), ngrams(b, arity), warp)


class NGramIndex(Generic[T]):
    """
    Fuzzy lookup table: add (key, value) pairs, then search() by similarity.

    Example:
        >>> index = NGramIndex()
        >>> index.add("New Board", "new_board")
        >>> index.search("new bo", threshold=0.2)[0][0]
        'new_board'
    """

    def __init__(self, arity: int = 2, warp: float = 2.0):
        self.arity = arity
        self.warp = warp
        self._entries: List[Tuple[str, T, Counter]] = []
        self._postings: Dict[str, Set[int]] = defaultdict(set)

    def add(self, key: str, value: T) -> None:
        grams = ngrams(key, self.arity)
        position = len(self._entries)
        self._entries.append((key, value, grams))
        for gram in grams:
            self._postings[gram].add(position)

    def search(self, query: str, threshold: float = 0.0) -> List[Tuple[T, float]]:
        """
        Values whose key scores at least threshold, best first.

        Equal scores keep insertion order.
        """
        grams = ngrams(query, self.arity)
        candidates: Set[int] = set()
        for gram in grams:
            candidates |= self._postings.get(gram, set())

        scored = []
        for position in sorted(candidates):
            _, value, item_grams = self._entries[position]
            score = _score(grams, item_grams, self.warp)
            if score >= threshold:
                scored.append((position, value, score))

        scored.sort(key=lambda entry: (-entry[2], entry[0]))
        return [(value, score) for _, value, score in scored]

    def values(self) -> List[T]:
        return [value for _, value, _ in self._entries]

    def __len__(self) -> int:
        return len(self._entries)
