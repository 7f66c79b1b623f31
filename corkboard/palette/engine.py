"""
FILE: corkboard/palette/engine.py
PURPOSE: Ranks commands, cards and boards for the command palette query
EXPORTS:
  - PaletteResults (dataclass)
  - CommandPaletteState - query plus one selectable list per result set
  - CommandPaletteEngine
      search(query, rank_cards, rank_boards) -> PaletteResults
      refresh(state, rank_cards, rank_boards, focus) -> PaletteResults
  - allot_rows(lengths, budget, min_rows) -> List[int]
DEPENDENCIES:
  - corkboard.palette.ngram (NGramIndex)
  - corkboard.nav.selection (SelectableList)
NOTES:
  - Commands come from a bigram index over lowercased labels; an empty query
    or a query matching nothing shows the whole vocabulary
  - Card/board ranking is supplied by the caller and only runs once the
    query is at least PALETTE_MIN_QUERY_LENGTH characters
"""

from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional, Sequence

from ..core.constants import (
    PALETTE_MIN_QUERY_LENGTH,
    PALETTE_MIN_ROWS,
    PALETTE_NGRAM_ARITY,
    PALETTE_SIMILARITY_THRESHOLD,
)
from ..core.models import SearchHit
from ..nav.focus import Focus
from ..nav.selection import SelectableList
from .commands import PaletteCommand
from .ngram import NGramIndex

Ranker = Callable[[str], List[SearchHit]]


@dataclass
class PaletteResults:
    commands: List[PaletteCommand] = field(default_factory=list)
    cards: List[SearchHit] = field(default_factory=list)
    boards: List[SearchHit] = field(default_factory=list)


class CommandPaletteState:
    """What the user typed and where each list's cursor sits."""

    def __init__(self):
        self.query = ""
        self.commands: SelectableList[PaletteCommand] = SelectableList()
        self.cards: SelectableList[SearchHit] = SelectableList()
        self.boards: SelectableList[SearchHit] = SelectableList()

    def list_for(self, focus: Optional[Focus]) -> Optional[SelectableList]:
        return {
            Focus.COMMAND_PALETTE_COMMAND: self.commands,
            Focus.COMMAND_PALETTE_CARD: self.cards,
            Focus.COMMAND_PALETTE_BOARD: self.boards,
        }.get(focus)

    def reset(self) -> None:
        self.__init__()


def allot_rows(lengths: Sequence[int], budget: int, min_rows: int = PALETTE_MIN_ROWS) -> List[int]:
    """
    Split a vertical row budget between result lists.

    Every list gets min_rows (shrunk evenly if the budget can't cover that),
    then leftover rows go to lists with more results, in list order, until
    the budget is spent.

    Example:
        >>> allot_rows([12, 5, 3], budget=12)
        [8, 2, 2]
    """
    if not lengths or budget <= 0:
        return [0] * len(lengths)

    floor = min(min_rows, budget // len(lengths))
    rows = [floor] * len(lengths)
    remaining = budget - floor * len(lengths)
    for i, length in enumerate(lengths):
        extra = min(max(length - floor, 0), remaining)
        rows[i] += extra
        remaining -= extra
    return rows


class CommandPaletteEngine:
    def __init__(
        self,
        commands: Iterable[PaletteCommand] = tuple(PaletteCommand),
        threshold: float = PALETTE_SIMILARITY_THRESHOLD,
        min_query_length: int = PALETTE_MIN_QUERY_LENGTH,
    ):
        self.threshold = threshold
        self.min_query_length = min_query_length
        self._index: NGramIndex[PaletteCommand] = NGramIndex(arity=PALETTE_NGRAM_ARITY)
        for command in commands:
            self._index.add(command.label, command)

    @property
    def vocabulary(self) -> List[PaletteCommand]:
        return self._index.values()

    def search_commands(self, query: str) -> List[PaletteCommand]:
        if not query.strip():
            return self.vocabulary
        matches = [command for command, _ in self._index.search(query, self.threshold)]
        return matches or self.vocabulary

    def search(self, query: str, rank_cards: Ranker, rank_boards: Ranker) -> PaletteResults:
        results = PaletteResults(commands=self.search_commands(query))
        if len(query) >= self.min_query_length:
            results.cards = list(rank_cards(query))
            results.boards = list(rank_boards(query))
        return results

    def refresh(
        self,
        state: CommandPaletteState,
        rank_cards: Ranker,
        rank_boards: Ranker,
        focus: Optional[Focus] = None,
    ) -> PaletteResults:
        """Re-rank for state.query and clear cursors that now point past the end."""
        results = self.search(state.query, rank_cards, rank_boards)
        state.commands.set_items(results.commands, focused=focus is Focus.COMMAND_PALETTE_COMMAND)
        state.cards.set_items(results.cards, focused=focus is Focus.COMMAND_PALETTE_CARD)
        state.boards.set_items(results.boards, focused=focus is Focus.COMMAND_PALETTE_BOARD)
        return results
