"""Pair deck generation."""

import random
from typing import Optional, Sequence


class InvalidConfiguration(ValueError):
    """Deck cannot be built from the given pool and card count."""


def fisher_yates(items: list, rng: random.Random) -> list:
    """Shuffle ``items`` in place and return it."""
    for i in range(len(items) - 1, 0, -1):
        j = rng.randint(0, i)
        items[i], items[j] = items[j], items[i]
    return items


class PairDeckGenerator:
    """Builds shuffled decks where every chosen symbol appears twice."""

    def __init__(self, symbols: Sequence[str], rng: Optional[random.Random] = None):
        # dict.fromkeys keeps pool order while dropping repeats
        self.symbols = list(dict.fromkeys(symbols))
        self.rng = rng or random.Random()

    def generate(self, cards_amount: int) -> list[str]:
        """
        Generate a deck.

        Args:
            cards_amount: Total number of cards, must be even and positive

        Raises:
            InvalidConfiguration: If the count is odd or the pool is too small
        """
        if cards_amount <= 0 or cards_amount % 2:
            raise InvalidConfiguration(
                f"cards_amount must be a positive even number, got {cards_amount}"
            )

        pairs = cards_amount // 2
        if len(self.symbols) < pairs:
            raise InvalidConfiguration(
                f"Need {pairs} distinct symbols, pool has {len(self.symbols)}"
            )

        chosen = self.rng.sample(self.symbols, pairs)
        deck = [symbol for symbol in chosen for _ in range(2)]
        return fisher_yates(deck, self.rng)
