"""Set-validity predicate and table search."""

from typing import Hashable, Iterator, Sequence

from core.cards import Card

Triple = tuple[Card, Card, Card]


def all_same(a: Hashable, b: Hashable, c: Hashable) -> bool:
    """Check if three attribute values are identical."""
    return a == b == c


def all_different(a: Hashable, b: Hashable, c: Hashable) -> bool:
    """Check if three attribute values are pairwise distinct."""
    return a != b and b != c and a != c


def is_valid_attribute(a: Hashable, b: Hashable, c: Hashable) -> bool:
    """An attribute passes when its values are all the same or all different."""
    return all_same(a, b, c) or all_different(a, b, c)


def is_valid_set(card1: Card, card2: Card, card3: Card) -> bool:
    """
    Check if three cards form a valid set.

    For each of the four attributes, the values across the three cards must be
    either all the same or all different. Any attribute where exactly two
    cards agree invalidates the set.
    """
    return all(
        is_valid_attribute(a, b, c)
        for a, b, c in zip(card1.attributes, card2.attributes, card3.attributes)
    )


def iter_valid_sets(cards: Sequence[Card]) -> Iterator[Triple]:
    """Yield every valid triple, scanning indices i < j < k in order."""
    n = len(cards)
    for i in range(n - 2):
        for j in range(i + 1, n - 1):
            for k in range(j + 1, n):
                if is_valid_set(cards[i], cards[j], cards[k]):
                    yield (cards[i], cards[j], cards[k])


def find_valid_set(cards: Sequence[Card]) -> Triple | None:
    """Return the first valid triple in index order, or None."""
    return next(iter_valid_sets(cards), None)


def has_valid_set(cards: Sequence[Card]) -> bool:
    """Check if any valid triple exists among the cards."""
    return find_valid_set(cards) is not None


def find_all_sets(cards: Sequence[Card]) -> list[Triple]:
    """Return every valid triple among the cards."""
    return list(iter_valid_sets(cards))


def count_sets(cards: Sequence[Card]) -> int:
    """Return the number of valid triples among the cards."""
    return sum(1 for _ in iter_valid_sets(cards))
