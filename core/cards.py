"""Card attributes, Card, and Deck - immutable card representations."""

from dataclasses import dataclass
from enum import Enum
from itertools import product
from random import Random
from typing import Iterator


class Color(Enum):
    """Card colors."""

    RED = "red"
    GREEN = "green"
    PURPLE = "purple"

    def __str__(self) -> str:
        return self.value


class Shape(Enum):
    """Card shapes."""

    OVAL = "oval"
    DIAMOND = "diamond"
    SQUIGGLE = "squiggle"

    def __str__(self) -> str:
        return self.value


class Count(Enum):
    """Number of shapes printed on a card."""

    ONE = 1
    TWO = 2
    THREE = 3

    def __str__(self) -> str:
        return str(self.value)


class Shading(Enum):
    """Card shadings."""

    SOLID = "solid"
    STRIPED = "striped"
    OPEN = "open"

    def __str__(self) -> str:
        return self.value


ATTRIBUTE_NAMES = ("color", "shape", "count", "shading")

_ATTRIBUTE_TYPES: dict[str, type[Enum]] = {
    "color": Color,
    "shape": Shape,
    "count": Count,
    "shading": Shading,
}

# Words accepted by Card.from_string, mapped to (attribute, value)
_WORDS: dict[str, tuple[str, Enum]] = {}
for _name, _enum in _ATTRIBUTE_TYPES.items():
    for _member in _enum:
        _WORDS[_member.name.lower()] = (_name, _member)
        _WORDS[str(_member.value).lower()] = (_name, _member)
for _member in Shape:
    _WORDS[f"{_member.value}s"] = ("shape", _member)


@dataclass(frozen=True, slots=True)
class Card:
    """Immutable Set card."""

    color: Color
    shape: Shape
    count: Count
    shading: Shading

    def __str__(self) -> str:
        return f"{self.count} {self.color} {self.shape} ({self.shading})"

    def __repr__(self) -> str:
        return (
            f"Card({self.color.name}, {self.shape.name}, "
            f"{self.count.name}, {self.shading.name})"
        )

    @property
    def attributes(self) -> tuple[Color, Shape, Count, Shading]:
        """Return the attribute values in (color, shape, count, shading) order."""
        return (self.color, self.shape, self.count, self.shading)

    @classmethod
    def from_string(cls, s: str) -> "Card":
        """
        Create a card from a string like '2 red oval striped'.

        Words may appear in any order, optional parentheses are ignored, and
        the count may be a digit or a word ('two').
        """
        words = s.replace("(", " ").replace(")", " ").lower().split()
        found: dict[str, Enum] = {}
        for word in words:
            if word not in _WORDS:
                raise ValueError(f"Invalid card attribute: {word}")
            name, value = _WORDS[word]
            if name in found:
                raise ValueError(f"Duplicate {name} in card string: {s}")
            found[name] = value

        missing = [name for name in ATTRIBUTE_NAMES if name not in found]
        if missing:
            raise ValueError(f"Card string missing {', '.join(missing)}: {s}")

        return cls(**found)  # type: ignore[arg-type]


def full_deck() -> list[Card]:
    """Return all 81 cards in attribute product order."""
    return [
        Card(color, shape, count, shading)
        for color, shape, count, shading in product(Color, Shape, Count, Shading)
    ]


def generate_deck(rng: Random | None = None) -> list[Card]:
    """Return the 81 cards uniformly shuffled (Fisher-Yates via Random.shuffle)."""
    cards = full_deck()
    (rng or Random()).shuffle(cards)
    return cards


class Deck:
    """The 81-card Set deck, dealt from the front."""

    def __init__(self, rng: Random | None = None) -> None:
        """Initialize a new shuffled deck."""
        self._rng = rng or Random()
        self._cards: list[Card] = []
        self.restock()

    def restock(self) -> None:
        """Put all 81 cards back and shuffle them."""
        self._cards = generate_deck(self._rng)

    def draw(self, n: int = 1) -> list[Card]:
        """Draw up to n cards from the front of the deck."""
        drawn = self._cards[:n]
        del self._cards[:n]
        return drawn

    def __len__(self) -> int:
        return len(self._cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self._cards)

    @property
    def cards(self) -> tuple[Card, ...]:
        """Return the undealt cards in deal order."""
        return tuple(self._cards)

    @property
    def cards_remaining(self) -> int:
        """Return the number of cards remaining."""
        return len(self._cards)

    @property
    def is_empty(self) -> bool:
        """Check if every card has been dealt."""
        return not self._cards
