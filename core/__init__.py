"""Core Set engine - 100% UI-agnostic."""

from core.cards import Card, Color, Count, Deck, Shading, Shape, full_deck, generate_deck
from core.rules import SetRules
from core.sets import find_all_sets, find_valid_set, has_valid_set, is_valid_set

__all__ = [
    "Card",
    "Color",
    "Count",
    "Deck",
    "Shading",
    "Shape",
    "full_deck",
    "generate_deck",
    "SetRules",
    "find_all_sets",
    "find_valid_set",
    "has_valid_set",
    "is_valid_set",
]
