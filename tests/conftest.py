"""Pytest fixtures for Set tests."""

import pytest
from random import Random

from core.cards import Card, Color, Count, Shading, Shape, full_deck
from core.game import ManualScheduler, SetGame
from core.rules import SetRules


class UnshuffledRandom(Random):
    """Leaves decks in product order, so the opening table is known."""

    def shuffle(self, x, *args, **kwargs):
        pass


class CapSetFirstRandom(Random):
    """
    Moves the 16 cards whose attributes all take one of their first two
    values to the front. No three of them form a set.
    """

    def shuffle(self, x, *args, **kwargs):
        x.sort(key=lambda card: any(_value_index(v) == 2 for v in card.attributes))


def _value_index(value) -> int:
    return list(type(value)).index(value)


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return Random(42)


@pytest.fixture
def deck():
    """All 81 cards in product order."""
    return full_deck()


@pytest.fixture
def scheduler():
    """Manual clock for deferred match resolution."""
    return ManualScheduler()


@pytest.fixture
def rules():
    """Default table rules."""
    return SetRules()


@pytest.fixture
def game(rng, scheduler, rules):
    """A started game on a shuffled deck."""
    return SetGame(rules=rules, rng=rng, scheduler=scheduler)


@pytest.fixture
def ordered_game(scheduler, rules):
    """A started game dealt from an unshuffled deck."""
    return SetGame(rules=rules, rng=UnshuffledRandom(), scheduler=scheduler)


@pytest.fixture
def capset_game(scheduler, rules):
    """A started game whose opening table holds no set."""
    return SetGame(rules=rules, rng=CapSetFirstRandom(), scheduler=scheduler)


@pytest.fixture
def valid_triple():
    """Color all different, shape and shading all same, count all different."""
    return (
        Card(Color.RED, Shape.OVAL, Count.ONE, Shading.SOLID),
        Card(Color.GREEN, Shape.OVAL, Count.TWO, Shading.SOLID),
        Card(Color.PURPLE, Shape.OVAL, Count.THREE, Shading.SOLID),
    )


@pytest.fixture
def invalid_triple():
    """Two cards share a color, the third differs."""
    return (
        Card(Color.RED, Shape.OVAL, Count.ONE, Shading.SOLID),
        Card(Color.RED, Shape.OVAL, Count.TWO, Shading.SOLID),
        Card(Color.GREEN, Shape.OVAL, Count.THREE, Shading.SOLID),
    )


@pytest.fixture
def make_ordered_game(scheduler):
    """Build unshuffled games with custom rules."""

    def _make(rules: SetRules) -> SetGame:
        return SetGame(rules=rules, rng=UnshuffledRandom(), scheduler=scheduler)

    return _make
