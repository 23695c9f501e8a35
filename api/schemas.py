"""Pydantic schemas for API requests and responses."""

from pydantic import BaseModel, Field
from typing import Literal

from core.cards import Card
from core.game.state import GameState
from core.sets import count_sets


class SelectRequest(BaseModel):
    """Request to toggle a table card."""

    index: int = Field(..., ge=0, description="Table index of the card")


class CardResponse(BaseModel):
    """Card representation."""

    color: str
    shape: str
    count: int
    shading: str
    label: str

    @classmethod
    def from_card(cls, card: Card) -> "CardResponse":
        return cls(
            color=card.color.value,
            shape=card.shape.value,
            count=card.count.value,
            shading=card.shading.value,
            label=str(card),
        )


class GameStateResponse(BaseModel):
    """Current game state."""

    phase: str
    table: list[CardResponse]
    selected_indices: list[int]
    last_outcome: Literal["unknown", "valid", "invalid"]
    sets_found: int
    sets_on_table: int
    cards_remaining: int
    game_over: bool
    last_matched: list[CardResponse]
    can_deal: bool
    version: int

    @classmethod
    def from_state(cls, state: GameState, can_deal: bool) -> "GameStateResponse":
        return cls(
            phase=state.phase.name,
            table=[CardResponse.from_card(c) for c in state.table],
            selected_indices=list(state.selected_indices),
            last_outcome=str(state.last_outcome),  # type: ignore[arg-type]
            sets_found=state.sets_found,
            sets_on_table=count_sets(state.table),
            cards_remaining=state.remaining_cards,
            game_over=state.game_over,
            last_matched=[CardResponse.from_card(c) for c in state.last_matched],
            can_deal=can_deal,
            version=state.version,
        )


class HintResponse(BaseModel):
    """One valid triple on the table, if any."""

    found: bool
    indices: list[int] = Field(default_factory=list)
    cards: list[CardResponse] = Field(default_factory=list)
