"""Set table rules and policy constants."""

from dataclasses import dataclass
from typing import Literal

ReselectPolicy = Literal["ignore", "restart"]


@dataclass(frozen=True)
class SetRules:
    """
    Table policy configuration.

    None of these values are derived from the card rules; they are the
    knobs a table can tune.
    """

    # Cards dealt at game start
    table_size: int = 12

    # Cards drawn per deal and per replacement after a match
    deal_size: int = 3

    # Once the table holds this many cards, dealing is refused while a set exists
    deal_gate_table_size: int = 15

    # Seconds a valid selection stays visible before it is resolved
    resolve_delay: float = 1.0

    # What a tap does while a resolved 3-card selection is displayed:
    # "ignore" drops the tap, "restart" clears the old triple and selects the card
    reselect_policy: ReselectPolicy = "ignore"

    def __post_init__(self) -> None:
        """Validate rule combinations."""
        if self.table_size < 3 or self.table_size > 81:
            raise ValueError("table_size must be between 3 and 81")
        if self.deal_size < 1:
            raise ValueError("deal_size must be at least 1")
        if self.deal_gate_table_size < self.table_size:
            raise ValueError("deal_gate_table_size must be at least table_size")
        if self.resolve_delay < 0:
            raise ValueError("resolve_delay cannot be negative")
        if self.reselect_policy not in ("ignore", "restart"):
            raise ValueError(f"Unknown reselect_policy: {self.reselect_policy}")

    @classmethod
    def classic(cls) -> "SetRules":
        """Standard table: 12 cards, one second to admire a set."""
        return cls()

    @classmethod
    def instant(cls) -> "SetRules":
        """Resolve matches without a display delay."""
        return cls(resolve_delay=0.0)

    @classmethod
    def forgiving(cls) -> "SetRules":
        """A new tap after a resolved triple starts a fresh selection."""
        return cls(reselect_policy="restart")
