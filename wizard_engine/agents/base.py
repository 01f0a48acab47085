from __future__ import annotations

from typing import Any, Dict, Protocol, runtime_checkable


@runtime_checkable
class WizardAgent(Protocol):
    """
    A seat at the table, asked for decisions by `GameEngine`.

    Observations are plain dicts built from the round's read-only accessors:
    "game", "player", "trump", "scores", "hand", "bids", "tricks_won" and
    "phase", plus "legal_bids" while bidding or "legal_move_indices",
    "current_trick" and "cards_played" while playing.
    """

    def choose_bid(self, observation: Dict[str, Any]) -> int:
        """Return one of observation["legal_bids"]."""
        ...

    def choose_card(self, observation: Dict[str, Any]) -> int:
        """Return a position in observation["hand"], one of "legal_move_indices"."""
        ...
