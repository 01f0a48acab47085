from __future__ import annotations


class WizardError(Exception):
    """Base class for all rule-engine errors."""


class InvalidFormat(WizardError, ValueError):
    """Raised when a card string or (suit, rank) pair does not describe a card."""


class DepletedCard(WizardError, ValueError):
    """Raised when the deck is asked for a card that has no copies left."""

    def __init__(self, card_index: int, label: str) -> None:
        super().__init__(
            f"Cannot deal card {label} because all of its kind were already dealt"
        )
        self.card_index = card_index


class IllegalAction(WizardError, ValueError):
    """Raised when an action is not in the current legal action set.

    The round is left untouched, so the caller may retry with another action.
    """

    def __init__(self, action: int, reason: str) -> None:
        super().__init__(f"Illegal action {action}: {reason}")
        self.action = action
        self.reason = reason
