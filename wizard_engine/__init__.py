"""Rules engine for a single round of the trick-taking card game Wizard."""

from .cards import Card, CardType, Deck, Outcome, Suit
from .errors import DepletedCard, IllegalAction, InvalidFormat, WizardError
from .game import WizardConfig, WizardGame
from .game_round import CHANCE_PLAYER_ID, TERMINAL_PLAYER_ID, Round
from .resample import resample_round
from .state import Phase, RewardMode

__all__ = [
    "CHANCE_PLAYER_ID",
    "TERMINAL_PLAYER_ID",
    "Card",
    "CardType",
    "Deck",
    "DepletedCard",
    "IllegalAction",
    "InvalidFormat",
    "Outcome",
    "Phase",
    "RewardMode",
    "Round",
    "Suit",
    "WizardConfig",
    "WizardError",
    "WizardGame",
    "resample_round",
]
