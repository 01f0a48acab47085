from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Mapping

from .cards import DECK_SIZE, NUM_CARD_ACTIONS, NUM_DISTINCT_CARDS
from .game_round import MAX_PLAYERS, MIN_PLAYERS, Round, max_round_number
from .observation import information_state_tensor_size, observation_tensor_size
from .state import RewardMode

DEFAULT_PLAYERS = 4
FIRST_ROUND = 1


@dataclass(frozen=True)
class WizardConfig:
    """Parameters of a single Wizard round."""

    players: int = DEFAULT_PLAYERS
    round: int = FIRST_ROUND
    start_player: int = 0
    reward_mode: RewardMode = RewardMode.NORMAL

    def __post_init__(self) -> None:
        if not MIN_PLAYERS <= self.players <= MAX_PLAYERS:
            raise ValueError("Wizard supports 3 to 6 players")
        if not 1 <= self.round <= max_round_number(self.players):
            raise ValueError(
                f"round must be between 1 and {max_round_number(self.players)}"
            )
        if not 0 <= self.start_player < self.players:
            raise ValueError("start_player must be a seat at the table")
        object.__setattr__(self, "reward_mode", RewardMode(self.reward_mode))

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "WizardConfig":
        """Build a config from a loose mapping such as {"players": "5"}."""
        known = {f.name for f in fields(cls)}
        unknown = set(params) - known
        if unknown:
            raise ValueError(f"Unknown game parameters: {sorted(unknown)}")
        return cls(**{key: int(value) for key, value in params.items()})


class WizardGame:
    """Static facts about a configured round, and a factory for its states."""

    def __init__(self, config: WizardConfig | None = None) -> None:
        self.config = config or WizardConfig()

    def num_players(self) -> int:
        return self.config.players

    def num_guess_actions(self) -> int:
        return DECK_SIZE // self.config.players + 1

    def num_distinct_actions(self) -> int:
        return NUM_CARD_ACTIONS + self.num_guess_actions()

    def max_chance_outcomes(self) -> int:
        return NUM_DISTINCT_CARDS

    def min_utility(self) -> float:
        if self.config.reward_mode == RewardMode.BINARY:
            return -1.0
        return -10.0 * self.config.round

    def max_utility(self) -> float:
        if self.config.reward_mode == RewardMode.BINARY:
            return 1.0
        return 20.0 + 10.0 * self.config.round

    def max_game_length(self) -> int:
        n, r = self.config.players, self.config.round
        # hand deals, trump, bids, card plays
        return n * r + 1 + n + n * r

    def information_state_tensor_shape(self) -> list[int]:
        return [information_state_tensor_size(self.config.players, self.config.round)]

    def observation_tensor_shape(self) -> list[int]:
        return [observation_tensor_size(self.config.players)]

    def new_initial_state(self) -> Round:
        return Round(
            self.config.players,
            self.config.round,
            self.config.start_player,
            self.config.reward_mode,
        )
