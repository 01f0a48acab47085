from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Union
import enum

from .cards import Card


class Phase(enum.Enum):
    DEALING = "dealing"
    BIDDING = "bidding"
    TRICKING = "tricking"


class RewardMode(enum.IntEnum):
    NORMAL = 0
    BINARY = 1


@dataclass
class DealingPhase:
    # next seat to receive a card; the trump is dealt after the hands
    deal_to: int

    @property
    def phase(self) -> Phase:
        return Phase.DEALING


@dataclass
class BiddingPhase:
    turn: int
    # seat whose bid closes the auction
    stop_turn: int

    @property
    def phase(self) -> Phase:
        return Phase.BIDDING


@dataclass
class TrickingPhase:
    turn: int
    # seat whose card completes the current trick
    stop_turn: int
    leader: int
    tricks_resolved: int = 0

    @property
    def phase(self) -> Phase:
        return Phase.TRICKING


PhaseState = Union[DealingPhase, BiddingPhase, TrickingPhase]


@dataclass
class PlayerState:
    id: int
    name: str
    score: int = 0
    current_bid: Optional[int] = None
    tricks_won_this_round: int = 0


@dataclass
class RoundRecord:
    """Public summary of a finished round, kept by the GameEngine."""

    round_number: int
    start_player: int
    trump_card: Optional[Card]
    bids: List[int]
    tricks_won: List[int]
    deltas: List[float]


@dataclass
class GameState:
    players: List[PlayerState]
    rounds: List[RoundRecord] = field(default_factory=list)
    current_round_index: int = 0

    @property
    def num_players(self) -> int:
        return len(self.players)
