from __future__ import annotations

import copy
import dataclasses
import logging
import random
from typing import List, Optional, Tuple

from .cards import (
    DECK_SIZE,
    JESTER_INDEX,
    NUM_CARD_ACTIONS,
    NUM_DISTINCT_CARDS,
    Card,
    Deck,
    Suit,
)
from .errors import IllegalAction
from .rules import (
    binary_rewards,
    led_suit,
    legal_bids,
    legal_cards,
    score_round,
    trump_suit_of,
    winning_position,
)
from .state import (
    BiddingPhase,
    DealingPhase,
    Phase,
    PhaseState,
    RewardMode,
    TrickingPhase,
)

logger = logging.getLogger(__name__)

MIN_PLAYERS = 3
MAX_PLAYERS = 6

CHANCE_PLAYER_ID = -1
TERMINAL_PLAYER_ID = -4


def max_round_number(num_players: int) -> int:
    return DECK_SIZE // num_players


class Round:
    """
    One round of Wizard: deal, bid, play every trick, score.

    The round is driven through `apply_action`, which accepts chance outcomes
    (card indices) while dealing, bids while bidding and card actions
    (`num_guess_actions + card index`) while playing. Every action is checked
    against the current legal set before anything is changed, so a rejected
    action leaves the round exactly as it was.
    """

    def __init__(
        self,
        num_players: int,
        round_number: int,
        start_player: int = 0,
        reward_mode: RewardMode = RewardMode.NORMAL,
    ) -> None:
        if not MIN_PLAYERS <= num_players <= MAX_PLAYERS:
            raise ValueError("Wizard supports 3 to 6 players")
        if not 1 <= round_number <= max_round_number(num_players):
            raise ValueError(
                f"Round number must be between 1 and {max_round_number(num_players)} "
                f"for {num_players} players"
            )
        if not 0 <= start_player < num_players:
            raise ValueError("start_player must be a seat at the table")

        self._num_players = num_players
        self._round_number = round_number
        self._start_player = start_player
        self._reward_mode = RewardMode(reward_mode)

        self._deck = Deck()
        self._hands: List[List[Card]] = [[] for _ in range(num_players)]
        self._trump: Optional[Card] = None
        self._bids: List[int] = [0] * num_players
        self._tricks_won: List[int] = [0] * num_players
        self._cards_played: List[Card] = []
        self._played_by: List[int] = []
        self._cards_on_table: List[Card] = []
        self._played_by_on_table: List[int] = []
        self._cards_dealt = 0
        self._final = False
        self._history: List[Tuple[int, int]] = []
        self._state: PhaseState = DealingPhase(deal_to=start_player)

        self.num_guess_actions = DECK_SIZE // num_players + 1
        self.num_actions = self.num_guess_actions + NUM_CARD_ACTIONS

    # -------------------------------------------------------------------------
    # Read-only accessors
    # -------------------------------------------------------------------------

    @property
    def num_players(self) -> int:
        return self._num_players

    @property
    def round_number(self) -> int:
        return self._round_number

    @property
    def start_player(self) -> int:
        return self._start_player

    @property
    def reward_mode(self) -> RewardMode:
        return self._reward_mode

    @property
    def phase(self) -> Phase:
        return self._state.phase

    @property
    def phase_state(self) -> PhaseState:
        return dataclasses.replace(self._state)

    @property
    def turn(self) -> int:
        if isinstance(self._state, DealingPhase):
            return CHANCE_PLAYER_ID
        return self._state.turn

    @property
    def stop_turn(self) -> Optional[int]:
        if isinstance(self._state, DealingPhase):
            return None
        return self._state.stop_turn

    @property
    def hands(self) -> List[List[Card]]:
        return [list(hand) for hand in self._hands]

    def hand(self, player: int) -> List[Card]:
        return list(self._hands[player])

    @property
    def deck(self) -> Deck:
        return self._deck.copy()

    @property
    def trump(self) -> Optional[Card]:
        return self._trump

    @property
    def trump_suit(self) -> Optional[Suit]:
        return trump_suit_of(self._trump)

    @property
    def bids(self) -> List[int]:
        return list(self._bids)

    @property
    def tricks_won(self) -> List[int]:
        return list(self._tricks_won)

    @property
    def cards_played(self) -> List[Card]:
        return list(self._cards_played)

    @property
    def played_by(self) -> List[int]:
        return list(self._played_by)

    @property
    def cards_on_table(self) -> List[Card]:
        return list(self._cards_on_table)

    @property
    def played_by_on_table(self) -> List[int]:
        return list(self._played_by_on_table)

    @property
    def cards_dealt(self) -> int:
        return self._cards_dealt

    @property
    def history(self) -> List[Tuple[int, int]]:
        return list(self._history)

    # -------------------------------------------------------------------------
    # Driver interface
    # -------------------------------------------------------------------------

    def current_player(self) -> int:
        if self._final:
            return TERMINAL_PLAYER_ID
        return self.turn

    def is_chance_node(self) -> bool:
        return not self._final and isinstance(self._state, DealingPhase)

    def is_terminal(self) -> bool:
        return self._final

    def legal_actions(self, player: Optional[int] = None) -> List[int]:
        if self._final:
            return []
        if player is None:
            player = self.turn
        if player != self.turn:
            return []

        if isinstance(self._state, DealingPhase):
            return [action for action, _prob in self.chance_outcomes()]
        if isinstance(self._state, BiddingPhase):
            return legal_bids(
                self._round_number,
                self._bids,
                is_last_bidder=player == self._state.stop_turn,
            )
        if len(self._cards_on_table) == self._num_players:
            return []
        cards = legal_cards(self._hands[player], led_suit(self._cards_on_table))
        return [self.num_guess_actions + card.to_index() for card in cards]

    def chance_outcomes(self) -> List[Tuple[int, float]]:
        if not self.is_chance_node():
            raise ValueError("Chance outcomes only exist while cards are dealt")
        total = self._deck.total
        if total == 0:
            # Only in the largest round: every card is in a hand, no trump.
            return [(JESTER_INDEX, 1.0)]
        return [
            (index, count / total)
            for index, count in enumerate(self._deck.remaining_counts())
            if count > 0
        ]

    def apply_action(self, action: int) -> None:
        if self._final:
            raise IllegalAction(action, "the round is already over")
        actor = self.current_player()

        if isinstance(self._state, DealingPhase):
            self.deal_card(action)
        elif isinstance(self._state, BiddingPhase):
            self.guess_tricks(action)
        elif self.play_card(action):
            self.update_tricks()

        self._history.append((actor, action))

    def returns(self) -> List[float]:
        return self.rewards(self._reward_mode)

    def rewards(self, mode: Optional[RewardMode] = None) -> List[float]:
        """Per-player payoff; all zeros until the last trick is resolved."""
        if not self._final:
            return [0.0] * self._num_players
        scores = [float(s) for s in score_round(self._bids, self._tricks_won)]
        if mode is None:
            mode = self._reward_mode
        if mode == RewardMode.BINARY:
            return binary_rewards(scores)
        return scores

    def clone(self) -> "Round":
        return copy.deepcopy(self)

    def resample(
        self, observer: int, rng: Optional[random.Random] = None
    ) -> "Round":
        """Redeal the cards hidden from `observer` and replay the public history."""
        from .resample import resample_round

        return resample_round(self, observer, rng)

    def action_to_string(self, action: int) -> str:
        if isinstance(self._state, DealingPhase):
            return str(Card.from_index(action))
        if isinstance(self._state, BiddingPhase):
            return str(action)
        return str(Card.from_index(action - self.num_guess_actions))

    def __str__(self) -> str:
        return ",".join(f"({player}, {action})" for player, action in self._history)

    # -------------------------------------------------------------------------
    # Phase transitions
    # -------------------------------------------------------------------------

    def deal_card(self, index: int) -> bool:
        """
        Deal card `index` to the next seat, or turn it up as trump once every
        hand is full. Returns True when the trump was set and bidding starts.
        """
        state = self._state
        if not isinstance(state, DealingPhase):
            raise IllegalAction(index, "cards are only dealt before bidding")
        if not 0 <= index < NUM_DISTINCT_CARDS:
            raise IllegalAction(index, "not a card index")

        if self._cards_dealt < self._num_players * self._round_number:
            card = self._deck.deal_card(index)
            self._hands[state.deal_to].append(card)
            self._cards_dealt += 1
            state.deal_to = self._next_seat(state.deal_to)
            return False

        if self._deck.total == 0:
            if index != JESTER_INDEX:
                raise IllegalAction(
                    index, "the deck is empty, only the no-trump jester can be turned up"
                )
            self._trump = Card.from_index(JESTER_INDEX)
        else:
            self._trump = self._deck.deal_card(index)
        self._state = BiddingPhase(
            turn=self._start_player,
            stop_turn=self._seat_before(self._start_player),
        )
        return True

    def guess_tricks(self, bid: int) -> bool:
        """Record the bid of the player on turn. Returns True when bidding ends."""
        state = self._state
        if not isinstance(state, BiddingPhase):
            raise IllegalAction(bid, "bids are only accepted while bidding")
        legal = self.legal_actions()
        if bid not in legal:
            raise IllegalAction(bid, f"bid must be one of {legal}")

        self._bids[state.turn] = bid
        if state.turn == state.stop_turn:
            self._state = TrickingPhase(
                turn=self._start_player,
                stop_turn=self._seat_before(self._start_player),
                leader=self._start_player,
            )
            return True
        state.turn = self._next_seat(state.turn)
        return False

    def play_card(self, action: int) -> bool:
        """
        Play the card encoded by `action` for the player on turn.

        Returns True when this card completes the trick; `update_tricks` must
        then be called before the next card is played.
        """
        state = self._state
        if not isinstance(state, TrickingPhase):
            raise IllegalAction(action, "cards are only played after bidding")
        if action not in self.legal_actions():
            card_index = action - self.num_guess_actions
            label = (
                str(Card.from_index(card_index))
                if 0 <= card_index < NUM_DISTINCT_CARDS
                else "<none>"
            )
            raise IllegalAction(
                action, f"card {label} cannot be played by player {state.turn}"
            )

        card = Card.from_index(action - self.num_guess_actions)
        self._hands[state.turn].remove(card)
        self._cards_on_table.append(card)
        self._played_by_on_table.append(state.turn)
        if state.turn == state.stop_turn:
            return True
        state.turn = self._next_seat(state.turn)
        return False

    def update_tricks(self) -> int:
        """Award the completed trick, move it to the history and return the winner."""
        state = self._state
        if (
            not isinstance(state, TrickingPhase)
            or len(self._cards_on_table) != self._num_players
        ):
            raise ValueError("There is no complete trick to resolve")

        position = winning_position(self._cards_on_table, self.trump_suit)
        winner = self._played_by_on_table[position]
        self._tricks_won[winner] += 1
        self._cards_played.extend(self._cards_on_table)
        self._played_by.extend(self._played_by_on_table)
        logger.debug(
            "Trick %d: %s won by player %d with %s",
            state.tricks_resolved + 1,
            " ".join(str(c) for c in self._cards_on_table),
            winner,
            self._cards_on_table[position],
        )
        self._cards_on_table.clear()
        self._played_by_on_table.clear()

        state.tricks_resolved += 1
        state.turn = winner
        state.leader = winner
        state.stop_turn = self._seat_before(winner)
        if state.tricks_resolved >= self._round_number:
            self._final = True
        return winner

    def _next_seat(self, seat: int) -> int:
        return (seat + 1) % self._num_players

    def _seat_before(self, seat: int) -> int:
        return (seat - 1) % self._num_players
