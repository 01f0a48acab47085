from __future__ import annotations

import itertools
import logging
import random
from collections import Counter
from typing import Dict, List, Optional, Sequence, Set

from .cards import Card, Suit
from .game_round import Round
from .rules import led_suit

logger = logging.getLogger(__name__)

# Suitless cards (Wizards and Jesters) form their own category.
CATEGORIES: List[Optional[Suit]] = [None, *Suit]


def _category(index: int) -> Optional[Suit]:
    return Card.from_index(index).suit


def cards_played_by(round_: Round) -> Dict[int, List[Card]]:
    """Cards each player has put on the table so far, in play order."""
    played: Dict[int, List[Card]] = {p: [] for p in range(round_.num_players)}
    plays = zip(
        round_.played_by + round_.played_by_on_table,
        round_.cards_played + round_.cards_on_table,
    )
    for player, card in plays:
        played[player].append(card)
    return played


def void_suits(round_: Round) -> List[Set[Suit]]:
    """
    Suits each player has shown not to hold: a numbered card of another suit
    was played while that suit had to be followed.
    """
    n = round_.num_players
    voids: List[Set[Suit]] = [set() for _ in range(n)]
    players = round_.played_by + round_.played_by_on_table
    cards = round_.cards_played + round_.cards_on_table
    for start in range(0, len(cards), n):
        trick = cards[start:start + n]
        for offset, card in enumerate(trick):
            suit = led_suit(trick[:offset])
            if suit is not None and card.suit is not None and card.suit != suit:
                voids[players[start + offset]].add(suit)
    return voids


def _allowed(voids: Set[Suit]) -> List[Optional[Suit]]:
    return [c for c in CATEGORIES if c is None or c not in voids]


def _can_fill(
    supply: Counter, demand: Sequence[int], voids: Sequence[Set[Suit]]
) -> bool:
    """Hall's condition: every group of players can be served from the pool."""
    needy = [p for p, d in enumerate(demand) if d > 0]
    for size in range(1, len(needy) + 1):
        for group in itertools.combinations(needy, size):
            categories = set()
            for player in group:
                categories.update(_allowed(voids[player]))
            available = sum(supply[c] for c in categories)
            if sum(demand[p] for p in group) > available:
                return False
    return True


def _draw_hidden_card(
    pool: List[int],
    demand: List[int],
    voids: Sequence[Set[Suit]],
    player: int,
    rng: random.Random,
) -> int:
    supply: Counter = Counter()
    for index, count in enumerate(pool):
        if count:
            supply[_category(index)] += count

    usable = set()
    demand[player] -= 1
    for category in _allowed(voids[player]):
        if supply[category] == 0:
            continue
        supply[category] -= 1
        if _can_fill(supply, demand, voids):
            usable.add(category)
        supply[category] += 1
    demand[player] += 1

    candidates = [
        index for index, count in enumerate(pool)
        if count > 0 and _category(index) in usable
    ]
    if not candidates:
        raise RuntimeError(
            f"No card can be dealt to player {player} consistently with the history"
        )
    return rng.choices(candidates, weights=[pool[i] for i in candidates])[0]


def resample_round(
    round_: Round,
    observer: int,
    rng: Optional[random.Random] = None,
) -> Round:
    """
    Build a new Round that `observer` cannot tell apart from `round_`.

    The observer's own cards, the trump, every bid and every played card are
    replayed as they happened. Cards the observer never saw (the other hands
    and the rest of the deck) are pooled and redealt to the other players:
    a card a player later played is dealt back to that player, and the
    remaining slots are drawn from the pool weighted by remaining counts,
    skipping suits the player has shown to be void in.
    """
    n = round_.num_players
    if not 0 <= observer < n:
        raise ValueError(f"Observer {observer} is not a seat at the table")
    if rng is None:
        rng = random.Random()

    pool = round_.deck.remaining_counts()
    for player, hand in enumerate(round_.hands):
        if player == observer:
            continue
        for card in hand:
            pool[card.to_index()] += 1

    played = cards_played_by(round_)
    voids = void_suits(round_)
    num_deals = round_.cards_dealt
    recipients = [(round_.start_player + i) % n for i in range(num_deals)]

    demand = [0] * n
    for player, dealt in Counter(recipients).items():
        if player != observer:
            demand[player] = dealt - len(played[player])

    clone = Round(n, round_.round_number, round_.start_player, round_.reward_mode)
    redrawn = 0
    for position, (_player, action) in enumerate(round_.history):
        if position >= num_deals:
            clone.apply_action(action)
            continue
        recipient = recipients[position]
        if recipient == observer:
            index = action
        elif played[recipient]:
            index = played[recipient].pop().to_index()
        else:
            index = _draw_hidden_card(pool, demand, voids, recipient, rng)
            pool[index] -= 1
            demand[recipient] -= 1
            redrawn += 1
        clone.apply_action(index)

    logger.debug(
        "Resampled round %d for observer %d: %d hidden cards redrawn",
        round_.round_number,
        observer,
        redrawn,
    )
    return clone
