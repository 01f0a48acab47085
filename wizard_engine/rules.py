from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from .cards import Card, Outcome, Suit


def led_suit(cards_on_table: Sequence[Card]) -> Optional[Suit]:
    """
    Return the suit players must follow in the current trick.

    The first card that is not a Jester decides. A Wizard (or an empty or
    all-Jester trick) leaves no suit to follow.
    """
    for card in cards_on_table:
        if not card.is_jester:
            return card.suit
    return None


def legal_bids(
    round_number: int,
    bids_so_far: Iterable[int],
    is_last_bidder: bool,
) -> List[int]:
    """
    Bids 0..round_number, except that the last bidder may not make the bids
    add up to the number of tricks (hook rule).
    """
    total = sum(bids_so_far)
    return [
        bid
        for bid in range(round_number + 1)
        if not (is_last_bidder and total + bid == round_number)
    ]


def legal_cards(hand: Sequence[Card], suit_to_follow: Optional[Suit]) -> List[Card]:
    """
    Return the distinct cards of `hand` that may be played, sorted by index.

    - If there is a suit to follow and the hand holds that suit, only cards of
      that suit, Wizards and Jesters are allowed.
    - Otherwise any card is allowed.
    """
    if suit_to_follow is not None and any(c.suit == suit_to_follow for c in hand):
        candidates = [c for c in hand if c.suit in (suit_to_follow, None)]
    else:
        candidates = list(hand)
    return sorted(set(candidates), key=Card.to_index)


def winning_position(cards: Sequence[Card], trump_suit: Optional[Suit]) -> int:
    """
    Return the position in `cards` of the card that takes the trick.

    Cards are folded left to right: a later card only takes over when it
    strictly beats the card currently holding the trick, so the earliest of
    two equal cards (e.g. two Wizards) wins.
    """
    if not cards:
        raise ValueError("Cannot determine winner of an empty trick")
    best = 0
    for position in range(1, len(cards)):
        if cards[best].compare(cards[position], trump_suit) is Outcome.LOSE:
            best = position
    return best


def trump_suit_of(trump_card: Optional[Card]) -> Optional[Suit]:
    """Wizards, Jesters and a missing trump card all mean no trump."""
    if trump_card is None:
        return None
    return trump_card.suit


def score_player(bid: int, tricks_won: int) -> int:
    """
    Wizard scoring:

    - If tricks_won == bid: 20 + 10 * tricks_won
    - Else: −10 * abs(tricks_won − bid)
    """
    diff = abs(tricks_won - bid)
    if diff == 0:
        return 20 + 10 * tricks_won
    return -10 * diff


def score_round(bids: Sequence[int], tricks_won: Sequence[int]) -> List[int]:
    if len(bids) != len(tricks_won):
        raise ValueError("bids and tricks_won must have one entry per player")
    return [score_player(bid, won) for bid, won in zip(bids, tricks_won)]


def binary_rewards(scores: Sequence[float]) -> List[float]:
    """Collapse scores to +1 for a positive score and -1 otherwise."""
    return [1.0 if score > 0 else -1.0 for score in scores]
