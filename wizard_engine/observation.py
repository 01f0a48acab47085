from __future__ import annotations

from typing import Iterable, List

import numpy as np

from .cards import NUM_DISTINCT_CARDS, NUM_SUITS, Card
from .game_round import Round
from .state import Phase


def _join(values: Iterable[object]) -> str:
    return ",".join(str(v) for v in values)


def _check_player(round_: Round, player: int) -> None:
    if not 0 <= player < round_.num_players:
        raise ValueError(f"Player {player} is not a seat at the table")


def observation_string(round_: Round, player: int) -> str:
    """What `player` sees right now: own hand, bids, tricks and the open trick."""
    _check_player(round_, player)
    if round_.phase == Phase.DEALING:
        return "dealing cards"

    trump = round_.trump
    lines = [
        ("playerNr", player),
        ("currentPlayer", round_.turn),
        ("round", round_.round_number),
        ("numPlayers", round_.num_players),
        ("guessedTricks", _join(round_.bids)),
        ("tricks", _join(round_.tricks_won)),
        (
            "gamePhase",
            "guessing" if round_.phase == Phase.BIDDING else "tricking",
        ),
        ("cardsPlayedOnTable", _join(round_.cards_on_table)),
        ("playedByOnTable", _join(round_.played_by_on_table)),
        ("hand", _join(round_.hand(player))),
        ("trump", trump if trump is not None else ""),
        ("legalActions", _join(round_.legal_actions(player))),
    ]
    return "".join(f"{key}\t{value}\n" for key, value in lines)


def information_state_string(round_: Round, player: int) -> str:
    """The observation string extended with every resolved trick."""
    text = observation_string(round_, player)
    if round_.phase == Phase.DEALING:
        return text
    return (
        text
        + f"cardsPlayed\t{_join(round_.cards_played)}\n"
        + f"playedBy\t{_join(round_.played_by)}\n"
    )


def cards_to_counts(cards: Iterable[Card]) -> np.ndarray:
    counts = np.zeros(NUM_DISTINCT_CARDS, dtype=np.float32)
    for card in cards:
        counts[card.to_index()] += 1
    return counts


def _trump_one_hot(round_: Round) -> np.ndarray:
    out = np.zeros(NUM_SUITS, dtype=np.float32)
    suit = round_.trump_suit
    if suit is not None:
        out[suit.index] = 1
    return out


def _player_one_hot(round_: Round, player: int) -> np.ndarray:
    out = np.zeros(round_.num_players, dtype=np.float32)
    out[player] = 1
    return out


def information_state_tensor_size(num_players: int, round_number: int) -> int:
    # player, hand, round, move, trump, bids, play history
    return (
        num_players
        + NUM_DISTINCT_CARDS
        + 2
        + NUM_SUITS
        + num_players
        + num_players * round_number * NUM_DISTINCT_CARDS
    )


def observation_tensor_size(num_players: int) -> int:
    # player, hand, round, trump, bids, tricks, open trick
    return (
        num_players
        + NUM_DISTINCT_CARDS
        + 1
        + NUM_SUITS
        + 2 * num_players
        + num_players * NUM_DISTINCT_CARDS
    )


def information_state_tensor(round_: Round, player: int) -> np.ndarray:
    _check_player(round_, player)
    n, r = round_.num_players, round_.round_number

    history = np.zeros((n * r, NUM_DISTINCT_CARDS), dtype=np.float32)
    for row, card in enumerate(round_.cards_played + round_.cards_on_table):
        history[row, card.to_index()] = 1

    parts: List[np.ndarray] = [
        _player_one_hot(round_, player),
        cards_to_counts(round_.hand(player)),
        np.array([r, len(round_.history)], dtype=np.float32),
        _trump_one_hot(round_),
        np.asarray(round_.bids, dtype=np.float32),
        history.ravel(),
    ]
    return np.concatenate(parts)


def observation_tensor(round_: Round, player: int) -> np.ndarray:
    _check_player(round_, player)
    n = round_.num_players

    table = np.zeros((n, NUM_DISTINCT_CARDS), dtype=np.float32)
    for row, card in enumerate(round_.cards_on_table):
        table[row, card.to_index()] = 1

    parts: List[np.ndarray] = [
        _player_one_hot(round_, player),
        cards_to_counts(round_.hand(player)),
        np.array([round_.round_number], dtype=np.float32),
        _trump_one_hot(round_),
        np.asarray(round_.bids, dtype=np.float32),
        np.asarray(round_.tricks_won, dtype=np.float32),
        table.ravel(),
    ]
    return np.concatenate(parts)
