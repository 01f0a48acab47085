import random

import pytest

from wizard_engine.cards import DECK_SIZE, Card, Suit, initial_card_counts
from wizard_engine.game_round import Round
from wizard_engine.resample import cards_played_by, resample_round, void_suits


def _index(text: str) -> int:
    return Card.parse(text).to_index()


def _advance(round_: Round, rng: random.Random, steps: int) -> None:
    for _ in range(steps):
        if round_.is_terminal():
            return
        if round_.is_chance_node():
            outcomes = round_.chance_outcomes()
            actions = [a for a, _ in outcomes]
            weights = [p for _, p in outcomes]
            round_.apply_action(rng.choices(actions, weights=weights)[0])
        else:
            round_.apply_action(rng.choice(round_.legal_actions()))


def _composition(round_: Round):
    counts = round_.deck.remaining_counts()
    cards = [card for hand in round_.hands for card in hand]
    cards += round_.cards_played + round_.cards_on_table
    if round_.trump is not None and round_.cards_dealt < DECK_SIZE:
        cards.append(round_.trump)
    for card in cards:
        counts[card.to_index()] += 1
    return counts


def _void_round() -> Round:
    # p0: B5 R3 / p1: G2 G3 / p2: B7 R8, trump yellow.
    round_ = Round(3, 2)
    for text in ["[B5]", "[G2]", "[B7]", "[R3]", "[G3]", "[R8]", "[Y1]"]:
        round_.apply_action(_index(text))
    for bid in (0, 0, 0):
        round_.apply_action(bid)
    for text in ["[B5]", "[G2]", "[B7]"]:
        round_.apply_action(round_.num_guess_actions + _index(text))
    return round_


@pytest.mark.parametrize(
    "num_players,round_number",
    [(3, 1), (3, 5), (4, 7), (5, 12), (6, 10), (3, 20), (4, 15)],
)
def test_resample_reproduces_public_history(num_players, round_number):
    rng = random.Random(num_players * 100 + round_number)
    full_length = 2 * num_players * round_number + 1 + num_players

    for trial in range(4):
        round_ = Round(num_players, round_number, start_player=trial % num_players)
        steps = full_length if trial == 0 else rng.randrange(full_length + 1)
        _advance(round_, rng, steps)

        for observer in range(num_players):
            sample = round_.resample(observer, random.Random(trial * 10 + observer))

            original = round_.history
            replayed = sample.history
            assert len(replayed) == len(original)
            for position, ((actor, action), (new_actor, new_action)) in enumerate(
                zip(original, replayed)
            ):
                assert new_actor == actor
                recipient = (round_.start_player + position) % num_players
                if position >= round_.cards_dealt or recipient == observer:
                    assert new_action == action

            assert sample.hand(observer) == round_.hand(observer)
            assert [len(h) for h in sample.hands] == [len(h) for h in round_.hands]
            assert sample.phase == round_.phase
            assert sample.turn == round_.turn
            assert sample.trump == round_.trump
            assert sample.bids == round_.bids
            assert sample.tricks_won == round_.tricks_won
            assert sample.cards_played == round_.cards_played
            assert sample.played_by == round_.played_by
            assert sample.cards_on_table == round_.cards_on_table
            assert sample.is_terminal() == round_.is_terminal()
            assert sample.returns() == round_.returns()
            assert _composition(sample) == initial_card_counts()


def test_resample_redraws_hidden_cards():
    round_ = Round(4, 10)
    _advance(round_, random.Random(5), 4 * 10 + 1)
    assert round_.phase.value == "bidding"

    samples = [round_.resample(0, random.Random(seed)) for seed in range(20)]
    assert all(s.hand(0) == round_.hand(0) for s in samples)
    assert any(sorted(s.hand(1)) != sorted(round_.hand(1)) for s in samples)


def test_resample_is_deterministic_for_a_seeded_rng():
    round_ = Round(5, 6)
    _advance(round_, random.Random(11), 45)
    first = resample_round(round_, 2, random.Random(7))
    second = resample_round(round_, 2, random.Random(7))
    assert first.hands == second.hands
    assert first.history == second.history


def test_resample_mid_deal():
    round_ = Round(3, 4)
    _advance(round_, random.Random(2), 5)
    assert round_.cards_dealt == 5

    sample = round_.resample(1, random.Random(0))
    assert sample.cards_dealt == 5
    assert sample.hand(1) == round_.hand(1)
    assert sample.is_chance_node()
    assert _composition(sample) == initial_card_counts()


def test_cards_played_by_and_void_suits():
    round_ = _void_round()
    played = cards_played_by(round_)
    assert played == {0: [Card(Suit.BLUE, 5)], 1: [Card(Suit.GREEN, 2)], 2: [Card(Suit.BLUE, 7)]}
    assert void_suits(round_) == [set(), {Suit.BLUE}, set()]


def test_resample_respects_shown_voids():
    round_ = _void_round()
    assert round_.tricks_won == [0, 0, 1]

    for seed in range(50):
        sample = round_.resample(0, random.Random(seed))
        hand = sample.hand(1)
        assert len(hand) == 1
        assert hand[0].suit != Suit.BLUE
        # the replayed history must stay legal from here on
        _advance(sample, random.Random(seed), 10)
        assert sample.is_terminal()


def test_resample_played_cards_were_dealt_to_their_players():
    round_ = _void_round()
    sample = round_.resample(0, random.Random(3))
    deals = [action for _player, action in sample.history[: sample.cards_dealt]]
    # p1 is dealt at positions 1 and 4, p2 at 2 and 5.
    assert _index("[G2]") in (deals[1], deals[4])
    assert _index("[B7]") in (deals[2], deals[5])


def test_resample_rejects_unknown_observer():
    with pytest.raises(ValueError):
        Round(3, 1).resample(3, random.Random(0))
