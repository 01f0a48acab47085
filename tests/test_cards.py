import pytest

from wizard_engine.cards import (
    DECK_SIZE,
    NUM_DISTINCT_CARDS,
    Card,
    CardType,
    Deck,
    Outcome,
    Suit,
    card_to_dict,
    dict_to_card,
    initial_card_counts,
)
from wizard_engine.errors import DepletedCard, InvalidFormat


def test_index_round_trip_for_every_card():
    for index in range(NUM_DISTINCT_CARDS):
        card = Card.from_index(index)
        assert card.to_index() == index
        assert Card.parse(str(card)) == card


def test_index_layout():
    assert Card.jester().to_index() == 0
    assert Card.wizard().to_index() == 1
    assert Card(Suit.BLUE, 1).to_index() == 2
    assert Card(Suit.BLUE, 13).to_index() == 14
    assert Card(Suit.RED, 1).to_index() == 15
    assert Card(Suit.YELLOW, 13).to_index() == 53


def test_string_format():
    assert str(Card(Suit.GREEN, 7)) == "[G7]"
    assert str(Card.wizard()) == "[W14]"
    assert str(Card.jester()) == "[W0]"
    assert Card.parse("[R12]") == Card(Suit.RED, 12)


@pytest.mark.parametrize(
    "text",
    ["[X5]", "[B0]", "[B14]", "[W5]", "[W13]", "B5", "[B]", "[B-1]", "[Bx]", ""],
)
def test_parse_rejects_malformed_cards(text):
    with pytest.raises(InvalidFormat):
        Card.parse(text)


def test_constructor_enforces_suit_rank_invariant():
    with pytest.raises(InvalidFormat):
        Card(None, 7)
    with pytest.raises(InvalidFormat):
        Card(Suit.BLUE, 14)
    # InvalidFormat is still a ValueError for callers that only know that.
    with pytest.raises(ValueError):
        Card(Suit.RED, 0)


def test_card_types():
    assert Card.wizard().type == CardType.WIZARD
    assert Card.jester().type == CardType.JESTER
    assert Card(Suit.RED, 3).type == CardType.NUMBER


def test_sorting_by_suit_then_rank():
    cards = [Card.wizard(), Card(Suit.RED, 1), Card(Suit.BLUE, 3), Card(Suit.BLUE, 2), Card.jester()]
    assert [str(c) for c in sorted(cards)] == ["[B2]", "[B3]", "[R1]", "[W0]", "[W14]"]


def test_compare_wizards_first_one_wins():
    wizard = Card.wizard()
    assert wizard.compare(Card.wizard(), Suit.RED) is Outcome.WIN
    assert Card(Suit.RED, 13).compare(wizard, Suit.RED) is Outcome.LOSE


def test_compare_jester_loses_to_anything_but_a_jester():
    jester = Card.jester()
    assert jester.compare(Card(Suit.BLUE, 1), None) is Outcome.LOSE
    assert jester.compare(Card.jester(), None) is Outcome.WIN
    assert Card(Suit.BLUE, 1).compare(jester, None) is Outcome.WIN


def test_compare_trump_and_suits():
    trump = Suit.GREEN
    low_trump = Card(trump, 1)
    high_blue = Card(Suit.BLUE, 13)
    assert high_blue.compare(low_trump, trump) is Outcome.LOSE
    assert low_trump.compare(high_blue, trump) is Outcome.WIN
    # A different non-trump suit never takes over.
    assert Card(Suit.BLUE, 2).compare(Card(Suit.RED, 13), trump) is Outcome.WIN
    assert Card(Suit.BLUE, 2).compare(Card(Suit.BLUE, 3), trump) is Outcome.LOSE
    assert Card(Suit.BLUE, 9).compare(Card(Suit.BLUE, 3), trump) is Outcome.WIN
    # Without trump the same-suit rule still applies.
    assert Card(trump, 1).compare(Card(trump, 2), None) is Outcome.LOSE


def test_deck_composition():
    deck = Deck()
    assert deck.total == DECK_SIZE == 60
    counts = deck.remaining_counts()
    assert counts[0] == 4
    assert counts[1] == 4
    assert all(c == 1 for c in counts[2:])
    assert counts == initial_card_counts()


def test_deal_decrements_and_depletes():
    deck = Deck()
    for _ in range(4):
        assert deck.deal_card(1) == Card.wizard()
    assert deck.count(1) == 0
    assert deck.total == 56
    with pytest.raises(DepletedCard):
        deck.deal_card(1)
    assert deck.total == 56

    assert deck.deal_card(2) == Card(Suit.BLUE, 1)
    with pytest.raises(DepletedCard):
        deck.deal_card(2)


def test_remaining_counts_is_a_snapshot():
    deck = Deck()
    counts = deck.remaining_counts()
    counts[5] = 0
    assert deck.count(5) == 1

    clone = deck.copy()
    clone.deal_card(5)
    assert deck.count(5) == 1


def test_card_roundtrip_dict():
    for card in (Card(Suit.RED, 7), Card.wizard(), Card.jester()):
        assert dict_to_card(card_to_dict(card)) == card
