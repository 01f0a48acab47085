from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional
import enum

from .errors import DepletedCard, InvalidFormat

NUM_SUITS = 4
NUM_SPECIALS = 2
MIN_RANK = 1
MAX_RANK = 13
JESTER_RANK = 0
WIZARD_RANK = 14
DECK_SIZE = 60
NUM_DISTINCT_CARDS = NUM_SUITS * MAX_RANK + NUM_SPECIALS
NUM_CARD_ACTIONS = NUM_DISTINCT_CARDS
COPIES_PER_SPECIAL = 4

JESTER_INDEX = 0
WIZARD_INDEX = 1

WHITE_LETTER = "W"


class Suit(enum.Enum):
    BLUE = "B"
    RED = "R"
    GREEN = "G"
    YELLOW = "Y"

    @property
    def index(self) -> int:
        return _SUIT_ORDER.index(self)

    @property
    def letter(self) -> str:
        return self.value


_SUIT_ORDER: List[Suit] = list(Suit)


class CardType(enum.Enum):
    NUMBER = "number"
    WIZARD = "wizard"
    JESTER = "jester"


class Outcome(enum.Enum):
    WIN = "win"
    LOSE = "lose"


@dataclass(frozen=True)
class Card:
    """
    Representation of a Wizard card.

    - NUMBER cards: suit in Suit, rank 1–13.
    - WIZARD / JESTER: suit=None, rank 14 (wizard) or 0 (jester).

    Cards map one-to-one onto indices 0..53: the jester is 0, the wizard is 1
    and numbered cards follow suit by suit.
    """

    suit: Optional[Suit]
    rank: int

    def __post_init__(self) -> None:
        if self.suit is None:
            if self.rank not in (JESTER_RANK, WIZARD_RANK):
                raise InvalidFormat(
                    f"Cannot create wizard or jester with rank {self.rank}"
                )
        elif not (MIN_RANK <= self.rank <= MAX_RANK):
            raise InvalidFormat(
                f"Cannot create card with rank {self.rank} and suit {self.suit.letter}"
            )

    @classmethod
    def wizard(cls) -> "Card":
        return cls(None, WIZARD_RANK)

    @classmethod
    def jester(cls) -> "Card":
        return cls(None, JESTER_RANK)

    @classmethod
    def from_index(cls, index: int) -> "Card":
        if not 0 <= index < NUM_DISTINCT_CARDS:
            raise InvalidFormat(f"Card index {index} out of range")
        if index == JESTER_INDEX:
            return cls.jester()
        if index == WIZARD_INDEX:
            return cls.wizard()
        index -= NUM_SPECIALS
        return cls(_SUIT_ORDER[index // MAX_RANK], index % MAX_RANK + 1)

    @classmethod
    def parse(cls, text: str) -> "Card":
        """Parse the canonical form, e.g. ``[B7]``, ``[W0]`` or ``[W14]``."""
        if len(text) < 4 or text[0] != "[" or text[-1] != "]":
            raise InvalidFormat(f"Malformed card string {text!r}")
        letter, digits = text[1], text[2:-1]
        if not digits.isdigit():
            raise InvalidFormat(f"Malformed card rank in {text!r}")
        if letter == WHITE_LETTER:
            suit = None
        else:
            try:
                suit = Suit(letter)
            except ValueError:
                raise InvalidFormat(
                    f"Error creating card with suit {letter}"
                ) from None
        return cls(suit, int(digits))

    @property
    def type(self) -> CardType:
        if self.suit is not None:
            return CardType.NUMBER
        if self.rank == WIZARD_RANK:
            return CardType.WIZARD
        return CardType.JESTER

    @property
    def is_wizard(self) -> bool:
        return self.suit is None and self.rank == WIZARD_RANK

    @property
    def is_jester(self) -> bool:
        return self.suit is None and self.rank == JESTER_RANK

    def is_trump(self, trump_suit: Optional[Suit]) -> bool:
        return trump_suit is not None and self.suit == trump_suit

    def to_index(self) -> int:
        if self.is_jester:
            return JESTER_INDEX
        if self.is_wizard:
            return WIZARD_INDEX
        return MAX_RANK * self.suit.index + self.rank - 1 + NUM_SPECIALS

    def sort_key(self) -> tuple[int, int]:
        suit_index = NUM_SUITS if self.suit is None else self.suit.index
        return suit_index, self.rank

    def __lt__(self, other: "Card") -> bool:
        return self.sort_key() < other.sort_key()

    def compare(self, other: "Card", trump_suit: Optional[Suit]) -> Outcome:
        """
        Compare this card against `other`, played after it in the same trick.

        Checks run in a fixed order and ties go to this card:
        1. A wizard beats everything, the earlier wizard wins a wizard pair.
        2. A jester loses to anything that is not a jester.
        3. Trump beats non-trump.
        4. Different non-trump suits: the earlier card stands.
        5. Same suit: higher rank wins.
        """
        if self._holds_against(other, trump_suit):
            return Outcome.WIN
        return Outcome.LOSE

    def _holds_against(self, other: "Card", trump_suit: Optional[Suit]) -> bool:
        if self == other or self.is_wizard:
            return True
        if other.is_wizard or self.is_jester:
            return False
        if self.is_trump(trump_suit) != other.is_trump(trump_suit):
            return self.is_trump(trump_suit)
        if self.suit != other.suit:
            return True
        return self.rank >= other.rank

    def __str__(self) -> str:
        letter = WHITE_LETTER if self.suit is None else self.suit.letter
        return f"[{letter}{self.rank}]"


def card_to_dict(card: Card) -> Dict[str, Any]:
    """Convert a Card to a JSON-serializable dict."""
    return {
        "type": card.type.value,
        "suit": card.suit.name if card.suit is not None else None,
        "rank": card.rank,
        "index": card.to_index(),
    }


def dict_to_card(data: Dict[str, Any]) -> Card:
    """Convert a dict back into a Card."""
    ctype = CardType(data["type"])
    if ctype == CardType.NUMBER:
        return Card(Suit[data["suit"]], int(data["rank"]))
    if ctype == CardType.WIZARD:
        return Card.wizard()
    return Card.jester()


def initial_card_counts() -> List[int]:
    counts = [0] * NUM_DISTINCT_CARDS
    counts[JESTER_INDEX] = COPIES_PER_SPECIAL
    counts[WIZARD_INDEX] = COPIES_PER_SPECIAL
    for index in range(NUM_SPECIALS, NUM_DISTINCT_CARDS):
        counts[index] = 1
    return counts


class Deck:
    """
    The undealt part of a Wizard deck, kept as a count per card index:
    - 52 number cards: 4 suits × ranks 1–13
    - 4 Wizards
    - 4 Jesters
    """

    def __init__(self) -> None:
        self._counts: List[int] = initial_card_counts()
        self._total = sum(self._counts)

        if self._total != DECK_SIZE:
            raise RuntimeError("Deck must contain exactly 60 cards")

    def deal_card(self, index: int) -> Card:
        card = Card.from_index(index)
        if self._counts[index] == 0:
            raise DepletedCard(index, str(card))
        self._counts[index] -= 1
        self._total -= 1
        return card

    def remaining_counts(self) -> List[int]:
        return list(self._counts)

    def count(self, index: int) -> int:
        return self._counts[index]

    @property
    def total(self) -> int:
        return self._total

    def __len__(self) -> int:
        return self._total

    def copy(self) -> "Deck":
        clone = Deck.__new__(Deck)
        clone._counts = list(self._counts)
        clone._total = self._total
        return clone
