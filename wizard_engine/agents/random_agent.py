from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict
import random

from ..cards import CardType
from .base import WizardAgent

HIGH_RANK = 11


@dataclass
class RandomWizardAgent(WizardAgent):
    """
    Baseline seat used by the simulator.

    Bids close to the number of cards that look like sure winners (wizards,
    trumps and high numbered cards) and plays a uniformly random legal card.
    """

    rng: random.Random

    def choose_bid(self, observation: Dict[str, Any]) -> int:
        trump_suit = observation["trump"]["suit"]
        strong = 0
        for card in observation["hand"]:
            if card["type"] == CardType.WIZARD.value:
                strong += 1
            elif card["type"] == CardType.NUMBER.value and (
                card["suit"] == trump_suit or card["rank"] >= HIGH_RANK
            ):
                strong += 1

        legal_bids = observation["legal_bids"]
        near = [b for b in legal_bids if abs(b - strong) <= 1]
        return self.rng.choice(near or legal_bids)

    def choose_card(self, observation: Dict[str, Any]) -> int:
        return self.rng.choice(observation["legal_move_indices"])
