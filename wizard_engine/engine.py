from __future__ import annotations

import logging
import random
from typing import Any, Dict, List, Optional

from .agents.base import WizardAgent
from .cards import Card, card_to_dict
from .errors import IllegalAction
from .game_round import MAX_PLAYERS, MIN_PLAYERS, Round, max_round_number
from .state import GameState, Phase, PlayerState, RewardMode, RoundRecord

logger = logging.getLogger(__name__)


class GameEngine:
    """
    Drives Wizard rounds with pluggable agents.

    The engine only talks to a Round through its public interface: it samples
    chance outcomes, builds JSON-like observations from the read-only
    accessors and applies the actions agents choose.
    """

    def __init__(
        self,
        agents: List[WizardAgent],
        player_names: Optional[List[str]] = None,
        rng_seed: Optional[int] = None,
        game_label: Optional[str] = None,
        reward_mode: RewardMode = RewardMode.NORMAL,
    ) -> None:
        if not MIN_PLAYERS <= len(agents) <= MAX_PLAYERS:
            raise ValueError("Wizard supports 3 to 6 players")

        self.agents: List[WizardAgent] = agents

        if player_names is None:
            player_names = [f"Player {i}" for i in range(len(agents))]
        if len(player_names) != len(agents):
            raise ValueError("player_names must match number of agents")

        self.rng = random.Random(rng_seed)
        self.game_label = game_label
        self.reward_mode = RewardMode(reward_mode)

        self.game_state = GameState(
            players=[
                PlayerState(id=i, name=name)
                for i, name in enumerate(player_names)
            ]
        )
        # Number of rounds determined by deck size and player count.
        self.max_rounds = max_round_number(self.game_state.num_players)

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def play_game(self) -> GameState:
        """Play rounds 1..max_rounds, rotating the start player, and return the GameState."""
        start_player = 0
        for round_index in range(self.max_rounds):
            self.game_state.current_round_index = round_index
            self.play_round(round_index + 1, start_player)
            logger.info(
                "Finished round %d/%d%s",
                round_index + 1,
                self.max_rounds,
                f" for {self.game_label}" if self.game_label else "",
            )
            start_player = (start_player + 1) % self.game_state.num_players

        logger.info(
            "Finished game%s",
            f" {self.game_label}" if self.game_label else "",
        )
        return self.game_state

    def play_round(self, round_number: int, start_player: int = 0) -> Round:
        """Play one round to the end, record it and return the final Round."""
        round_ = Round(
            self.game_state.num_players,
            round_number,
            start_player,
            self.reward_mode,
        )
        for p in self.game_state.players:
            p.tricks_won_this_round = 0
            p.current_bid = None

        while not round_.is_terminal():
            if round_.is_chance_node():
                self._apply_chance(round_)
            else:
                self._apply_agent_action(round_)

        self._record_round(round_)
        return round_

    # -------------------------------------------------------------------------
    # Turn handling
    # -------------------------------------------------------------------------

    def _apply_chance(self, round_: Round) -> None:
        outcomes = round_.chance_outcomes()
        actions = [action for action, _prob in outcomes]
        weights = [prob for _action, prob in outcomes]
        round_.apply_action(self.rng.choices(actions, weights=weights)[0])

    def _apply_agent_action(self, round_: Round) -> None:
        player = round_.current_player()
        agent = self.agents[player]
        legal = round_.legal_actions()
        obs = self._build_observation(round_, player)

        bidding = round_.phase == Phase.BIDDING
        if bidding:
            action = agent.choose_bid(obs)
        else:
            hand = round_.hand(player)
            move_index = agent.choose_card(obs)
            if 0 <= move_index < len(hand):
                action = round_.num_guess_actions + hand[move_index].to_index()
            else:
                action = -1

        try:
            round_.apply_action(action)
        except IllegalAction as exc:
            # Agent chose an illegal action: fall back to the first legal one.
            logger.warning(
                "Player %d: %s; playing %s instead",
                player,
                exc,
                round_.action_to_string(legal[0]),
            )
            round_.apply_action(legal[0])

        if bidding:
            self.game_state.players[player].current_bid = round_.bids[player]

    def _record_round(self, round_: Round) -> None:
        deltas = round_.rewards(RewardMode.NORMAL)
        returns = round_.returns()
        for p in self.game_state.players:
            p.tricks_won_this_round = round_.tricks_won[p.id]
            p.current_bid = round_.bids[p.id]
            p.score += int(deltas[p.id])
        self.game_state.rounds.append(
            RoundRecord(
                round_number=round_.round_number,
                start_player=round_.start_player,
                trump_card=round_.trump,
                bids=round_.bids,
                tricks_won=round_.tricks_won,
                deltas=returns,
            )
        )

    # -------------------------------------------------------------------------
    # Observation builders
    # -------------------------------------------------------------------------

    def _build_observation(self, round_: Round, player_id: int) -> Dict[str, Any]:
        player = self.game_state.players[player_id]
        hand = round_.hand(player_id)
        trump: Optional[Card] = round_.trump
        obs: Dict[str, Any] = {
            "game": {
                "game_id": self.game_label,
                "round_number": round_.round_number,
                "num_players": round_.num_players,
                "start_player": round_.start_player,
            },
            "player": {
                "id": player.id,
                "name": player.name,
                "score": player.score,
            },
            "trump": {
                "suit": round_.trump_suit.name if round_.trump_suit else None,
                "card": card_to_dict(trump) if trump else None,
            },
            "scores": {p.id: p.score for p in self.game_state.players},
            "hand": [card_to_dict(c) for c in hand],
            "bids": round_.bids,
            "tricks_won": round_.tricks_won,
        }

        if round_.phase == Phase.BIDDING:
            obs["phase"] = "bidding"
            obs["legal_bids"] = round_.legal_actions(player_id)
            return obs

        legal = set(round_.legal_actions(player_id))
        obs["phase"] = "play"
        obs["legal_move_indices"] = [
            i for i, card in enumerate(hand)
            if round_.num_guess_actions + card.to_index() in legal
        ]
        obs["current_trick"] = [
            {"player_id": pid, "card": card_to_dict(card)}
            for pid, card in zip(round_.played_by_on_table, round_.cards_on_table)
        ]
        obs["cards_played"] = [
            {"player_id": pid, "card": card_to_dict(card)}
            for pid, card in zip(round_.played_by, round_.cards_played)
        ]
        return obs
