"""Players taking part in a game and the agents that decide their moves."""

from __future__ import annotations

from typing import Iterable, Mapping

from .datatypes import DataSet


class PlayerError(Exception):
    """Raised when a player does not exist or cannot act."""


class PlayerAgent:
    """Decides moves for a player; subclass to provide a strategy."""

    def make_move(self, state_data: DataSet, moves_map: Mapping[str, DataSet]) -> str:
        """Return the name of the chosen move, filling in its move data."""
        return ""

    def receive_payoff(self, payoff: int) -> None:
        """Called with the final payoff when the game ends."""


class Player:
    """One seat in the game: a class name and an index within the class."""

    def __init__(self, player_class: str, player_id: int) -> None:
        self.player_class = player_class
        self.player_id = player_id
        self.agent: PlayerAgent | None = None
        self.payoff = 0

    def __repr__(self) -> str:
        return f"Player({self.player_class!r}, {self.player_id})"

    def _require_agent(self) -> PlayerAgent:
        if self.agent is None:
            raise PlayerError(f"no agent for player {self.player_class}[{self.player_id}]")
        return self.agent

    def set_agent(self, agent: PlayerAgent) -> None:
        self.agent = agent

    def set_payoff(self, payoff: int) -> None:
        """Record the payoff and pass it on to the agent."""
        self._require_agent().receive_payoff(payoff)
        self.payoff = payoff

    def make_move(self, state_data: DataSet, moves_map: Mapping[str, DataSet]) -> str:
        return self._require_agent().make_move(state_data, moves_map)

    def format(self) -> str:
        return f"{self.player_class} {self.player_id} payoff: {self.payoff}\n"


class PlayersSet:
    """All players of a game and the one currently on move."""

    def __init__(self, players: Iterable[Player]) -> None:
        self.players: list[Player] = list(players)
        self.current: Player | None = self.players[0] if self.players else None

    def __iter__(self):
        return iter(self.players)

    def __len__(self) -> int:
        return len(self.players)

    def get_player(self, player_class: str, player_id: int) -> Player | None:
        """Find a player by class and index, or None."""
        return next(
            (
                p
                for p in self.players
                if p.player_id == player_id and p.player_class == player_class
            ),
            None,
        )

    def set_next_player(self, player_class: str, player_id: int) -> None:
        """Put the given player on move; the current player is cleared if absent."""
        player = self.get_player(player_class, player_id)
        self.current = player
        if player is None:
            raise PlayerError(f"player does not exist: {player_class}[{player_id}]")

    def set_current(self, player: Player | None) -> None:
        self.current = player

    def set_agent(self, agent: PlayerAgent, player_class: str, player_id: int) -> None:
        """Attach an agent to a player; the current player is cleared if absent."""
        player = self.get_player(player_class, player_id)
        if player is None:
            self.current = None
            raise PlayerError(f"player does not exist: {player_class}[{player_id}]")
        player.set_agent(agent)

    def make_move(self, state_data: DataSet, moves_map: Mapping[str, DataSet]) -> str:
        if self.current is None:
            raise PlayerError("no player is on move")
        return self.current.make_move(state_data, moves_map)

    def format(self) -> str:
        """The player on move, a blank line, then every player."""
        if self.current is None:
            raise PlayerError("no player is on move")
        return self.current.format() + "\n" + "".join(p.format() for p in self.players)