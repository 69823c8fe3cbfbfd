"""Game components: state, end rules with payoffs, moves and the game loop."""

from __future__ import annotations

import logging
from typing import Iterable, Iterator

from .datatypes import DataSet
from .instructions import InstructionBlock
from .players import Player, PlayerAgent, PlayersSet

log = logging.getLogger(__name__)


class GameError(Exception):
    """Raised when a game is defined inconsistently or a move does not exist."""


class State:
    """The game's state variables and the block that initialises them."""

    def __init__(self, data: DataSet, setup_block: InstructionBlock) -> None:
        self.data = data
        self.setup_block = setup_block

    def setup(self) -> None:
        """Run the setup block against the state data."""
        self.setup_block.run()

    def format(self) -> str:
        return self.data.format()


class Payoff:
    """Computes the payoff for every player of one class."""

    def __init__(self, player_class: str, block: InstructionBlock) -> None:
        self.player_class = player_class
        self.block = block

    def send_payoff(self, player: Player) -> int:
        """Run the payoff block and hand its integer result to the player."""
        self.block.run()
        result = self.block.return_variable.get_int()
        player.set_payoff(result)
        return result


class EndRule:
    """A condition that ends the game and the payoffs it then pays out."""

    def __init__(
        self,
        name: str,
        condition: InstructionBlock,
        payoffs: Iterable[Payoff],
        players: PlayersSet,
    ) -> None:
        self.name = name
        self.condition = condition
        self.players = players
        self.payoffs: dict[str, Payoff] = {p.player_class: p for p in payoffs}
        missing = [p.player_class for p in players if p.player_class not in self.payoffs]
        if missing:
            raise GameError(
                f'no payoff definition for player "{missing[0]}" in rule "{name}"'
            )

    def run(self) -> bool:
        """Check the condition; when it holds, pay every player and return True."""
        self.condition.run()
        if not self.condition.return_variable.get_bool():
            return False
        for player in self.players:
            payoff = self.payoffs.get(player.player_class)
            if payoff is None:
                raise GameError(
                    f'player "{player.player_class}" not found in payoff list'
                )
            self.players.set_current(player)
            payoff.send_payoff(player)
        return True


class MainRule:
    """The end rules of a game, checked in order after every move."""

    def __init__(self, end_rules: Iterable[EndRule]) -> None:
        self.end_rules = list(end_rules)

    def run(self) -> bool:
        """Return True as soon as one end rule fires."""
        return any(rule.run() for rule in self.end_rules)


class Move:
    """A named move: its parameters, a validity check and its effect."""

    def __init__(
        self,
        name: str,
        players_scope: Iterable[str],
        data: DataSet,
        validation: InstructionBlock,
        execution: InstructionBlock,
    ) -> None:
        self.name = name
        self.players_scope = list(players_scope)
        self.data = data
        self.validation = validation
        self.execution = execution

    def make_move(self) -> bool:
        """Execute the move if it validates; return whether it was executed."""
        self.validation.run()
        if self.validation.return_variable.get_bool():
            self.execution.run()
            return True
        log.warning('move "%s" is not valid', self.name)
        return False


class Moves:
    """All moves of a game, looked up by name."""

    def __init__(self, moves: Iterable[Move]) -> None:
        self.moves: dict[str, Move] = {move.name: move for move in moves}

    def __contains__(self, name: object) -> bool:
        return name in self.moves

    def __iter__(self) -> Iterator[str]:
        return iter(self.moves)

    def __len__(self) -> int:
        return len(self.moves)

    def move_data(self, move_name: str) -> DataSet:
        try:
            return self.moves[move_name].data
        except KeyError:
            raise GameError(f'move "{move_name}" does not exist') from None

    def moves_data_map(self) -> dict[str, DataSet]:
        """Map each move name to the data set holding its parameters."""
        return {name: move.data for name, move in self.moves.items()}

    def make_move(self, move_name: str) -> bool:
        """Try a move by name; unknown or invalid moves return False."""
        move = self.moves.get(move_name)
        if move is None:
            log.warning('move "%s" does not exist', move_name)
            return False
        return move.make_move()


class Game:
    """A complete game: players, state, end rules and moves."""

    def __init__(
        self, players: PlayersSet, state: State, main_rule: MainRule, moves: Moves
    ) -> None:
        self.players = players
        self.state = state
        self.main_rule = main_rule
        self.moves = moves
        self.state_data = state.data
        self.moves_map = moves.moves_data_map()

    def set_agent(self, agent: PlayerAgent, player_class: str, player_id: int) -> None:
        self.players.set_agent(agent, player_class, player_id)

    def start(self) -> None:
        """Set up the state and play moves until an end rule fires."""
        self.state.setup()
        finished = False
        while not finished:
            self.next_move()
            finished = self.main_rule.run()

    def next_move(self) -> None:
        """Ask the player on move until a valid move has been executed."""
        while True:
            move_name = self.players.make_move(self.state_data, self.moves_map)
            if self.moves.make_move(move_name):
                return

    def format(self) -> str:
        return self.players.format() + "\n" + self.state.format()