# gamelang

`gamelang` turns the syntax tree of a game description into a runnable game
and plays it out move by move.

A game description has four parts:

- **players**: player classes and how many players each class has; players
  of a class are numbered from 0;
- **state**: typed variables (`INT`, `BOOL`) shared by the whole game, plus a
  setup block that runs before the first move;
- **main rule**: a list of end rules; each one has a `BOOL` condition block
  and an `INT` payoff block for every player class. After each move the end
  rules are checked in order, and the first one whose condition holds ends
  the game and pays every player;
- **moves**: named moves, each with its own variables, a `BOOL` validation
  block and an execution block. A move runs only if its validation returns
  true; otherwise the player on move is asked again.

Blocks have local variables and are made of assignments, `if`, `while`,
`return` and a *next player* instruction that hands the turn to a given
player of a given class. Expressions cover integer arithmetic (`+ - * / %`
and negation, with division and remainder truncating toward zero),
comparisons, `and`, `or`, `not`, literals, references to local, state or
move variables, and the index of the player on move.

## Installing

```
pip install .
```

There are no runtime dependencies. The tests need `pytest`:

```
pip install ".[test]"
pytest
```

## Playing a game

Players are driven by agents. Subclass `gamelang.players.PlayerAgent` and
override two methods: `make_move(state_data, moves_map)` returns the name of
the chosen move (it may first set that move's variables in
`moves_map[name]`), and `receive_payoff(payoff)` is called with the final
payoff.

```python
from gamelang.compiler import compile_game
from gamelang.players import PlayerAgent


class AlwaysTake(PlayerAgent):
    def make_move(self, state_data, moves_map):
        return "take"

    def receive_payoff(self, payoff):
        print("my payoff:", payoff)


game = compile_game(tree)          # tree: a gamelang.syntax.SyntaxTree
game.set_agent(AlwaysTake(), "Alice", 0)
game.set_agent(AlwaysTake(), "Bob", 0)
game.start()
print(game.format())
```

`Game.start()` runs the state's setup block and then calls `next_move()`
until an end rule fires. `next_move()` keeps asking the player on move until
a move is executed: an unknown or invalid move name is logged as a warning
(through the `logging` module) and the same player is asked again, so an
agent must eventually name a valid move. The base `PlayerAgent` always
answers with an empty name.

`Game.format()` renders the player on move, every player with its payoff,
and the state variables. `compile_game` builds a game with a fresh
`Compiler`; `Compiler().create_game(tree)` does the same.

## Syntax trees

A `gamelang.syntax.SyntaxTree` node has a `type` (a `NodeType`), a `text`
and a list of `children`. `SyntaxTree.format(depth)` renders a subtree with
two spaces of indentation per level, and `type_name(node_type)` gives a
node kind's display name.

The compiler reads the tree by position. The root has four children:
players, state, main rule and moves. Lists are right-recursive: a list node
holds an item and, when it has two children, the rest of the list.
Instruction blocks must be `INSTRUCTION_BLOCK` nodes holding a `DATA_SET`
of local variables and, as second child, an `INSTRUCTION_LIST`. The helpers
in `gamelang.treewalk` (`extract`, `child_of_type`, `single_child`,
`iter_chain`, `read_declarations`, `build_data_set`, `build_players`,
`players_classes`) do this walking and can be used on their own.

## Errors

Problems are reported as exceptions:

- `gamelang.compiler.CompileError` when a tree does not describe a valid
  game: a malformed tree, an unknown scope or identifier, a type mismatch,
  a wrong return, or an end rule without a payoff for some player class;
- `gamelang.components.GameError` for a missing payoff when an end rule
  fires, or for `Moves.move_data` with an unknown move;
- `gamelang.players.PlayerError` for unknown players, a player without an
  agent, or no player on move;
- `gamelang.datatypes.DataSetError` for unknown or mistyped variables and
  a full data set.

## What it does not do

`gamelang` has no parser for game-description text: it starts from a
`SyntaxTree` built by other means. It has no command-line program and no
built-in agents that play a game by themselves.

## Modules

- `gamelang.syntax` – syntax tree nodes and node kinds
- `gamelang.datatypes` – variable types, variable sets and return slots
- `gamelang.players` – players, player sets and the agent interface
- `gamelang.expressions` – integer and boolean expressions
- `gamelang.instructions` – instructions and instruction blocks
- `gamelang.components` – state, rules, payoffs, moves and the game loop
- `gamelang.treewalk` – helpers for walking syntax trees
- `gamelang.compiler` – building a game from a syntax tree