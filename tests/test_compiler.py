import pytest

from gamelang.compiler import CompileError, Compiler, compile_game
from gamelang.players import PlayerAgent
from gamelang.syntax import NodeType as T
from gamelang.syntax import SyntaxTree


def node(node_type, *children, text=""):
    return SyntaxTree(node_type, text, list(children))


def ident(name):
    return node(T.IDENTIFIER, text=name)


def chain(list_type, items):
    items = list(items)
    tail = node(list_type, items[-1])
    for item in reversed(items[:-1]):
        tail = node(list_type, item, tail)
    return tail


def literal(value):
    if isinstance(value, bool):
        return node(T.BOOLEAN, text="true" if value else "false")
    return node(T.INTEGER, text=str(value))


def decl(name, value):
    if isinstance(value, bool):
        keyword = node(T.KW_BOOL, text="BOOL")
    else:
        keyword = node(T.KW_INT, text="INT")
    return node(
        T.VAR_DECLARATION,
        node(T.VAR_TYPE, keyword),
        ident(name),
        node(T.VAR_DEFINITION, literal(value)),
    )


def data_set(**variables):
    tail = node(T.VAR_LIST)
    for name, value in reversed(list(variables.items())):
        tail = node(T.VAR_LIST, decl(name, value), tail)
    return node(T.DATA_SET, tail)


def instr_list(instructions):
    tail = node(T.INSTRUCTION_LIST_TAIL)
    for instruction in reversed(list(instructions)):
        tail = node(T.INSTRUCTION_LIST, node(T.INSTRUCTION, instruction), tail)
    return tail


def block(*instructions, local=None):
    return node(T.INSTRUCTION_BLOCK, data_set(**(local or {})), instr_list(instructions))


_SCOPES = {"local": T.LOCAL_SCOPE, "state": T.STATE_SCOPE, "move": T.MOVE_SCOPE}


def var_ref(scope, name):
    return node(T.VAR_REFERENCE, node(_SCOPES[scope]), ident(name))


def ref(scope, name):
    return node(T.EXPR_REF, var_ref(scope, name))


def lit(value):
    return node(T.EXPR_LITERAL, node(T.VAR_DEFINITION, literal(value)))


def op(node_type, *args):
    return node(node_type, *args)


def player_index():
    return node(T.EXPR_PLAYER_INDEX)


def assign(scope, name, expression):
    return node(T.ASSIGN_INSTR, var_ref(scope, name), expression)


def ret(expression=None):
    if expression is None:
        return node(T.RETURN_INSTR)
    return node(T.RETURN_INSTR, expression)


def if_(condition, *body):
    return node(T.IF_INSTR, condition, instr_list(body))


def while_(condition, *body):
    return node(T.WHILE_INSTR, condition, instr_list(body))


def next_player(player_class, expression):
    return node(T.NEXT_PLAYER_INSTR, ident(player_class), expression)


def move(name="take", scope=(), data=None, validation=None, execution=None):
    if scope:
        scope_node = node(T.PLAYERS_SCOPE, chain(T.IDENTIFIER_LIST, [ident(s) for s in scope]))
    else:
        scope_node = node(T.PLAYERS_SCOPE)
    if data is None:
        data = {"amount": 0}
    if validation is None:
        validation = block(ret(op(T.EXPR_GREATER, ref("move", "amount"), lit(0))))
    if execution is None:
        execution = block(
            assign(
                "state",
                "counter",
                op(T.EXPR_SUB, ref("state", "counter"), ref("move", "amount")),
            ),
            next_player(
                "p", op(T.EXPR_MOD, op(T.EXPR_ADD, player_index(), lit(1)), lit(2))
            ),
        )
    return node(T.MOVE, ident(name), scope_node, data_set(**data), validation, execution)


def game_tree(
    *,
    classes=(("p", 2),),
    state=None,
    setup=(),
    end_condition=None,
    payoffs=None,
    moves=None,
):
    if state is None:
        state = {"counter": 3}
    players = node(
        T.PLAYERS,
        chain(T.PLAYERS_LIST, [node(T.PLAYER, ident(c), literal(n)) for c, n in classes]),
    )
    state_node = node(T.STATE, data_set(**state), block(*setup))
    if end_condition is None:
        end_condition = block(ret(op(T.EXPR_LESS_EQUAL, ref("state", "counter"), lit(0))))
    if payoffs is None:
        payoffs = {c: block(ret(lit(0))) for c, _ in classes}
    rule = node(
        T.M_RULE,
        ident("over"),
        end_condition,
        chain(T.PAYOFF_LIST, [node(T.PAYOFF, ident(c), b) for c, b in payoffs.items()]),
    )
    main_rule = node(T.MAIN_RULE, chain(T.M_RULE_LIST, [rule]))
    if moves is None:
        moves = [move()]
    moves_node = node(T.MOVES, chain(T.MOVE_LIST, moves))
    return node(T.GAME, players, state_node, main_rule, moves_node)


class Taker(PlayerAgent):
    def __init__(self, amounts=()):
        self.amounts = list(amounts)
        self.calls = 0
        self.payoffs = []

    def make_move(self, state_data, moves_map):
        self.calls += 1
        amount = self.amounts.pop(0) if self.amounts else 1
        moves_map["take"].set_int("amount", amount)
        return "take"

    def receive_payoff(self, payoff):
        self.payoffs.append(payoff)


def test_declared_state_values_before_setup():
    game = compile_game(game_tree(state={"counter": 3, "flag": True}))
    assert game.state_data.get("counter") == 3
    assert game.state_data.get("flag") is True


def test_setup_block_assigns_state():
    game = compile_game(game_tree(setup=(assign("state", "counter", lit(5)),)))
    game.state.setup()
    assert game.state_data.get("counter") == 5


def test_while_loop_with_local_variable():
    loop = while_(
        op(T.EXPR_LESS, ref("local", "i"), lit(3)),
        assign("state", "counter", op(T.EXPR_ADD, ref("state", "counter"), lit(1))),
        assign("local", "i", op(T.EXPR_ADD, ref("local", "i"), lit(1))),
    )
    tree = game_tree(state={"counter": 0}, setup=())
    # replace the setup block with one holding a local declaration
    tree.children[1].children[1] = block(loop, local={"i": 0})
    game = compile_game(tree)
    game.state.setup()
    assert game.state_data.get("counter") == 3


@pytest.mark.parametrize("flag, expected", [(True, 7), (False, 3)])
def test_if_continues_after_both_branches(flag, expected):
    setup = (
        if_(ref("state", "flag"), assign("state", "counter", lit(7))),
        assign("state", "done", lit(True)),
    )
    game = compile_game(
        game_tree(state={"counter": 3, "flag": flag, "done": False}, setup=setup)
    )
    game.state.setup()
    assert game.state_data.get("counter") == expected
    assert game.state_data.get("done") is True


def test_division_and_modulo_truncate_toward_zero():
    setup = (
        assign("state", "counter", op(T.EXPR_DIV, op(T.EXPR_NEG, lit(7)), lit(2))),
        assign("state", "other", op(T.EXPR_MOD, op(T.EXPR_NEG, lit(7)), lit(2))),
    )
    game = compile_game(game_tree(state={"counter": 0, "other": 0}, setup=setup))
    game.state.setup()
    assert game.state_data.get("counter") == -3
    assert game.state_data.get("other") == -1


def test_full_game_pays_out_by_player_index():
    payoff = block(
        if_(op(T.EXPR_EQUAL, player_index(), lit(0)), ret(lit(1))),
        ret(lit(0)),
    )
    game = compile_game(
        game_tree(
            state={"counter": 5},
            payoffs={"p": payoff},
        )
    )
    first, second = Taker(), Taker()
    game.set_agent(first, "p", 0)
    game.set_agent(second, "p", 1)
    game.start()
    assert game.state_data.get("counter") == 0
    assert first.payoffs == [1]
    assert second.payoffs == [0]
    assert first.calls + second.calls == 5
    assert first.calls > second.calls


def test_invalid_move_is_retried():
    game = compile_game(game_tree(state={"counter": 3}))
    agent = Taker([0, 0, 2])
    game.set_agent(agent, "p", 0)
    game.state.setup()
    game.next_move()
    assert agent.calls == 3
    assert game.state_data.get("counter") == 1
    assert game.players.current.player_id == 1


def test_unknown_move_name_is_rejected():
    game = compile_game(game_tree())
    assert game.moves.make_move("nope") is False


def test_players_scope_defaults_to_all_classes():
    game = compile_game(game_tree(classes=(("p", 1), ("q", 2))))
    assert game.moves.moves["take"].players_scope == ["p", "q"]
    assert len(game.players) == 3


def test_players_scope_explicit():
    game = compile_game(game_tree(classes=(("p", 1), ("q", 2)), moves=[move(scope=("q",))]))
    assert game.moves.moves["take"].players_scope == ["q"]


@pytest.mark.parametrize("flag, expected", [(True, False), (False, True)])
def test_boolean_operators_in_end_rule(flag, expected):
    condition = block(
        ret(
            op(
                T.EXPR_OR,
                op(T.EXPR_NOT, ref("state", "flag")),
                op(T.EXPR_AND, lit(False), lit(True)),
            )
        )
    )
    game = compile_game(
        game_tree(state={"counter": 3, "flag": flag}, end_condition=condition)
    )
    game.set_agent(Taker(), "p", 0)
    game.set_agent(Taker(), "p", 1)
    assert game.main_rule.run() is expected


def test_compiler_keeps_built_parts():
    compiler = Compiler()
    game = compiler.create_game(game_tree())
    assert compiler.game is game
    assert compiler.players is game.players
    assert compiler.state is game.state


def test_moves_data_map_holds_move_parameters():
    game = compile_game(game_tree())
    assert list(game.moves_map) == ["take"]
    assert game.moves_map["take"].get("amount") == 0


@pytest.mark.parametrize(
    "setup",
    [
        (assign("state", "missing", lit(1)),),
        (ret(lit(1)),),
        (assign("state", "counter", ref("state", "flag")),),
        (assign("state", "counter", ref("move", "amount")),),
        (assign("state", "counter", op(T.EXPR_AND, lit(True), lit(True))),),
        (assign("state", "counter", lit("abc")),),
        (node(T.TMP),),
    ],
)
def test_invalid_setup_raises(setup):
    with pytest.raises(CompileError):
        compile_game(game_tree(state={"counter": 3, "flag": False}, setup=setup))


def test_missing_return_value_in_bool_block():
    with pytest.raises(CompileError):
        compile_game(game_tree(end_condition=block(ret())))


def test_invalid_operator_in_bool_expression():
    with pytest.raises(CompileError):
        compile_game(game_tree(end_condition=block(ret(op(T.EXPR_ADD, lit(1), lit(2))))))


def test_missing_payoff_for_class():
    with pytest.raises(CompileError):
        compile_game(
            game_tree(classes=(("p", 1), ("q", 1)), payoffs={"p": block(ret(lit(0)))})
        )


def test_malformed_tree():
    with pytest.raises(CompileError):
        compile_game(node(T.GAME))