"""Builds a runnable game from the parser's syntax tree."""

from __future__ import annotations

from dataclasses import dataclass

from .components import EndRule, Game, GameError, MainRule, Move, Moves, Payoff, State
from .datatypes import DataSet, DataSetError, Variable, VarType
from .expressions import (
    Add,
    And,
    BoolExpression,
    BoolReference,
    BoolValue,
    Divide,
    Equal,
    Greater,
    GreaterEqual,
    IntExpression,
    IntReference,
    IntValue,
    Less,
    LessEqual,
    Modulo,
    Multiply,
    Negate,
    Not,
    NotEqual,
    Or,
    PlayerIndex,
    Subtract,
)
from .instructions import (
    AssignBool,
    AssignInt,
    ConditionalJump,
    Instruction,
    InstructionBlock,
    NextPlayer,
    ReturnBool,
    ReturnInt,
    ReturnVoid,
)
from .players import PlayersSet
from .syntax import NodeType, SyntaxTree, type_name
from .treewalk import (
    TreeError,
    build_data_set,
    build_players,
    child_of_type,
    extract,
    iter_chain,
    players_classes,
    single_child,
)


class CompileError(Exception):
    """Raised when a syntax tree does not describe a valid game."""


_INT_BINARY = {
    NodeType.EXPR_ADD: Add,
    NodeType.EXPR_SUB: Subtract,
    NodeType.EXPR_MUL: Multiply,
    NodeType.EXPR_DIV: Divide,
    NodeType.EXPR_MOD: Modulo,
}

_BOOL_BINARY = {
    NodeType.EXPR_AND: And,
    NodeType.EXPR_OR: Or,
}

_COMPARISONS = {
    NodeType.EXPR_EQUAL: Equal,
    NodeType.EXPR_NOT_EQUAL: NotEqual,
    NodeType.EXPR_GREATER_EQUAL: GreaterEqual,
    NodeType.EXPR_LESS_EQUAL: LessEqual,
    NodeType.EXPR_GREATER: Greater,
    NodeType.EXPR_LESS: Less,
}


@dataclass(frozen=True)
class _Scopes:
    """The data sets an instruction block can refer to."""

    local: DataSet
    state: DataSet
    move: DataSet | None

    def lookup(self, scope_type: NodeType) -> DataSet:
        if scope_type is NodeType.LOCAL_SCOPE:
            found: DataSet | None = self.local
        elif scope_type is NodeType.STATE_SCOPE:
            found = self.state
        elif scope_type is NodeType.MOVE_SCOPE:
            found = self.move
        else:
            raise CompileError(f"unknown scope: {type_name(scope_type)}")
        if found is None:
            raise CompileError(f"scope {type_name(scope_type)} is not available here")
        return found


class Compiler:
    """Turns a GAME syntax tree into a Game object."""

    def __init__(self) -> None:
        self.players: PlayersSet | None = None
        self.state: State | None = None
        self.game: Game | None = None

    def create_game(self, tree: SyntaxTree) -> Game:
        """Build the game described by a whole syntax tree."""
        try:
            return self._create_game(tree)
        except (TreeError, DataSetError, GameError) as exc:
            raise CompileError(str(exc)) from exc

    # Main components

    def _create_game(self, tree: SyntaxTree) -> Game:
        players_node = extract(tree, 0, "PLAYERS from GAME")
        state_node = extract(tree, 1, "STATE from GAME")
        main_rule_node = extract(tree, 2, "MAIN_RULE from GAME")
        moves_node = extract(tree, 3, "MOVES from GAME")

        self.players = build_players(players_node)
        self.state = self._create_state(state_node)
        main_rule = self._create_main_rule(main_rule_node)
        moves = self._create_moves(moves_node)

        self.game = Game(self.players, self.state, main_rule, moves)
        return self.game

    @property
    def _players(self) -> PlayersSet:
        if self.players is None:
            raise CompileError("players are not compiled yet")
        return self.players

    @property
    def _state_data(self) -> DataSet:
        if self.state is None:
            raise CompileError("state is not compiled yet")
        return self.state.data

    def _create_state(self, node: SyntaxTree) -> State:
        data = build_data_set(extract(node, 0, "DATA_SET from STATE"))
        setup = self._block(
            extract(node, 1, "INSTRUCTION_BLOCK from STATE"), data, None, VarType.VOID
        )
        return State(data, setup)

    def _create_main_rule(self, node: SyntaxTree) -> MainRule:
        rules = extract(node, 0, "MAIN_RULE_LIST from MAIN_RULE")
        return MainRule(self._create_end_rule(rule) for rule in iter_chain(rules, "END_RULE_LIST"))

    def _create_end_rule(self, node: SyntaxTree) -> EndRule:
        name = extract(node, 0, "IDENTIFIER from END_RULE").text
        condition_node = extract(node, 1, "INSTRUCTION_BLOCK from END_RULE")
        payoff_list = extract(node, 2, "PAYOFF_LIST from END_RULE")

        condition = self._block(condition_node, self._state_data, None, VarType.BOOL)
        payoffs = [self._create_payoff(p) for p in iter_chain(payoff_list, "PAYOFF_LIST")]
        return EndRule(name, condition, payoffs, self._players)

    def _create_payoff(self, node: SyntaxTree) -> Payoff:
        player_class = extract(node, 0, "IDENTIFIER from PAYOFF").text
        block_node = extract(node, 1, "INSTRUCTION_BLOCK from PAYOFF")
        return Payoff(player_class, self._block(block_node, self._state_data, None, VarType.INT))

    def _create_moves(self, node: SyntaxTree) -> Moves:
        move_list = extract(node, 0, "MOVE_LIST from MOVES")
        return Moves(self._create_move(m) for m in iter_chain(move_list, "MOVE_LIST"))

    def _create_move(self, node: SyntaxTree) -> Move:
        name = extract(node, 0, "IDENTIFIER from MOVE").text
        scope_node = extract(node, 1, "PLAYERS_SCOPE from MOVE")
        data_node = extract(node, 2, "DATA_SET from MOVE")
        validation_node = extract(node, 3, "INSTRUCTION_BLOCK from MOVE")
        execution_node = extract(node, 4, "INSTRUCTION_BLOCK from MOVE")

        scope = self._players_scope(scope_node)
        move_data = build_data_set(data_node)
        validation = self._block(validation_node, self._state_data, move_data, VarType.BOOL)
        execution = self._block(execution_node, self._state_data, move_data, VarType.VOID)
        return Move(name, scope, move_data, validation, execution)

    def _players_scope(self, node: SyntaxTree) -> list[str]:
        if node.children_num == 0:
            return players_classes(self._players)
        identifiers = extract(node, 0, "IDENTIFIER_LIST from PLAYERS_SCOPE")
        return [item.text for item in iter_chain(identifiers, "IDENTIFIER_LIST")]

    # Instructions

    def _block(
        self,
        node: SyntaxTree,
        state: DataSet,
        move: DataSet | None,
        return_type: VarType,
    ) -> InstructionBlock:
        local_node = child_of_type(node, NodeType.INSTRUCTION_BLOCK, NodeType.DATA_SET)
        instruction_list = extract(node, 1, "INSTRUCTION_LIST from INSTRUCTION_BLOCK")
        scopes = _Scopes(build_data_set(local_node), state, move)
        block = InstructionBlock(None, return_type)
        entry, _ = self._graph(instruction_list, scopes, block.return_variable)
        block.set_entry_point(entry)
        return block

    def _graph(
        self, node: SyntaxTree, scopes: _Scopes, return_variable: Variable
    ) -> tuple[Instruction | None, list[Instruction]]:
        """Link an instruction list; return its entry and its open exits."""
        entry: Instruction | None = None
        pending: list[Instruction] = []
        while node.type is NodeType.INSTRUCTION_LIST:
            instruction_node = child_of_type(
                node, NodeType.INSTRUCTION_LIST, NodeType.INSTRUCTION
            )
            node = extract(node, 1, "INSTRUCTION_LIST from INSTRUCTION_LIST")
            instruction, exits = self._instruction(instruction_node, scopes, return_variable)
            if entry is None:
                entry = instruction
            else:
                for previous in pending:
                    previous.set_next(instruction)
            pending = exits
        return entry, pending

    def _instruction(
        self, node: SyntaxTree, scopes: _Scopes, return_variable: Variable
    ) -> tuple[Instruction, list[Instruction]]:
        typed = single_child(node, NodeType.INSTRUCTION)
        kind = typed.type
        if kind is NodeType.ASSIGN_INSTR:
            instruction = self._assign(typed, scopes)
            return instruction, [instruction]
        if kind is NodeType.NEXT_PLAYER_INSTR:
            instruction = self._next_player(typed, scopes)
            return instruction, [instruction]
        if kind is NodeType.RETURN_INSTR:
            return self._return(typed, scopes, return_variable), []
        if kind is NodeType.IF_INSTR:
            return self._if(typed, scopes, return_variable)
        if kind is NodeType.WHILE_INSTR:
            return self._while(typed, scopes, return_variable)
        raise CompileError(f"no implementation for instruction type: {type_name(kind)}")

    def _assign(self, node: SyntaxTree, scopes: _Scopes) -> Instruction:
        reference = child_of_type(node, NodeType.ASSIGN_INSTR, NodeType.VAR_REFERENCE)
        expression_node = extract(node, 1, "EXPR from ASSIGN_INSTR")
        data_set, name = self._target(reference, scopes)
        var_type = data_set.get_type(name)
        if var_type is VarType.INT:
            return AssignInt(data_set, name, self._int_expression(expression_node, scopes))
        if var_type is VarType.BOOL:
            return AssignBool(data_set, name, self._bool_expression(expression_node, scopes))
        raise CompileError(f'unknown value type of "{name}"')

    def _return(
        self, node: SyntaxTree, scopes: _Scopes, return_variable: Variable
    ) -> Instruction:
        returns_value = node.children_num == 1
        expected = return_variable.var_type
        if expected is VarType.VOID:
            if returns_value:
                raise CompileError("wrong return type, should be VOID")
            return ReturnVoid()
        if expected not in (VarType.INT, VarType.BOOL):
            raise CompileError(f"unsupported return type {expected}")
        if not returns_value:
            raise CompileError(f"no return value, should be {expected}")
        expression_node = extract(node, 0, "EXPR from RETURN_INSTR")
        if expected is VarType.INT:
            return ReturnInt(self._int_expression(expression_node, scopes), return_variable)
        return ReturnBool(self._bool_expression(expression_node, scopes), return_variable)

    def _if(
        self, node: SyntaxTree, scopes: _Scopes, return_variable: Variable
    ) -> tuple[Instruction, list[Instruction]]:
        condition_node = extract(node, 0, "EXPR from IF_INSTR")
        body_node = extract(node, 1, "INSTRUCTION_LIST from IF_INSTR")
        condition = self._bool_expression(condition_node, scopes)
        body_entry, body_exits = self._graph(body_node, scopes, return_variable)
        jump = ConditionalJump(condition, body_entry)
        return jump, [*body_exits, jump]

    def _while(
        self, node: SyntaxTree, scopes: _Scopes, return_variable: Variable
    ) -> tuple[Instruction, list[Instruction]]:
        condition_node = extract(node, 0, "EXPR from WHILE_INSTR")
        body_node = extract(node, 1, "INSTRUCTION_LIST from WHILE_INSTR")
        condition = self._bool_expression(condition_node, scopes)
        body_entry, body_exits = self._graph(body_node, scopes, return_variable)
        jump = ConditionalJump(condition, body_entry)
        for instruction in body_exits:
            instruction.set_next(jump)
        return jump, [jump]

    def _next_player(self, node: SyntaxTree, scopes: _Scopes) -> Instruction:
        player_class = extract(node, 0, "IDENTIFIER from NEXT_PLAYER_INSTR").text
        id_node = extract(node, 1, "EXPR from NEXT_PLAYER_INSTR")
        return NextPlayer(self._players, player_class, self._int_expression(id_node, scopes))

    # Expressions

    def _int_expression(self, node: SyntaxTree, scopes: _Scopes) -> IntExpression:
        kind = node.type
        if kind is NodeType.EXPR:
            return self._int_expression(extract(node, 0, "EXPR from EXPR"), scopes)
        if kind is NodeType.EXPR_PLAYER_INDEX:
            return PlayerIndex(self._players)
        if kind is NodeType.EXPR_REF:
            reference = extract(node, 0, "VARIABLE_REFERENCE from EXPR")
            data_set, name = self._reference(reference, VarType.INT, scopes)
            return IntReference(data_set, name)
        if kind is NodeType.EXPR_LITERAL:
            text = self._literal_text(node)
            try:
                return IntValue(int(text))
            except ValueError:
                raise CompileError(f"invalid integer literal {text!r}") from None
        if kind is NodeType.EXPR_NEG:
            return Negate(self._int_expression(extract(node, 0, "EXPR A from EXPR"), scopes))
        binary = _INT_BINARY.get(kind)
        if binary is not None:
            left = self._int_expression(extract(node, 0, "EXPR A from EXPR"), scopes)
            right = self._int_expression(extract(node, 1, "EXPR B from EXPR"), scopes)
            return binary(left, right)
        raise CompileError(f'invalid operator "{type_name(kind)}" in INT expression')

    def _bool_expression(self, node: SyntaxTree, scopes: _Scopes) -> BoolExpression:
        kind = node.type
        if kind is NodeType.EXPR:
            return self._bool_expression(extract(node, 0, "EXPR from EXPR"), scopes)
        if kind is NodeType.EXPR_REF:
            reference = extract(node, 0, "VARIABLE_REFERENCE from EXPR")
            data_set, name = self._reference(reference, VarType.BOOL, scopes)
            return BoolReference(data_set, name)
        if kind is NodeType.EXPR_LITERAL:
            return BoolValue(self._literal_text(node) == "true")
        if kind is NodeType.EXPR_NOT:
            return Not(self._bool_expression(extract(node, 0, "EXPR from EXPR"), scopes))
        logical = _BOOL_BINARY.get(kind)
        if logical is not None:
            left = self._bool_expression(extract(node, 0, "EXPR A from EXPR"), scopes)
            right = self._bool_expression(extract(node, 1, "EXPR B from EXPR"), scopes)
            return logical(left, right)
        comparison = _COMPARISONS.get(kind)
        if comparison is not None:
            a = self._int_expression(extract(node, 0, "EXPR A from EXPR"), scopes)
            b = self._int_expression(extract(node, 1, "EXPR B from EXPR"), scopes)
            return comparison(a, b)
        raise CompileError(f'invalid operator "{type_name(kind)}" in BOOL expression')

    @staticmethod
    def _literal_text(node: SyntaxTree) -> str:
        definition = child_of_type(node, NodeType.EXPR_LITERAL, NodeType.VAR_DEFINITION)
        return extract(definition, 0, "value from VAR_DEFINITION").text

    @staticmethod
    def _target(reference: SyntaxTree, scopes: _Scopes) -> tuple[DataSet, str]:
        scope_node = extract(reference, 0, "SCOPE from VARIABLE_REFERENCE")
        name = extract(reference, 1, "IDENTIFIER from VARIABLE_REFERENCE").text
        data_set = scopes.lookup(scope_node.type)
        if name not in data_set:
            raise CompileError(
                f'identifier "{name}" not found in scope: {type_name(scope_node.type)}'
            )
        return data_set, name

    def _reference(
        self, reference: SyntaxTree, required: VarType, scopes: _Scopes
    ) -> tuple[DataSet, str]:
        data_set, name = self._target(reference, scopes)
        if data_set.get_type(name) is not required:
            raise CompileError(f'incorrect type of "{name}", should be {required}')
        return data_set, name


def compile_game(tree: SyntaxTree) -> Game:
    """Build a game from a whole syntax tree with a fresh compiler."""
    return Compiler().create_game(tree)