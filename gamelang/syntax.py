"""Syntax tree nodes produced by the game-description parser."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field


class NodeType(enum.Enum):
    """Kinds of syntax tree nodes, in grammar order."""

    KW_MAIN_RULE = enum.auto()
    TMP_STATE = enum.auto()
    TMP_MOVES = enum.auto()
    KW_PLAYERS = enum.auto()
    TMP_PLAYERS_LIST = enum.auto()
    KW_STATE = enum.auto()
    KW_INT = enum.auto()
    KW_BOOL = enum.auto()
    KW_RETURN = enum.auto()
    KW_IF = enum.auto()
    KW_WHILE = enum.auto()
    IDENTIFIER = enum.auto()
    INTEGER = enum.auto()
    BOOLEAN = enum.auto()
    SYNTAX_CHAR = enum.auto()
    TMP = enum.auto()

    GAME = enum.auto()
    MAIN_RULE = enum.auto()
    PLAYERS = enum.auto()
    PLAYERS_LIST = enum.auto()
    PLAYER = enum.auto()
    STATE = enum.auto()
    MOVES = enum.auto()
    DATA_SET = enum.auto()
    VAR_LIST = enum.auto()
    VAR_LIST_TAIL = enum.auto()
    VAR_DECLARATION = enum.auto()
    VAR_TYPE = enum.auto()
    VAR_DEFINITION = enum.auto()
    INSTRUCTION_BLOCK = enum.auto()
    INSTRUCTION_LIST = enum.auto()
    INSTRUCTION = enum.auto()
    ASSIGN_INSTR = enum.auto()
    RETURN_INSTR = enum.auto()
    IF_INSTR = enum.auto()
    WHILE_INSTR = enum.auto()
    NEXT_PLAYER_INSTR = enum.auto()
    EXPR = enum.auto()
    EXPR_PLAYER_INDEX = enum.auto()
    EXPR_REF = enum.auto()
    EXPR_LITERAL = enum.auto()
    EXPR_ADD = enum.auto()
    EXPR_SUB = enum.auto()
    EXPR_MUL = enum.auto()
    EXPR_DIV = enum.auto()
    EXPR_MOD = enum.auto()
    EXPR_NEG = enum.auto()
    EXPR_EQUAL = enum.auto()
    EXPR_NOT_EQUAL = enum.auto()
    EXPR_LESS_EQUAL = enum.auto()
    EXPR_GREATER_EQUAL = enum.auto()
    EXPR_GREATER = enum.auto()
    EXPR_LESS = enum.auto()
    EXPR_AND = enum.auto()
    EXPR_OR = enum.auto()
    EXPR_NOT = enum.auto()
    VAR_REFERENCE = enum.auto()
    LOCAL_SCOPE = enum.auto()
    STATE_SCOPE = enum.auto()
    MOVE_SCOPE = enum.auto()
    M_RULE_LIST = enum.auto()
    M_RULE = enum.auto()
    PAYOFF_LIST = enum.auto()
    PAYOFF = enum.auto()
    MOVE_LIST = enum.auto()
    MOVE = enum.auto()
    PLAYERS_SCOPE = enum.auto()
    IDENTIFIER_LIST = enum.auto()
    INSTRUCTION_LIST_TAIL = enum.auto()


_UNNAMED = frozenset({NodeType.KW_IF, NodeType.KW_WHILE})
UNNAMED = "Name not assigned"


def type_name(node_type: NodeType) -> str:
    """Return the display name of a node type."""
    if node_type in _UNNAMED:
        return UNNAMED
    return node_type.name.lower()


@dataclass
class SyntaxTree:
    """A node of the syntax tree: a type, the matched text and children."""

    type: NodeType
    text: str = ""
    children: list[SyntaxTree] = field(default_factory=list)

    @property
    def children_num(self) -> int:
        return len(self.children)

    def format(self, depth: int = 0) -> str:
        """Render the subtree, indenting two spaces per level."""
        head = "  " * depth + f"{type_name(self.type)}: "
        if not self.children:
            return f"{head}{self.text or ''}\n"
        return head + "\n" + "".join(child.format(depth + 1) for child in self.children)

    def __str__(self) -> str:
        return self.format(0)