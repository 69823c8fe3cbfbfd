"""Helpers for walking the parser's syntax tree and building data from it."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

from .datatypes import DataSet, VarType, type_size, var_type_from_name
from .players import Player, PlayersSet
from .syntax import NodeType, SyntaxTree, type_name


class TreeError(Exception):
    """Raised when the syntax tree does not have the expected shape."""


def extract(node: SyntaxTree | None, index: int, what: str) -> SyntaxTree:
    """Return child `index` of `node`; `what` describes it for error messages."""
    if node is None:
        raise TreeError(f"missing node: {what}")
    if node.children_num <= index:
        raise TreeError(
            f"children number is {node.children_num}, and index is {index}: {what}"
        )
    return node.children[index]


def child_of_type(
    node: SyntaxTree | None, parent_type: NodeType, child_type: NodeType
) -> SyntaxTree:
    """Return the first child of type `child_type` in a node of `parent_type`."""
    what = f"{type_name(child_type)} from {type_name(parent_type)}"
    if node is None:
        raise TreeError(f"missing node: {what}")
    if node.type is not parent_type:
        raise TreeError(
            f"node type is {type_name(node.type)}, and should be {type_name(parent_type)}"
        )
    found = next((child for child in node.children if child.type is child_type), None)
    if found is None:
        raise TreeError(
            f"not found {type_name(child_type)} in {type_name(parent_type)}"
        )
    return found


def single_child(node: SyntaxTree | None, parent_type: NodeType) -> SyntaxTree:
    """Return the only child of a node of `parent_type`."""
    if node is None:
        raise TreeError(f"missing node: single from {type_name(parent_type)}")
    if node.type is not parent_type:
        raise TreeError(
            f"node type is {type_name(node.type)}, and should be {type_name(parent_type)}"
        )
    if node.children_num != 1:
        raise TreeError(
            f"{type_name(node.type)} has {node.children_num} children and should have 1"
        )
    return node.children[0]


def iter_chain(node: SyntaxTree | None, what: str) -> Iterator[SyntaxTree]:
    """Yield the items of a non-empty right-recursive list node.

    Each list node holds an item and, when it has two children, the rest of
    the list as its second child.
    """
    while True:
        yield extract(node, 0, f"item of {what}")
        assert node is not None
        if node.children_num != 2:
            return
        node = extract(node, 1, f"tail of {what}")


@dataclass(frozen=True)
class Declaration:
    """A variable declaration: type keyword, name and initial value text."""

    type_name: str
    name: str
    value: str

    @property
    def var_type(self) -> VarType:
        return var_type_from_name(self.type_name)


def _read_declaration(node: SyntaxTree) -> Declaration:
    var_type = extract(node, 0, "type from VAR_DECLARATION")
    type_text = extract(var_type, 0, "type from VAR_DECLARATION").text
    name = extract(node, 1, "identifier from VAR_DECLARATION").text
    definition = extract(node, 2, "value from VAR_DECLARATION")
    value = extract(definition, 0, "value from VAR_DECLARATION").text
    return Declaration(type_text, name, value)


def read_declarations(data_set_node: SyntaxTree | None) -> list[Declaration]:
    """Read the declarations of a DATA_SET node, in source order."""
    var_list = extract(data_set_node, 0, "VAR_LIST from DATA_SET")
    declarations = []
    while var_list.children_num == 2:
        declarations.append(
            _read_declaration(extract(var_list, 0, "VAR_DECLARATION from VAR_LIST"))
        )
        var_list = extract(var_list, 1, "VAR_LIST from VAR_LIST")
    return declarations


def _parse_int(text: str, what: str) -> int:
    try:
        return int(text)
    except ValueError:
        raise TreeError(f"invalid integer {text!r}: {what}") from None


def build_data_set(data_set_node: SyntaxTree | None) -> DataSet:
    """Create a data set holding the declared variables with their initial values."""
    declarations = read_declarations(data_set_node)
    data_set = DataSet(sum(type_size(d.type_name) for d in declarations))
    for declaration in declarations:
        var_type = declaration.var_type
        data_set.define_variable(
            declaration.name, var_type, type_size(declaration.type_name)
        )
        if var_type is VarType.INT:
            data_set.set_int(
                declaration.name, _parse_int(declaration.value, declaration.name)
            )
        else:
            data_set.set_bool(declaration.name, declaration.value == "true")
    return data_set


def build_players(players_node: SyntaxTree | None) -> PlayersSet:
    """Create the players of every declared class, indexed from zero."""
    players_list = extract(players_node, 0, "PLAYERS_LIST from PLAYERS")
    players: list[Player] = []
    for player_class in iter_chain(players_list, "PLAYERS_LIST"):
        identifier = extract(player_class, 0, "IDENTIFIER from PLAYER_CLASS").text
        size_text = extract(player_class, 1, "CLASS_SIZE from PLAYER_CLASS").text
        class_size = _parse_int(size_text, identifier)
        players.extend(Player(identifier, index) for index in range(class_size))
    return PlayersSet(players)


def players_classes(players_set: PlayersSet) -> list[str]:
    """Return the distinct player classes in order of first appearance."""
    return list(dict.fromkeys(player.player_class for player in players_set))