import pytest

from gamelang.syntax import UNNAMED, NodeType, SyntaxTree, type_name


def test_type_name_of_game():
    assert type_name(NodeType.GAME) == "game"


def test_type_name_of_expression_kinds():
    assert type_name(NodeType.EXPR_GREATER_EQUAL) == "expr_greater_equal"
    assert type_name(NodeType.INSTRUCTION_LIST_TAIL) == "instruction_list_tail"


@pytest.mark.parametrize("node_type", [NodeType.KW_IF, NodeType.KW_WHILE])
def test_unnamed_keywords(node_type):
    assert type_name(node_type) == "Name not assigned"
    assert UNNAMED == "Name not assigned"


def test_named_types_are_lowercase_member_names():
    named = [t for t in NodeType if t not in (NodeType.KW_IF, NodeType.KW_WHILE)]
    for node_type in named:
        assert type_name(node_type) == node_type.name.lower()


def test_grammar_order_is_kept():
    names = [type_name(t) for t in NodeType]
    assert names[0] == "kw_main_rule"
    assert names[-1] == "instruction_list_tail"
    assert names.index("tmp") < names.index("game")


def test_leaf_format():
    leaf = SyntaxTree(NodeType.IDENTIFIER, "alpha")
    assert leaf.format(0) == "identifier: alpha\n"
    assert leaf.children_num == 0


def test_nested_format_indents_children():
    tree = SyntaxTree(
        NodeType.VAR_DECLARATION,
        children=[
            SyntaxTree(NodeType.VAR_TYPE, children=[SyntaxTree(NodeType.KW_INT, "INT")]),
            SyntaxTree(NodeType.IDENTIFIER, "x"),
        ],
    )
    lines = tree.format(1).splitlines()
    assert lines[0] == "  var_declaration: "
    assert lines[1] == "    var_type: "
    assert lines[2] == "      kw_int: INT"
    assert lines[3] == "    identifier: x"
    assert tree.children_num == 2


def test_str_matches_format_at_depth_zero():
    tree = SyntaxTree(NodeType.STATE, children=[SyntaxTree(NodeType.INTEGER, "3")])
    assert str(tree) == tree.format(0)