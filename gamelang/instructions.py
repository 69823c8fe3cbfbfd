"""Instructions linked into graphs and the blocks that run them."""

from __future__ import annotations

from .datatypes import DataSet, DataSetError, Variable, VarType
from .expressions import BoolExpression, IntExpression
from .players import PlayersSet


class Instruction:
    """A step in an instruction graph; running it yields the next step."""

    def __init__(self, next_instruction: Instruction | None = None) -> None:
        self.next = next_instruction

    def set_next(self, next_instruction: Instruction | None) -> None:
        self.next = next_instruction

    def run(self) -> Instruction | None:
        return self.next


class AssignInt(Instruction):
    """Stores the value of an integer expression in an INT variable."""

    def __init__(self, data_set: DataSet, name: str, expression: IntExpression) -> None:
        super().__init__()
        if data_set.get_type(name) is not VarType.INT:
            raise DataSetError(f'identifier "{name}" is not type INT')
        self.data_set = data_set
        self.name = name
        self.expression = expression

    def run(self) -> Instruction | None:
        self.data_set.set_int(self.name, self.expression.evaluate())
        return self.next


class AssignBool(Instruction):
    """Stores the value of a boolean expression in a BOOL variable."""

    def __init__(self, data_set: DataSet, name: str, expression: BoolExpression) -> None:
        super().__init__()
        if data_set.get_type(name) is not VarType.BOOL:
            raise DataSetError(f'identifier "{name}" is not type BOOL')
        self.data_set = data_set
        self.name = name
        self.expression = expression

    def run(self) -> Instruction | None:
        self.data_set.set_bool(self.name, self.expression.evaluate())
        return self.next


class ConditionalJump(Instruction):
    """Goes to `if_true` when the condition holds, otherwise to the next step."""

    def __init__(self, condition: BoolExpression, if_true: Instruction | None) -> None:
        super().__init__()
        self.condition = condition
        self.if_true = if_true

    def run(self) -> Instruction | None:
        if self.condition.evaluate():
            return self.if_true
        return self.next


class NextPlayer(Instruction):
    """Puts the player of a class with the evaluated index on move."""

    def __init__(
        self, players: PlayersSet, player_class: str, id_expression: IntExpression
    ) -> None:
        super().__init__()
        self.players = players
        self.player_class = player_class
        self.id_expression = id_expression

    def run(self) -> Instruction | None:
        self.players.set_next_player(self.player_class, self.id_expression.evaluate())
        return self.next


class ReturnVoid(Instruction):
    """Ends the block without a value."""

    def run(self) -> Instruction | None:
        return None


class ReturnInt(Instruction):
    """Ends the block, storing an integer result."""

    def __init__(self, expression: IntExpression, return_variable: Variable) -> None:
        super().__init__()
        if return_variable.var_type is not VarType.INT:
            raise DataSetError(f"wrong return type, should be {return_variable.var_type}")
        self.expression = expression
        self.return_variable = return_variable

    def run(self) -> Instruction | None:
        self.return_variable.set_int(self.expression.evaluate())
        return None


class ReturnBool(Instruction):
    """Ends the block, storing a boolean result."""

    def __init__(self, expression: BoolExpression, return_variable: Variable) -> None:
        super().__init__()
        if return_variable.var_type is not VarType.BOOL:
            raise DataSetError(f"wrong return type, should be {return_variable.var_type}")
        self.expression = expression
        self.return_variable = return_variable

    def run(self) -> Instruction | None:
        self.return_variable.set_bool(self.expression.evaluate())
        return None


class InstructionBlock:
    """An instruction graph with an entry point and a typed return slot."""

    def __init__(self, entry: Instruction | None, return_type: VarType) -> None:
        self.entry_point = entry
        self.return_variable = Variable(return_type)

    def set_entry_point(self, entry: Instruction | None) -> None:
        self.entry_point = entry

    def run(self) -> object:
        """Follow the graph until it ends and return the block's result."""
        instruction = self.entry_point
        while instruction is not None:
            instruction = instruction.run()
        return self.return_variable.value