"""Integer and boolean expressions evaluated against live game data."""

from __future__ import annotations

from dataclasses import dataclass

from .datatypes import DataSet, DataSetError, VarType
from .players import PlayerError, PlayersSet


def _require_type(data_set: DataSet, name: str, wanted: VarType) -> None:
    actual = data_set.get_type(name)
    if actual is not wanted:
        raise DataSetError(f'incorrect type of "{name}": is {actual}, should be {wanted}')


class IntExpression:
    """An expression yielding an integer."""

    def evaluate(self) -> int:
        return 0


class BoolExpression:
    """An expression yielding a boolean."""

    def evaluate(self) -> bool:
        return False


@dataclass
class IntValue(IntExpression):
    """A constant integer."""

    value: int

    def evaluate(self) -> int:
        return self.value


@dataclass
class IntReference(IntExpression):
    """Reads an INT variable from a data set each time it is evaluated."""

    data_set: DataSet
    name: str

    def __post_init__(self) -> None:
        _require_type(self.data_set, self.name, VarType.INT)

    def evaluate(self) -> int:
        return self.data_set.get(self.name)  # type: ignore[return-value]


@dataclass
class PlayerIndex(IntExpression):
    """The index, within its class, of the player currently on move."""

    players: PlayersSet

    def evaluate(self) -> int:
        if self.players.current is None:
            raise PlayerError("no player is on move")
        return self.players.current.player_id


@dataclass
class Negate(IntExpression):
    operand: IntExpression

    def evaluate(self) -> int:
        return -self.operand.evaluate()


@dataclass
class _IntBinary(IntExpression):
    left: IntExpression
    right: IntExpression


class Add(_IntBinary):
    def evaluate(self) -> int:
        return self.left.evaluate() + self.right.evaluate()


class Subtract(_IntBinary):
    def evaluate(self) -> int:
        return self.left.evaluate() - self.right.evaluate()


class Multiply(_IntBinary):
    def evaluate(self) -> int:
        return self.left.evaluate() * self.right.evaluate()


def _truncated_div(a: int, b: int) -> int:
    quotient = abs(a) // abs(b)
    return quotient if (a < 0) == (b < 0) else -quotient


class Divide(_IntBinary):
    """Integer division truncating toward zero."""

    def evaluate(self) -> int:
        return _truncated_div(self.left.evaluate(), self.right.evaluate())


class Modulo(_IntBinary):
    """Remainder whose sign follows the dividend."""

    def evaluate(self) -> int:
        a, b = self.left.evaluate(), self.right.evaluate()
        return a - b * _truncated_div(a, b)


@dataclass
class BoolValue(BoolExpression):
    """A constant boolean."""

    value: bool

    def evaluate(self) -> bool:
        return self.value


@dataclass
class BoolReference(BoolExpression):
    """Reads a BOOL variable from a data set each time it is evaluated."""

    data_set: DataSet
    name: str

    def __post_init__(self) -> None:
        _require_type(self.data_set, self.name, VarType.BOOL)

    def evaluate(self) -> bool:
        return self.data_set.get(self.name)  # type: ignore[return-value]


@dataclass
class Not(BoolExpression):
    operand: BoolExpression

    def evaluate(self) -> bool:
        return not self.operand.evaluate()


@dataclass
class _BoolBinary(BoolExpression):
    left: BoolExpression
    right: BoolExpression


class And(_BoolBinary):
    def evaluate(self) -> bool:
        return self.left.evaluate() and self.right.evaluate()


class Or(_BoolBinary):
    def evaluate(self) -> bool:
        return self.left.evaluate() or self.right.evaluate()


@dataclass
class _Comparison(BoolExpression):
    left: IntExpression
    right: IntExpression


class Equal(_Comparison):
    def evaluate(self) -> bool:
        return self.left.evaluate() == self.right.evaluate()


class NotEqual(_Comparison):
    def evaluate(self) -> bool:
        return self.left.evaluate() != self.right.evaluate()


class GreaterEqual(_Comparison):
    def evaluate(self) -> bool:
        return self.left.evaluate() >= self.right.evaluate()


class LessEqual(_Comparison):
    def evaluate(self) -> bool:
        return self.left.evaluate() <= self.right.evaluate()


class Greater(_Comparison):
    def evaluate(self) -> bool:
        return self.left.evaluate() > self.right.evaluate()


class Less(_Comparison):
    def evaluate(self) -> bool:
        return self.left.evaluate() < self.right.evaluate()