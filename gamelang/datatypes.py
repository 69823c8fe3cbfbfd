"""Variable types and typed variable storage."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Iterator


class VarType(enum.Enum):
    INT = "INT"
    BOOL = "BOOL"
    VOID = "VOID"
    UNKNOWN = "UNKNOWN"

    def __str__(self) -> str:
        return self.value


class DataSetError(Exception):
    """Raised for unknown names, wrong types or a full data set."""


_SIZES = {"INT": 4, "BOOL": 1}


def var_type_from_name(name: str) -> VarType:
    """Map a type keyword ("INT" or "BOOL") to its VarType."""
    if name == "INT":
        return VarType.INT
    if name == "BOOL":
        return VarType.BOOL
    raise DataSetError(f"unknown type: {name}")


def type_size(name: str) -> int:
    """Return the storage size in bytes of a type keyword."""
    try:
        return _SIZES[name]
    except KeyError:
        raise DataSetError(f"unknown type: {name}") from None


def format_value(value: object, var_type: VarType) -> str:
    """Render a value the way the game language writes it."""
    if var_type is VarType.INT:
        return str(int(value))
    if var_type is VarType.BOOL:
        return "true" if value else "false"
    return ""


def _default(var_type: VarType) -> object:
    if var_type is VarType.INT:
        return 0
    if var_type is VarType.BOOL:
        return False
    return None


def _check_value(var_type: VarType, value: object) -> None:
    if var_type is VarType.INT:
        if isinstance(value, bool) or not isinstance(value, int):
            raise DataSetError(f"value {value!r} is not of type INT")
    elif var_type is VarType.BOOL:
        if not isinstance(value, bool):
            raise DataSetError(f"value {value!r} is not of type BOOL")
    else:
        raise DataSetError(f"cannot store a value of type {var_type}")


@dataclass
class _Slot:
    offset: int
    var_type: VarType
    value: object


class DataSet:
    """A fixed-capacity set of named, typed variables."""

    def __init__(self, size: int) -> None:
        if size < 0:
            raise DataSetError("data set size cannot be negative")
        self.size = size
        self.used = 0
        self._slots: dict[str, _Slot] = {}

    def __contains__(self, name: object) -> bool:
        return name in self._slots

    def __iter__(self) -> Iterator[str]:
        return iter(self._slots)

    def __len__(self) -> int:
        return len(self._slots)

    def _slot(self, name: str) -> _Slot:
        try:
            return self._slots[name]
        except KeyError:
            raise DataSetError(f'identifier "{name}" not found in scope') from None

    def define_variable(self, name: str, var_type: VarType, size: int) -> None:
        """Declare a variable taking `size` bytes of the set's capacity."""
        if self.used + size > self.size:
            raise DataSetError(f'no room for "{name}" in data set')
        if name in self._slots:
            raise DataSetError(f'identifier "{name}" already defined')
        self._slots[name] = _Slot(self.used, var_type, _default(var_type))
        self.used += size

    def get(self, name: str) -> object:
        return self._slot(name).value

    def get_type(self, name: str) -> VarType:
        return self._slot(name).var_type

    def set(self, name: str, value: object) -> None:
        """Store a value, checking it against the declared type."""
        slot = self._slot(name)
        _check_value(slot.var_type, value)
        slot.value = value

    def set_int(self, name: str, value: int) -> None:
        slot = self._slot(name)
        if slot.var_type is not VarType.INT:
            raise DataSetError(f'identifier "{name}" is not type INT')
        _check_value(VarType.INT, value)
        slot.value = value

    def set_bool(self, name: str, value: bool) -> None:
        slot = self._slot(name)
        if slot.var_type is not VarType.BOOL:
            raise DataSetError(f'identifier "{name}" is not type BOOL')
        _check_value(VarType.BOOL, value)
        slot.value = value

    def format(self) -> str:
        """One line per variable: type, name and value."""
        return "".join(
            f"{slot.var_type} {name} {format_value(slot.value, slot.var_type)}\n"
            for name, slot in self._slots.items()
        )


class Variable:
    """A single typed value, used to carry an instruction block's result."""

    def __init__(self, var_type: VarType) -> None:
        self.var_type = var_type
        self.value = _default(var_type)

    def _require(self, wanted: VarType) -> None:
        if self.var_type is not wanted:
            raise DataSetError(
                f"wrong type requested: current type {self.var_type}, requested {wanted}"
            )

    def set_int(self, value: int) -> None:
        self._require(VarType.INT)
        _check_value(VarType.INT, value)
        self.value = value

    def set_bool(self, value: bool) -> None:
        self._require(VarType.BOOL)
        _check_value(VarType.BOOL, value)
        self.value = value

    def get_int(self) -> int:
        self._require(VarType.INT)
        return self.value  # type: ignore[return-value]

    def get_bool(self) -> bool:
        self._require(VarType.BOOL)
        return self.value  # type: ignore[return-value]