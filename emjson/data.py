"""JSON value model and the enumerations shared by the parser."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any, Optional


class State(IntEnum):
    """Parser automaton states."""

    TYPE_CHECK = 0
    BOOLEAN_NULL_HANDLER = 1
    OBJECT_HANDLER = 2
    ARRAY_HANDLER = 3
    STRING_HANDLER = 4
    NUMBER_HANDLER = 5
    KEY_HANDLER = 6
    MAIN_OBJ = 7


class TokenType(IntEnum):
    """Kinds of lexical token."""

    OP_BRACE = 0
    CLOSE_BRACE = 1
    STRING = 2
    NUMBER = 3
    OP_BRACKET = 4
    CLOSE_BRACKET = 5
    NULL = 6
    COMMA = 7
    COLON = 8
    TRUE = 9
    FALSE = 10
    IGNORES = 11


class DataType(Enum):
    """Kind of value held by :class:`JsonData`."""

    NUMBER = 0
    STRING = 1
    ARRAY = 2
    OBJECT = 3
    NULLVAL = 4
    BOOLEAN = 5


class ParseStatus(Enum):
    """Outcome of feeding text to the parser."""

    MORE_INPUT_OR_UNKNOWN_CHAR = 0
    JSON_SYNTAX_ERROR = 1
    SUCCESS = 2


def _infer_type(value: Any) -> DataType:
    if value is None:
        return DataType.NULLVAL
    if isinstance(value, bool):
        return DataType.BOOLEAN
    if isinstance(value, float):
        return DataType.NUMBER
    if isinstance(value, str):
        return DataType.STRING
    if isinstance(value, list):
        return DataType.ARRAY
    return DataType.OBJECT


def _coerce(value: Any) -> Any:
    if value is None or isinstance(value, (bool, str)):
        return value
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, (list, tuple)):
        return [_wrap(item) for item in value]
    if isinstance(value, dict):
        for key in value:
            if not isinstance(key, str):
                raise TypeError(f"object keys must be str, got {type(key).__name__}")
        return {key: _wrap(item) for key, item in value.items()}
    raise TypeError(f"unsupported JSON value type: {type(value).__name__}")


def _wrap(value: Any) -> "JsonData":
    return value if isinstance(value, JsonData) else JsonData(value)


@dataclass
class JsonData:
    """A JSON value tagged with its :class:`DataType`.

    Numbers are stored as floats; array elements and object members are
    themselves :class:`JsonData`. When ``type`` is omitted it is inferred
    from the value.
    """

    value: Any = None
    type: Optional[DataType] = None

    def __post_init__(self) -> None:
        if isinstance(self.value, JsonData):
            other = self.value
            self.value = other.value
            if self.type is None:
                self.type = other.type
            return
        self.value = _coerce(self.value)
        if self.type is None:
            self.type = _infer_type(self.value)

    def as_number(self) -> Optional[float]:
        """The number held, or ``None`` if the value is not a number."""
        if isinstance(self.value, float):
            return self.value
        return None

    def as_string(self) -> Optional[str]:
        """The string held, or ``None``."""
        return self.value if isinstance(self.value, str) else None

    def as_array(self) -> Optional[list["JsonData"]]:
        """The element list held, or ``None``."""
        return self.value if isinstance(self.value, list) else None

    def as_bool(self) -> Optional[bool]:
        """The boolean held, or ``None``."""
        return self.value if isinstance(self.value, bool) else None

    def as_object(self) -> Optional[dict[str, "JsonData"]]:
        """The member mapping held, or ``None``."""
        return self.value if isinstance(self.value, dict) else None

    def is_null(self) -> bool:
        """Whether the value held is null."""
        return self.value is None