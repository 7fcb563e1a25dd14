# json_values.py
# Immutable value tree produced by json_parser.parse().
#
# The variant set is closed: exactly one dataclass per JSON type. Objects keep
# every (key, value) pair in source order, repeated keys included; collapsing
# duplicates is left to the consumer (see JsonObject.get / to_python).

from dataclasses import dataclass
from typing import Any, Iterator, List, Tuple, Union


@dataclass(frozen=True)
class JsonNull:
    pass


@dataclass(frozen=True)
class JsonBool:
    value: bool


@dataclass(frozen=True)
class JsonNumber:
    """
    Number kept as its verbatim lexeme.

    Interpreting the lexeme is deferred so that magnitudes outside the range
    of a float (``1e400``) or integers with more digits than a float can hold
    survive the parse unchanged.
    """
    lexeme: str

    @property
    def is_integer(self) -> bool:
        return not any(c in self.lexeme for c in ".eE")

    def to_python(self) -> Union[int, float]:
        return _lexeme_to_int(self.lexeme) if self.is_integer else float(self.lexeme)


# int(str) refuses more than sys.get_int_max_str_digits() digits (4300 by
# default since 3.11); longer integer lexemes are converted in chunks below it.
_INT_CHUNK_DIGITS = 1000


def _lexeme_to_int(lexeme: str) -> int:
    if len(lexeme) <= _INT_CHUNK_DIGITS:
        return int(lexeme)
    digits = lexeme.lstrip("-")
    result = 0
    for i in range(0, len(digits), _INT_CHUNK_DIGITS):
        chunk = digits[i:i + _INT_CHUNK_DIGITS]
        result = result * 10 ** len(chunk) + int(chunk)
    return -result if lexeme.startswith("-") else result


@dataclass(frozen=True)
class JsonString:
    value: str


@dataclass(frozen=True)
class JsonArray:
    items: Tuple["Value", ...] = ()

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator["Value"]:
        return iter(self.items)

    def __getitem__(self, index: int) -> "Value":
        return self.items[index]


_MISSING = object()


@dataclass(frozen=True)
class JsonObject:
    members: Tuple[Tuple[str, "Value"], ...] = ()

    def __len__(self) -> int:
        return len(self.members)

    def keys(self) -> List[str]:
        """Distinct keys in order of first appearance."""
        return list(dict.fromkeys(key for key, _ in self.members))

    def get(self, key: str, default: Any = None) -> Any:
        """Value of the last pair named ``key``."""
        found = _MISSING
        for name, value in self.members:
            if name == key:
                found = value
        return default if found is _MISSING else found

    def get_all(self, key: str) -> List["Value"]:
        return [value for name, value in self.members if name == key]


Value = Union[JsonNull, JsonBool, JsonNumber, JsonString, JsonArray, JsonObject]


def _convert_shallow(value: Value) -> Any:
    """Scalars convert fully; containers convert to an empty list or dict."""
    if isinstance(value, JsonNull):
        return None
    if isinstance(value, (JsonBool, JsonString)):
        return value.value
    if isinstance(value, JsonNumber):
        return value.to_python()
    if isinstance(value, JsonArray):
        return []
    if isinstance(value, JsonObject):
        return {}
    raise TypeError(f"not a JSON value: {value!r}")


def to_python(value: Value) -> Any:
    """
    Convert a value tree to plain Python objects.

    Objects become dicts where the last occurrence of a repeated key wins.
    Containers are filled from an explicit stack, so any depth the parser
    accepts converts without recursion.
    """
    result = _convert_shallow(value)
    stack = [(value, result)]
    while stack:
        node, target = stack.pop()
        if isinstance(node, JsonArray):
            for item in node.items:
                converted = _convert_shallow(item)
                target.append(converted)
                if isinstance(item, (JsonArray, JsonObject)):
                    stack.append((item, converted))
        elif isinstance(node, JsonObject):
            # keys are assigned in source order, so a repeated key keeps its last value
            for key, item in node.members:
                converted = _convert_shallow(item)
                target[key] = converted
                if isinstance(item, (JsonArray, JsonObject)):
                    stack.append((item, converted))
    return result


__all__ = [
    "JsonNull",
    "JsonBool",
    "JsonNumber",
    "JsonString",
    "JsonArray",
    "JsonObject",
    "Value",
    "to_python",
]
