# json_errors.py
# Error taxonomy shared by the JSON lexer and parser.
#
# Two layers, both subclasses of SyntaxError so callers that only care about
# "valid or not" can keep catching the builtin:
#
#   LexicalError  - raised by json_lexer while classifying bytes into tokens
#   GrammarError  - raised by json_parser while assembling tokens into values
#
# Every error carries the byte offset where the problem was detected.

from typing import Optional, Tuple


class JSONError(SyntaxError):
    """Base class for every lexical and grammar failure."""

    def __init__(self, position: int, message: str):
        super().__init__(f"{message} at offset {position}")
        self.position = position
        self.message = message

    @property
    def kind(self) -> str:
        return type(self).__name__


# ---------------------------------------------------------------------------
# LEXICAL ERRORS
# ---------------------------------------------------------------------------
class LexicalError(JSONError):
    pass


class UnexpectedCharacter(LexicalError):
    pass


class UnterminatedString(LexicalError):
    pass


class InvalidEscapeSequence(LexicalError):
    pass


class InvalidNumberFormat(LexicalError):
    pass


# ---------------------------------------------------------------------------
# GRAMMAR ERRORS
# ---------------------------------------------------------------------------
class GrammarError(JSONError):
    pass


class UnexpectedToken(GrammarError):
    def __init__(self, position: int, expected: str, found: str):
        super().__init__(position, f"expected {expected}, found {found}")
        self.expected = expected
        self.found = found


class UnexpectedEndOfInput(GrammarError):
    def __init__(self, position: int, expected: Optional[str] = None):
        message = "unexpected end of input"
        if expected is not None:
            message += f" - expected {expected}"
        super().__init__(position, message)
        self.expected = expected


class TrailingContent(GrammarError):
    def __init__(self, position: int):
        super().__init__(position, "extra data after root value")


class MaxDepthExceeded(GrammarError):
    def __init__(self, position: int, limit: int):
        super().__init__(position, f"nesting deeper than {limit} levels")
        self.limit = limit


class DuplicateKey(GrammarError):
    def __init__(self, position: int, key: str):
        super().__init__(position, f"duplicate key {key!r}")
        self.key = key


def locate(data: bytes, position: int) -> Tuple[int, int]:
    """Map a byte offset to a 1-based (line, column) pair, counting LF as the line break."""
    position = max(0, min(position, len(data)))
    line = data.count(b"\n", 0, position) + 1
    column = position - (data.rfind(b"\n", 0, position) + 1) + 1
    return line, column


__all__ = [
    "JSONError",
    "LexicalError",
    "UnexpectedCharacter",
    "UnterminatedString",
    "InvalidEscapeSequence",
    "InvalidNumberFormat",
    "GrammarError",
    "UnexpectedToken",
    "UnexpectedEndOfInput",
    "TrailingContent",
    "MaxDepthExceeded",
    "DuplicateKey",
    "locate",
]
