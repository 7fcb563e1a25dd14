# json_lexer.py
# Byte-level JSON scanner.
#
# =============================================================================
#  SCANNER DESIGN
# =============================================================================
#
# The scanner is a generator: the parser pulls one token at a time, so no
# token list is ever materialised. Dispatch happens on the first byte of each
# lexeme; numbers, keywords and plain string runs are matched with compiled
# regexes anchored at the cursor, everything else is handled byte by byte.
#
# Offsets are byte offsets into the input buffer. The buffer is never
# decoded as a whole: only the contents of string literals are decoded as
# UTF-8, so any non-ASCII byte outside a string is an unexpected character.
# =============================================================================

import enum
import re
from typing import Iterator, List, NamedTuple, Tuple, Union

from json_errors import (
    InvalidEscapeSequence,
    InvalidNumberFormat,
    UnexpectedCharacter,
    UnterminatedString,
)

# ---------------------------------------------------------------------------
# TOKEN RECORD
# ---------------------------------------------------------------------------
class TokenKind(enum.Enum):
    LEFT_BRACE = "LeftBrace"
    RIGHT_BRACE = "RightBrace"
    LEFT_BRACKET = "LeftBracket"
    RIGHT_BRACKET = "RightBracket"
    COLON = "Colon"
    COMMA = "Comma"
    STRING = "StringLiteral"
    NUMBER = "NumberLiteral"
    TRUE = "True"
    FALSE = "False"
    NULL = "Null"
    END = "EndOfInput"


class Token(NamedTuple):
    """
    Immutable token record: (kind, value, offset).

    ``value`` is the decoded text for strings, the verbatim lexeme for
    numbers, the Python constant for keywords and the character itself for
    punctuation.
    """
    kind: TokenKind
    value: object
    offset: int

    def describe(self) -> str:
        if self.kind is TokenKind.END:
            return "end of input"
        return f"{self.kind.value} {self.value!r}"


# ---------------------------------------------------------------------------
# REGEX BLUEPRINT
# ---------------------------------------------------------------------------
_WHITESPACE = re.compile(rb"[ \t\n\r]+")
_NUMBER = re.compile(rb"-?(?:0|[1-9][0-9]*)(?:\.[0-9]+)?(?:[eE][+-]?[0-9]+)?")
_WORD = re.compile(rb"[A-Za-z_][A-Za-z0-9_]*")
# Everything a reader would take as part of one malformed number, for diagnostics.
_NUMBER_JUNK = re.compile(rb"[0-9A-Za-z_.+-]+")
_STRING_RUN = re.compile(rb'[^"\\\x00-\x1f]+')
_HEX4 = re.compile(rb"[0-9A-Fa-f]{4}")

# Bytes that may not directly follow a complete number lexeme.
_NUMBER_TAIL = frozenset(b"0123456789.+-eE") | frozenset(
    b"abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ_"
)

_PUNCTUATION = {
    ord("{"): TokenKind.LEFT_BRACE,
    ord("}"): TokenKind.RIGHT_BRACE,
    ord("["): TokenKind.LEFT_BRACKET,
    ord("]"): TokenKind.RIGHT_BRACKET,
    ord(":"): TokenKind.COLON,
    ord(","): TokenKind.COMMA,
}

_KEYWORDS = {
    b"true": (TokenKind.TRUE, True),
    b"false": (TokenKind.FALSE, False),
    b"null": (TokenKind.NULL, None),
}

_SIMPLE_ESCAPES = {
    ord('"'): '"',
    ord("\\"): "\\",
    ord("/"): "/",
    ord("b"): "\b",
    ord("f"): "\f",
    ord("n"): "\n",
    ord("r"): "\r",
    ord("t"): "\t",
}

_QUOTE = ord('"')
_BACKSLASH = ord("\\")
_NUMBER_START = frozenset(b"-0123456789")
_LINE_BREAKS = (ord("\n"), ord("\r"))

Buffer = Union[bytes, bytearray, memoryview, str]


def _as_bytes(data: Buffer) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8", "surrogatepass")
    return bytes(data)


def _show_byte(byte: int) -> str:
    if 0x20 < byte < 0x7F:
        return repr(chr(byte))
    return f"byte 0x{byte:02X}"


# ---------------------------------------------------------------------------
# STRING SCANNING
# ---------------------------------------------------------------------------
def _decode_run(run: bytes, offset: int) -> str:
    # Runs stop only at ASCII bytes, so a multi-byte sequence is never split.
    try:
        return run.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise UnexpectedCharacter(offset + exc.start, "invalid UTF-8 in string") from None


def _read_hex4(buf: bytes, pos: int) -> int:
    """Read the four hex digits of the ``\\u`` escape whose backslash sits at ``pos``."""
    digits = buf[pos + 2:pos + 6]
    if len(digits) < 4:
        raise InvalidEscapeSequence(pos, "short unicode escape")
    if not _HEX4.fullmatch(digits):
        shown = digits.decode("ascii", "backslashreplace")
        raise InvalidEscapeSequence(pos, f"invalid hex escape \\u{shown}")
    return int(digits, 16)


def _scan_escape(buf: bytes, pos: int, start: int) -> Tuple[str, int]:
    if pos + 1 >= len(buf):
        raise UnterminatedString(start, "unterminated string")
    esc = buf[pos + 1]
    simple = _SIMPLE_ESCAPES.get(esc)
    if simple is not None:
        return simple, pos + 2
    if esc != ord("u"):
        if 0x20 < esc < 0x7F:
            raise InvalidEscapeSequence(pos, f"invalid escape \\{chr(esc)}")
        raise InvalidEscapeSequence(pos, f"invalid escape: {_show_byte(esc)} after backslash")

    code = _read_hex4(buf, pos)
    if 0xDC00 <= code <= 0xDFFF:
        raise InvalidEscapeSequence(pos, "unpaired low surrogate")
    if 0xD800 <= code <= 0xDBFF:
        low_pos = pos + 6
        if buf[low_pos:low_pos + 2] != b"\\u":
            raise InvalidEscapeSequence(pos, "unpaired high surrogate")
        low = _read_hex4(buf, low_pos)
        if not 0xDC00 <= low <= 0xDFFF:
            raise InvalidEscapeSequence(pos, "unpaired high surrogate")
        code = 0x10000 + ((code - 0xD800) << 10) + (low - 0xDC00)
        return chr(code), low_pos + 6
    return chr(code), pos + 6


def _scan_string(buf: bytes, start: int) -> Tuple[str, int]:
    """Scan the string literal opening at ``start``; return (decoded text, end offset)."""
    parts: List[str] = []
    pos = start + 1
    end = len(buf)
    while True:
        m = _STRING_RUN.match(buf, pos)
        if m:
            parts.append(_decode_run(m.group(), pos))
            pos = m.end()
        if pos >= end:
            raise UnterminatedString(start, "unterminated string")
        byte = buf[pos]
        if byte == _QUOTE:
            return "".join(parts), pos + 1
        if byte == _BACKSLASH:
            text, pos = _scan_escape(buf, pos, start)
            parts.append(text)
            continue
        if byte in _LINE_BREAKS:
            raise UnterminatedString(start, "line break before closing quote in string")
        raise UnexpectedCharacter(pos, f"raw control character 0x{byte:02X} in string")


# ---------------------------------------------------------------------------
# NUMBER SCANNING
# ---------------------------------------------------------------------------
def _malformed_number(buf: bytes, start: int) -> InvalidNumberFormat:
    junk = _NUMBER_JUNK.match(buf, start)
    stop = junk.end() if junk else start + 1
    shown = buf[start:stop].decode("ascii", "backslashreplace")
    return InvalidNumberFormat(start, f"malformed number {shown!r}")


def _scan_number(buf: bytes, start: int) -> Tuple[str, int]:
    m = _NUMBER.match(buf, start)
    if not m:
        raise _malformed_number(buf, start)
    end = m.end()
    if end < len(buf) and buf[end] in _NUMBER_TAIL:
        raise _malformed_number(buf, start)
    return m.group().decode("ascii"), end


# ---------------------------------------------------------------------------
# TOKEN STREAM
# ---------------------------------------------------------------------------
def lex(data: Buffer) -> Iterator[Token]:
    """
    Lazily tokenize ``data``. The final token is always ``TokenKind.END``.

    Lexical errors are raised from the generator at the point the offending
    lexeme is reached, so tokens before it have already been handed out.
    """
    buf = _as_bytes(data)
    end = len(buf)
    pos = 0
    while True:
        ws = _WHITESPACE.match(buf, pos)
        if ws:
            pos = ws.end()
        if pos >= end:
            yield Token(TokenKind.END, None, end)
            return

        byte = buf[pos]
        kind = _PUNCTUATION.get(byte)
        if kind is not None:
            yield Token(kind, chr(byte), pos)
            pos += 1
        elif byte == _QUOTE:
            text, stop = _scan_string(buf, pos)
            yield Token(TokenKind.STRING, text, pos)
            pos = stop
        elif byte in _NUMBER_START:
            lexeme, stop = _scan_number(buf, pos)
            yield Token(TokenKind.NUMBER, lexeme, pos)
            pos = stop
        else:
            word = _WORD.match(buf, pos)
            if not word:
                raise UnexpectedCharacter(pos, f"unexpected character {_show_byte(byte)}")
            keyword = _KEYWORDS.get(word.group())
            if keyword is None:
                shown = word.group().decode("ascii")
                raise UnexpectedCharacter(pos, f"invalid literal {shown!r}")
            yield Token(keyword[0], keyword[1], pos)
            pos = word.end()


__all__ = ["Token", "TokenKind", "lex"]
