# json_parser.py
# JSON grammar engine and command-line validator.
#
# Reads one JSON document (standard input by default), exits 0 when it is
# valid and 1 otherwise.
#
# =============================================================================
#  PARSER IMPLEMENTATION: EXPLICIT-STACK DESCENT
# =============================================================================
#
# The grammar is LL(1): one token of lookahead decides every production.
#
#   document := value EndOfInput
#   value    := object | array | string | number | true | false | null
#   object   := '{' (member (',' member)*)? '}'
#   member   := string ':' value
#   array    := '[' (value (',' value)*)? ']'
#
# Nested containers are tracked on an explicit list of open frames instead of
# the Python call stack, so nesting is bounded only by max_depth and never by
# the interpreter recursion limit. Each loop iteration reads one value; a
# finished value is attached to the innermost open frame, which then reads
# either a ',' (read the next element) or its closing bracket (the container
# itself becomes the finished value for the frame below it).
#
# Any scalar is a legal document on its own. Trailing commas are rejected
# because ',' always demands another element.
# =============================================================================

import argparse
import sys
from typing import Iterator, List, Optional, Set

from json_errors import (
    DuplicateKey,
    JSONError,
    LexicalError,
    MaxDepthExceeded,
    TrailingContent,
    UnexpectedEndOfInput,
    UnexpectedToken,
    locate,
)
from json_lexer import Buffer, Token, TokenKind, lex
from json_values import (
    JsonArray,
    JsonBool,
    JsonNull,
    JsonNumber,
    JsonObject,
    JsonString,
    Value,
    to_python,
)

# ---------------------------------------------------------------------------
# CONSTANTS AND TUNABLES
# ---------------------------------------------------------------------------
DEPTH_LIMIT_DEFAULT = 1000   # Maximum number of simultaneously open containers

EXIT_VALID = 0
EXIT_INVALID = 1

_SCALARS = {
    TokenKind.STRING: lambda tok: JsonString(tok.value),
    TokenKind.NUMBER: lambda tok: JsonNumber(tok.value),
    TokenKind.TRUE: lambda tok: JsonBool(True),
    TokenKind.FALSE: lambda tok: JsonBool(False),
    TokenKind.NULL: lambda tok: JsonNull(),
}

# ---------------------------------------------------------------------------
# LOOKAHEAD RING
# ---------------------------------------------------------------------------
class LookAhead:
    """
    One-slot pushback iterator over the token stream.

    A single token of lookahead is all an LL(1) grammar needs, so nothing
    beyond the peeked token is ever buffered.
    """
    def __init__(self, iterable: Iterator[Token]):
        self._iter = iter(iterable)
        self._buf: List[Token] = []

    def __iter__(self):
        return self

    def __next__(self) -> Token:
        if self._buf:
            return self._buf.pop()
        return next(self._iter)

    def peek(self) -> Token:
        if not self._buf:
            self._buf.append(next(self._iter))
        return self._buf[-1]

# ---------------------------------------------------------------------------
# PARSER UTILITY
# ---------------------------------------------------------------------------
def _unexpected(tok: Token, expected: str) -> JSONError:
    if tok.kind is TokenKind.END:
        return UnexpectedEndOfInput(tok.offset, expected)
    return UnexpectedToken(tok.offset, expected, tok.describe())


def _expect(tokens: LookAhead, kind: TokenKind, expected: str) -> Token:
    """Consume the next token and verify its kind."""
    tok = next(tokens)
    if tok.kind is not kind:
        raise _unexpected(tok, expected)
    return tok


class _Frame:
    """An array or object whose closing bracket has not been read yet."""
    __slots__ = ("is_object", "items", "key", "seen")

    def __init__(self, is_object: bool):
        self.is_object = is_object
        self.items: List = []
        self.key: Optional[Token] = None
        self.seen: Set[str] = set()

    def close(self) -> Value:
        if self.is_object:
            return JsonObject(tuple(self.items))
        return JsonArray(tuple(self.items))


def _read_key(tokens: LookAhead, frame: _Frame, allow_dup: bool) -> None:
    """member := string ':' - the value is read by the main loop."""
    key = _expect(tokens, TokenKind.STRING, "string key")
    if not allow_dup:
        if key.value in frame.seen:
            raise DuplicateKey(key.offset, key.value)
        frame.seen.add(key.value)
    _expect(tokens, TokenKind.COLON, "':'")
    frame.key = key

# ---------------------------------------------------------------------------
# CORE VALUE PARSER
# ---------------------------------------------------------------------------
def _parse_value(tokens: LookAhead, max_depth: int, allow_dup: bool) -> Value:
    """
    Read one complete value, containers included.

    ``stack`` holds the open frames; its length is the current nesting depth,
    checked before every container is opened.
    """
    stack: List[_Frame] = []
    while True:
        tok = next(tokens)
        make_scalar = _SCALARS.get(tok.kind)

        if make_scalar is not None:
            value = make_scalar(tok)
        elif tok.kind is TokenKind.LEFT_BRACKET or tok.kind is TokenKind.LEFT_BRACE:
            if len(stack) >= max_depth:
                raise MaxDepthExceeded(tok.offset, max_depth)
            is_object = tok.kind is TokenKind.LEFT_BRACE
            closer = TokenKind.RIGHT_BRACE if is_object else TokenKind.RIGHT_BRACKET
            if tokens.peek().kind is closer:
                next(tokens)
                value = JsonObject() if is_object else JsonArray()
            else:
                frame = _Frame(is_object)
                if is_object:
                    _read_key(tokens, frame, allow_dup)
                stack.append(frame)
                continue
        else:
            raise _unexpected(tok, "value")

        # Attach the finished value; unwind every container it completes.
        while stack:
            frame = stack[-1]
            if frame.is_object:
                frame.items.append((frame.key.value, value))
                sep = next(tokens)
                if sep.kind is TokenKind.COMMA:
                    _read_key(tokens, frame, allow_dup)
                    break
                if sep.kind is not TokenKind.RIGHT_BRACE:
                    raise _unexpected(sep, "',' or '}'")
            else:
                frame.items.append(value)
                sep = next(tokens)
                if sep.kind is TokenKind.COMMA:
                    break
                if sep.kind is not TokenKind.RIGHT_BRACKET:
                    raise _unexpected(sep, "',' or ']'")
            stack.pop()
            value = frame.close()
        else:
            return value

# ---------------------------------------------------------------------------
# PUBLIC API
# ---------------------------------------------------------------------------
def parse(data: Buffer, *, max_depth: int = DEPTH_LIMIT_DEFAULT, allow_dup: bool = True) -> Value:
    """
    Parse one JSON document into a value tree.

    ``data`` may be bytes or str. With ``allow_dup=False`` a key repeated
    inside one object raises DuplicateKey; otherwise every pair is kept.
    Raises a JSONError subclass (a SyntaxError) on the first fault.
    """
    if max_depth < 1:
        raise ValueError("max_depth must be at least 1")
    tokens = LookAhead(lex(data))
    result = _parse_value(tokens, max_depth, allow_dup)
    try:
        tok = next(tokens)
    except LexicalError as exc:
        raise TrailingContent(exc.position) from exc
    if tok.kind is not TokenKind.END:
        raise TrailingContent(tok.offset)
    return result


def loads(data: Buffer, **options):
    """Parse ``data`` and convert the result to plain Python objects."""
    return to_python(parse(data, **options))

# ---------------------------------------------------------------------------
# CLI ENTRYPOINT
# ---------------------------------------------------------------------------
def _positive_int(text: str) -> int:
    value = int(text)
    if value < 1:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {value}")
    return value


def _read_input(path: str) -> bytes:
    if path == "-":
        return sys.stdin.buffer.read()
    with open(path, "rb") as fh:
        return fh.read()


def _diagnostic(exc: JSONError, data: bytes) -> str:
    line, column = locate(data, exc.position)
    return f"{exc.kind}: {exc} (line {line}, column {column})"


def _dump_tokens(data: bytes, quiet: bool) -> int:
    try:
        for tok in lex(data):
            print(f"{tok.offset}\t{tok.kind.value}\t{tok.value!r}")
    except JSONError as exc:
        if not quiet:
            print(_diagnostic(exc, data), file=sys.stderr)
        return EXIT_INVALID
    return EXIT_VALID


def _cli(argv: List[str]) -> int:
    """
    Command-line validator.

    Exit status is the whole contract: 0 for a valid document, 1 for invalid
    or unreadable input. Diagnostics on stderr are advisory only.
    """
    ap = argparse.ArgumentParser(description="JSON validator: exit 0 if the input is valid JSON, 1 otherwise")
    ap.add_argument("file", nargs="?", default="-", help="JSON file to verify (default: standard input)")
    ap.add_argument("--debug", action="store_true", help="dump token stream and exit")
    ap.add_argument("--max-depth", type=_positive_int, default=DEPTH_LIMIT_DEFAULT,
                    help=f"maximum nesting of arrays and objects (default: {DEPTH_LIMIT_DEFAULT})")
    ap.add_argument("--reject-dup-keys", action="store_true", help="treat a repeated object key as an error")
    ap.add_argument("-q", "--quiet", action="store_true", help="print nothing, report through the exit status only")
    args = ap.parse_args(argv)

    try:
        data = _read_input(args.file)
    except OSError as exc:
        if not args.quiet:
            print(f"cannot read input: {exc}", file=sys.stderr)
        return EXIT_INVALID

    if args.debug:
        return _dump_tokens(data, args.quiet)

    try:
        parse(data, max_depth=args.max_depth, allow_dup=not args.reject_dup_keys)
    except JSONError as exc:
        if not args.quiet:
            print(_diagnostic(exc, data), file=sys.stderr)
        return EXIT_INVALID
    if not args.quiet:
        print("OK")
    return EXIT_VALID


def main() -> None:
    sys.exit(_cli(sys.argv[1:]))


__all__ = ["DEPTH_LIMIT_DEFAULT", "LookAhead", "parse", "loads", "main"]

# ---------------------------------------------------------------------------
# MAIN GUARD
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    main()
