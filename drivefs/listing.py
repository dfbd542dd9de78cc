"""Remote directory listing decoder.

The listing service answers with a tiny script of global assignments of
literal values::

    folders = { {name = "demos"}, {name = "games"} }
    files = {
        {hash = "5f1c...", name = "pong.tic", id = 12},
        {hash = "a07d...", name = "snake.tic", id = 31},
    }

Only the literal subset is understood: assignments, strings, numbers,
booleans, nil, table constructors and comments. Nothing is executed.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Iterator

from .base import DirEntry
from .exceptions import ListingDecodeError

logger = logging.getLogger(__name__)

MAX_DEPTH = 64
MAX_CODE_POINT = 0x10FFFF

KEYWORDS = {"nil", "true", "false", "local", "and", "or", "not", "function",
            "return", "end", "if", "then", "else", "elseif", "while", "do",
            "for", "in", "repeat", "until", "break", "goto"}

_NAME = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_HEX = re.compile(r"0[xX][0-9a-fA-F]+")
_DEC = re.compile(r"(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_SPACE = re.compile(r"\s+")
_LONG_OPEN = re.compile(r"\[(=*)\[")
_UNICODE_ESCAPE = re.compile(r"u\{([0-9a-fA-F]+)\}")
_DECIMAL_ESCAPE = re.compile(r"[0-9]{1,3}")
_DIGITS = "0123456789"

_ESCAPES = {
    "n": "\n", "t": "\t", "r": "\r", "a": "\a", "b": "\b", "f": "\f",
    "v": "\v", "\\": "\\", '"': '"', "'": "'", "\n": "\n",
}

# token kinds
NAME, NUMBER, STRING, OP, EOF = "name", "number", "string", "op", "eof"


class Table:
    """Decoded table constructor.

    Positional fields are stored under integer keys starting at 1, keyed
    fields under their key, nil values are not stored.
    """

    def __init__(self) -> None:
        self.fields: dict[Any, Any] = {}
        self._next_index = 1

    def __repr__(self) -> str:
        return f"Table({self.fields!r})"

    def append(self, value: Any) -> None:
        if value is not None:
            self.fields[self._next_index] = value
        self._next_index += 1

    def set(self, key: Any, value: Any) -> None:
        if key is None:
            raise ValueError("table index is nil")
        key = _normalize_key(key)
        if value is None:
            self.fields.pop(key, None)
        else:
            self.fields[key] = value

    def get(self, key: Any) -> Any:
        return self.fields.get(_normalize_key(key))

    def sequence(self) -> list[Any]:
        """Values at 1..n, stopping at the first missing index."""
        items = []
        i = 1
        while i in self.fields:
            items.append(self.fields[i])
            i += 1
        return items


def _normalize_key(key: Any) -> Any:
    if isinstance(key, bool):
        return (bool, key)
    if isinstance(key, float) and key.is_integer():
        return int(key)
    return key


class _Lexer:
    """Tokenizer for the listing language."""

    def __init__(self, text: str):
        self.text = text
        self.pos = 0

    def error(self, message: str, pos: int | None = None) -> ListingDecodeError:
        return ListingDecodeError(message, self.pos if pos is None else pos)

    def tokens(self) -> Iterator[tuple[str, Any, int]]:
        text = self.text
        while True:
            self._skip_space_and_comments()
            start = self.pos
            if start >= len(text):
                yield EOF, None, start
                return

            ch = text[start]
            if ch in "\"'":
                yield STRING, self._short_string(ch), start
            elif ch == "[" and _LONG_OPEN.match(text, start):
                yield STRING, self._long_bracket(), start
            elif ch in _DIGITS or (ch == "." and _DEC.match(text, start)):
                yield NUMBER, self._number(), start
            elif _NAME.match(text, start):
                m = _NAME.match(text, start)
                self.pos = m.end()
                yield NAME, m.group(), start
            elif ch in "={}[],;-":
                self.pos += 1
                yield OP, ch, start
            else:
                raise self.error(f"unexpected character {ch!r}")

    def _skip_space_and_comments(self) -> None:
        text = self.text
        while True:
            m = _SPACE.match(text, self.pos)
            if m:
                self.pos = m.end()
            if not text.startswith("--", self.pos):
                return
            self.pos += 2
            if _LONG_OPEN.match(text, self.pos):
                self._long_bracket()
            else:
                end = text.find("\n", self.pos)
                self.pos = len(text) if end == -1 else end + 1

    def _long_bracket(self) -> str:
        m = _LONG_OPEN.match(self.text, self.pos)
        start = self.pos
        close = "]" + m.group(1) + "]"
        end = self.text.find(close, m.end())
        if end == -1:
            raise self.error("unfinished long string", start)
        body = self.text[m.end():end]
        self.pos = end + len(close)
        # a newline immediately after the opening bracket is skipped
        if body.startswith("\r\n"):
            body = body[2:]
        elif body.startswith("\n"):
            body = body[1:]
        return body

    def _short_string(self, quote: str) -> str:
        # escapes produce raw bytes, so the literal is built as bytes and
        # decoded once it is closed
        text = self.text
        start = self.pos
        self.pos += 1
        out = bytearray()
        while True:
            if self.pos >= len(text):
                raise self.error("unfinished string", start)
            ch = text[self.pos]
            if ch == quote:
                self.pos += 1
                try:
                    return out.decode("utf-8")
                except UnicodeDecodeError as e:
                    raise self.error("invalid UTF-8 in string", start) from e
            if ch == "\n":
                raise self.error("unfinished string", start)
            if ch == "\\":
                out += self._escape()
                continue
            out += ch.encode("utf-8")
            self.pos += 1

    def _escape(self) -> bytes:
        text = self.text
        self.pos += 1
        if self.pos >= len(text):
            raise self.error("unfinished string")
        ch = text[self.pos]
        if ch in _ESCAPES:
            self.pos += 1
            return _ESCAPES[ch].encode("ascii")
        if ch == "x":
            digits = text[self.pos + 1:self.pos + 3]
            if len(digits) != 2 or not all(c in "0123456789abcdefABCDEF" for c in digits):
                raise self.error("hexadecimal digit expected")
            self.pos += 3
            return bytes([int(digits, 16)])
        if ch == "z":
            m = _SPACE.match(text, self.pos + 1)
            self.pos = m.end() if m else self.pos + 1
            return b""
        if ch == "u":
            m = _UNICODE_ESCAPE.match(text, self.pos)
            if not m:
                raise self.error("invalid unicode escape")
            value = int(m.group(1), 16)
            if value > MAX_CODE_POINT:
                raise self.error("UTF-8 value too large")
            self.pos = m.end()
            # surrogates are kept as bytes; the final decode rejects them
            return chr(value).encode("utf-8", "surrogatepass")
        if ch in _DIGITS:
            m = _DECIMAL_ESCAPE.match(text, self.pos)
            value = int(m.group())
            if value > 255:
                raise self.error("decimal escape too large")
            self.pos = m.end()
            return bytes([value])
        raise self.error(f"invalid escape sequence '\\{ch}'")

    def _number(self) -> int | float:
        text = self.text
        m = _HEX.match(text, self.pos)
        if m:
            self.pos = m.end()
            return int(m.group(), 16)
        m = _DEC.match(text, self.pos)
        literal = m.group()
        self.pos = m.end()
        if _NAME.match(text, self.pos):
            raise self.error(f"malformed number near '{literal}'")
        if "." in literal or "e" in literal or "E" in literal:
            return float(literal)
        return int(literal)


class _Parser:
    """Recursive-descent parser producing the global bindings of a listing."""

    def __init__(self, text: str):
        self.lexer = _Lexer(text)
        self.tokens = self.lexer.tokens()
        self.globals: dict[str, Any] = {}
        self.depth = 0
        self._advance()

    def _advance(self) -> None:
        self.kind, self.value, self.pos = next(self.tokens)

    def _peek_is(self, kind: str, value: Any = None) -> bool:
        return self.kind == kind and (value is None or self.value == value)

    def _expect(self, kind: str, value: Any = None) -> Any:
        if not self._peek_is(kind, value):
            wanted = repr(value) if value is not None else kind
            raise ListingDecodeError(
                f"{wanted} expected near {self._describe()}", self.pos
            )
        found = self.value
        self._advance()
        return found

    def _describe(self) -> str:
        if self.kind == EOF:
            return "<eof>"
        return repr(self.value)

    def parse(self) -> dict[str, Any]:
        while not self._peek_is(EOF):
            if self._peek_is(OP, ";"):
                self._advance()
                continue
            self._statement()
        return self.globals

    def _statement(self) -> None:
        if self._peek_is(NAME, "local"):
            self._advance()
        names = [self._name()]
        while self._peek_is(OP, ","):
            self._advance()
            names.append(self._name())
        self._expect(OP, "=")
        values = [self._expr()]
        while self._peek_is(OP, ","):
            self._advance()
            values.append(self._expr())
        for i, name in enumerate(names):
            self.globals[name] = values[i] if i < len(values) else None

    def _name(self) -> str:
        if self.kind == NAME and self.value in KEYWORDS:
            raise ListingDecodeError(
                f"unexpected keyword {self.value!r}", self.pos
            )
        return self._expect(NAME)

    def _expr(self) -> Any:
        kind, value = self.kind, self.value
        if kind in (NUMBER, STRING):
            self._advance()
            return value
        if kind == OP and value == "{":
            return self._table()
        if kind == OP and value == "-":
            self._advance()
            self.depth += 1
            if self.depth > MAX_DEPTH:
                raise ListingDecodeError("expression nested too deeply", self.pos)
            operand = self._expr()
            self.depth -= 1
            if isinstance(operand, bool) or not isinstance(operand, (int, float)):
                raise ListingDecodeError("attempt to negate a non-number", self.pos)
            return -operand
        if kind == NAME:
            if value == "nil":
                self._advance()
                return None
            if value in ("true", "false"):
                self._advance()
                return value == "true"
            name = self._name()
            return self.globals.get(name)
        raise ListingDecodeError(f"unexpected symbol near {self._describe()}", self.pos)

    def _table(self) -> Table:
        self.depth += 1
        if self.depth > MAX_DEPTH:
            raise ListingDecodeError("tables nested too deeply", self.pos)
        self._expect(OP, "{")
        table = Table()
        while not self._peek_is(OP, "}"):
            self._field(table)
            if self._peek_is(OP, ",") or self._peek_is(OP, ";"):
                self._advance()
            elif not self._peek_is(OP, "}"):
                raise ListingDecodeError(
                    f"'}}' expected near {self._describe()}", self.pos
                )
        self._advance()
        self.depth -= 1
        return table

    def _field(self, table: Table) -> None:
        if self._peek_is(OP, "["):
            self._advance()
            key = self._expr()
            self._expect(OP, "]")
            self._expect(OP, "=")
            if key is None:
                raise ListingDecodeError("table index is nil", self.pos)
            table.set(key, self._expr())
            return

        if self.kind == NAME and self.value not in KEYWORDS:
            # NAME '=' expr is a keyed field; anything else starts an expression
            name = self.value
            self._advance()
            if self._peek_is(OP, "="):
                self._advance()
                table.set(name, self._expr())
            else:
                # bare global reference used as a positional value
                table.append(self.globals.get(name))
            return

        table.append(self._expr())


def parse_listing(payload: bytes) -> dict[str, Any]:
    """Parse a listing payload into its global bindings.

    Raises:
        ListingDecodeError: If the payload is not valid UTF-8 or not valid
            listing syntax.
    """
    try:
        text = payload.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ListingDecodeError("payload is not valid UTF-8", e.start) from e
    if text.startswith("\ufeff"):
        text = text[1:]
    return _Parser(text).parse()


def decode_listing(payload: bytes) -> list[DirEntry]:
    """Decode a listing payload into directory entries.

    Folders come first, then files, each in payload order. Folder records
    need a string ``name``; file records need string ``hash`` and ``name``
    and an integer ``id``. Records that do not qualify are skipped.

    Raises:
        ListingDecodeError: If the payload cannot be parsed.
    """
    bindings = parse_listing(payload)
    entries: list[DirEntry] = []

    folders = bindings.get("folders")
    if isinstance(folders, Table):
        for record in folders.sequence():
            if not isinstance(record, Table):
                continue
            name = record.get("name")
            if isinstance(name, str):
                entries.append(DirEntry(name=name, is_dir=True))

    files = bindings.get("files")
    if isinstance(files, Table):
        for record in files.sequence():
            if not isinstance(record, Table):
                continue
            hash_, name, id_ = record.get("hash"), record.get("name"), record.get("id")
            if not (isinstance(hash_, str) and isinstance(name, str)):
                logger.debug(f"Skipping file record without hash/name: {record!r}")
                continue
            if isinstance(id_, bool) or not isinstance(id_, int):
                logger.debug(f"Skipping file record without integer id: {record!r}")
                continue
            entries.append(DirEntry(name=name, hash=hash_, id=id_, is_dir=False))

    return entries
