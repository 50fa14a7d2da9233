"""
Relaxed Object Literal Parser

Parses the JavaScript object-literal syntax that rendering frameworks inject
into pages (unquoted keys, single-quoted strings, trailing commas, comments)
into plain Python data. The text is only ever tokenized and walked; nothing
in it is evaluated.
"""

import math
import re
from dataclasses import dataclass
from typing import Any, Iterator

from .exceptions import LiteralParseError

_SKIP_RE = re.compile(r"(?:\s+|//[^\n]*|/\*[\s\S]*?\*/)+")
_NUMBER_RE = re.compile(
    r"0[xX][0-9a-fA-F]+|0[oO][0-7]+|0[bB][01]+"
    r"|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?"
)
_IDENT_RE = re.compile(r"[A-Za-z_$][\w$]*")
_STRING_RES = {
    '"': re.compile(r'"((?:[^"\\\n\r]|\\[\s\S])*)"'),
    "'": re.compile(r"'((?:[^'\\\n\r]|\\[\s\S])*)'"),
    "`": re.compile(r"`((?:[^`\\]|\\[\s\S])*)`"),
}
_ESCAPE_RE = re.compile(
    r"\\(u\{[0-9a-fA-F]+\}|u[0-9a-fA-F]{4}|x[0-9a-fA-F]{2}|\r\n|[\s\S])"
)
_SIMPLE_ESCAPES = {
    "n": "\n", "t": "\t", "r": "\r", "b": "\b", "f": "\f", "v": "\v", "0": "\0",
}
_LINE_CONTINUATIONS = {"\n", "\r", "\r\n", "\u2028", "\u2029"}
_KEYWORDS = {
    "true": True,
    "false": False,
    "null": None,
    "undefined": None,
    "NaN": math.nan,
    "Infinity": math.inf,
}
_PUNCTUATION = "{}[]:,"

PUNCT = "punct"
STRING = "string"
NUMBER = "number"
IDENT = "ident"
EOF = "eof"


@dataclass
class Token:
    kind: str
    value: Any
    position: int
    raw: str = ""


def _unescape_match(match: re.Match) -> str:
    escape = match.group(1)
    if escape.startswith("u{"):
        return chr(int(escape[2:-1], 16))
    if escape[0] == "u" and len(escape) == 5:
        return chr(int(escape[1:], 16))
    if escape[0] == "x" and len(escape) == 3:
        return chr(int(escape[1:], 16))
    if escape in _LINE_CONTINUATIONS:
        return ""
    return _SIMPLE_ESCAPES.get(escape, escape)


def unescape_string(body: str) -> str:
    """Decode JavaScript string escapes, joining UTF-16 surrogate pairs."""
    if "\\" not in body:
        return body
    text = _ESCAPE_RE.sub(_unescape_match, body)
    if any("\ud800" <= c <= "\udfff" for c in text):
        # Lone surrogates survive as-is
        text = text.encode("utf-16-le", "surrogatepass").decode("utf-16-le", "surrogatepass")
    return text


def _parse_number(raw: str) -> int | float:
    prefix = raw[:2].lower()
    if prefix == "0x":
        return int(raw, 16)
    if prefix == "0o":
        return int(raw[2:], 8)
    if prefix == "0b":
        return int(raw[2:], 2)
    if any(c in raw for c in ".eE"):
        return float(raw)
    return int(raw)


def tokenize(text: str) -> Iterator[Token]:
    """Split relaxed literal text into tokens, ending with an EOF token."""
    pos = 0
    length = len(text)

    while True:
        skip = _SKIP_RE.match(text, pos)
        if skip:
            pos = skip.end()
        if pos >= length:
            yield Token(EOF, None, pos)
            return

        char = text[pos]

        if char in _PUNCTUATION:
            yield Token(PUNCT, char, pos, char)
            pos += 1
            continue

        if char in _STRING_RES:
            match = _STRING_RES[char].match(text, pos)
            if not match:
                raise LiteralParseError("Unterminated string", pos)
            body = match.group(1)
            if char == "`" and "${" in body:
                raise LiteralParseError("Template interpolation is not supported", pos)
            yield Token(STRING, unescape_string(body), pos, match.group(0))
            pos = match.end()
            continue

        sign = 1
        start = pos
        if char in "+-":
            sign = -1 if char == "-" else 1
            pos += 1
            if text.startswith("Infinity", pos):
                pos += len("Infinity")
                yield Token(NUMBER, sign * math.inf, start, text[start:pos])
                continue

        match = _NUMBER_RE.match(text, pos)
        if match:
            raw = match.group(0)
            yield Token(NUMBER, sign * _parse_number(raw), start, text[start:match.end()])
            pos = match.end()
            continue

        if pos != start:
            raise LiteralParseError(f"Unexpected sign {char!r}", start)

        match = _IDENT_RE.match(text, pos)
        if match:
            yield Token(IDENT, match.group(0), pos, match.group(0))
            pos = match.end()
            continue

        raise LiteralParseError(f"Unexpected character {char!r}", pos)


class LiteralParser:
    """Recursive-descent parser over the token stream."""

    def __init__(self, text: str):
        self._tokens = tokenize(text)
        self._current = next(self._tokens)

    def _advance(self) -> Token:
        token = self._current
        if token.kind != EOF:
            self._current = next(self._tokens)
        return token

    def _expect(self, punct: str) -> Token:
        token = self._advance()
        if token.kind != PUNCT or token.value != punct:
            raise LiteralParseError(
                f"Expected {punct!r}, found {token.raw or token.kind!r}", token.position
            )
        return token

    def _at(self, punct: str) -> bool:
        return self._current.kind == PUNCT and self._current.value == punct

    def parse(self) -> Any:
        value = self.parse_value()
        if self._current.kind != EOF:
            raise LiteralParseError("Unexpected trailing content", self._current.position)
        return value

    def parse_value(self) -> Any:
        token = self._current
        if self._at("{"):
            return self._parse_object()
        if self._at("["):
            return self._parse_array()
        if token.kind in (STRING, NUMBER):
            self._advance()
            return token.value
        if token.kind == IDENT and token.value in _KEYWORDS:
            self._advance()
            return _KEYWORDS[token.value]
        if token.kind == EOF:
            raise LiteralParseError("Unexpected end of input", token.position)
        raise LiteralParseError(f"Unexpected token {token.raw!r}", token.position)

    def _parse_key(self) -> str:
        token = self._advance()
        if token.kind in (STRING, IDENT):
            return token.value
        if token.kind == NUMBER:
            value = token.value
            if isinstance(value, float) and value.is_integer():
                value = int(value)
            return str(value)
        raise LiteralParseError(f"Invalid object key {token.raw or token.kind!r}", token.position)

    def _parse_object(self) -> dict:
        self._expect("{")
        result: dict[str, Any] = {}
        while not self._at("}"):
            key = self._parse_key()
            self._expect(":")
            result[key] = self.parse_value()
            if not self._at(","):
                break
            self._advance()
        self._expect("}")
        return result

    def _parse_array(self) -> list:
        self._expect("[")
        result: list[Any] = []
        while not self._at("]"):
            result.append(self.parse_value())
            if not self._at(","):
                break
            self._advance()
        self._expect("]")
        return result


def parse_literal(text: str) -> Any:
    """Parse relaxed object-literal text into dicts, lists and scalars."""
    return LiteralParser(text).parse()
