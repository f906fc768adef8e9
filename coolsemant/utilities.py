"""Token names, string escaping and formatting helpers."""

from __future__ import annotations

from enum import IntEnum
from typing import Optional, Union

_PAD_WIDTH = 80
_INVALID = "<Invalid Token>"
_PUNCTUATION = frozenset("+/-*=<.~,;:()@{}")
_ESCAPES = {
    ord("\\"): "\\\\",
    ord('"'): '\\"',
    ord("\n"): "\\n",
    ord("\t"): "\\t",
    ord("\b"): "\\b",
    ord("\f"): "\\f",
}


class Token(IntEnum):
    """Multi-character tokens of the language."""

    CLASS = 258
    ELSE = 259
    FI = 260
    IF = 261
    IN = 262
    INHERITS = 263
    LET = 264
    LOOP = 265
    POOL = 266
    THEN = 267
    WHILE = 268
    CASE = 269
    ESAC = 270
    OF = 271
    DARROW = 272
    NEW = 273
    ISVOID = 274
    STR_CONST = 275
    INT_CONST = 276
    BOOL_CONST = 277
    TYPEID = 278
    OBJECTID = 279
    ASSIGN = 280
    NOT = 281
    LE = 282
    ERROR = 283


def escape_string(s: Union[str, bytes]) -> str:
    """Return ``s`` with quotes, backslashes and control characters escaped.

    Text is encoded as UTF-8 first; every byte outside printable ASCII
    is written as a three-digit octal escape.
    """
    data = s.encode("utf-8") if isinstance(s, str) else bytes(s)
    parts = []
    for byte in data:
        if byte in _ESCAPES:
            parts.append(_ESCAPES[byte])
        elif 0x20 <= byte < 0x7F:
            parts.append(chr(byte))
        else:
            parts.append(f"\\{byte:03o}")
    return "".join(parts)


def token_to_string(token: Union[Token, int, str]) -> str:
    """Return the printable name of a token code or single-character token."""
    if isinstance(token, Token):
        return token.name
    if isinstance(token, str):
        if len(token) == 1 and token in _PUNCTUATION:
            return f"'{token}'"
        return _INVALID
    if token == 0:
        return "EOF"
    try:
        return Token(token).name
    except ValueError:
        pass
    if 0 < token < 0x110000 and chr(token) in _PUNCTUATION:
        return f"'{chr(token)}'"
    return _INVALID


def pad(n: int) -> str:
    """Return ``n`` spaces, at most 80 and none for non-positive ``n``."""
    return " " * max(0, min(n, _PAD_WIDTH))


def format_token(lineno: int, token: Union[Token, int, str], value: Optional[object] = None) -> str:
    """Return the one-line textual form of a token and its value, without newline."""
    line = f"#{lineno} {token_to_string(token)}"
    if token == Token.STR_CONST:
        line += f' "{escape_string(str(value))}"'
    elif token in (Token.INT_CONST, Token.TYPEID, Token.OBJECTID):
        line += f" {value}"
    elif token == Token.BOOL_CONST:
        line += " true" if value else " false"
    elif token == Token.ERROR:
        message = "" if value is None else value
        if not message:
            line += ' "\\000"'
        else:
            line += f' "{escape_string(message)}"'
    return line