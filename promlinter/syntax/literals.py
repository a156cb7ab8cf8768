"""Go string literal unquoting."""

from __future__ import annotations

_SIMPLE_ESCAPES = {
    "a": 0x07,
    "b": 0x08,
    "f": 0x0C,
    "n": 0x0A,
    "r": 0x0D,
    "t": 0x09,
    "v": 0x0B,
    "\\": 0x5C,
    '"': 0x22,
}

_HEX_DIGITS = "0123456789abcdefABCDEF"


class MalformedLiteralError(ValueError):
    """Raised when a string literal cannot be unquoted.

    The parser marks malformed literals while building the tree, so reaching
    this from the resolver indicates a corrupt tree.
    """


def unquote(literal: str) -> str:
    """Return the value of a Go interpreted or raw string literal."""
    if len(literal) < 2:
        raise MalformedLiteralError(f"invalid string literal: {literal!r}")
    quote = literal[0]
    if quote != literal[-1]:
        raise MalformedLiteralError(f"invalid string literal: {literal!r}")
    body = literal[1:-1]
    if quote == "`":
        if "`" in body:
            raise MalformedLiteralError(f"invalid raw string literal: {literal!r}")
        return body.replace("\r", "")
    if quote != '"':
        raise MalformedLiteralError(f"invalid string literal: {literal!r}")
    if "\n" in body:
        raise MalformedLiteralError(f"newline in string literal: {literal!r}")
    if "\\" not in body:
        if '"' in body:
            raise MalformedLiteralError(f"unescaped quote in string literal: {literal!r}")
        return body
    return _unescape(body, literal).decode("utf-8", errors="replace")


def _unescape(body: str, literal: str) -> bytes:
    out = bytearray()
    index = 0
    length = len(body)
    while index < length:
        char = body[index]
        if char == '"':
            raise MalformedLiteralError(f"unescaped quote in string literal: {literal!r}")
        if char != "\\":
            out.extend(char.encode("utf-8"))
            index += 1
            continue
        if index + 1 >= length:
            raise MalformedLiteralError(f"trailing backslash in string literal: {literal!r}")
        code = body[index + 1]
        if code in _SIMPLE_ESCAPES:
            out.append(_SIMPLE_ESCAPES[code])
            index += 2
        elif code == "x":
            out.append(int(_digits(body, index + 2, 2, _HEX_DIGITS, literal), 16))
            index += 4
        elif code in "01234567":
            value = int(_digits(body, index + 1, 3, "01234567", literal), 8)
            if value > 0xFF:
                raise MalformedLiteralError(f"octal escape out of range in {literal!r}")
            out.append(value)
            index += 4
        elif code in ("u", "U"):
            width = 4 if code == "u" else 8
            value = int(_digits(body, index + 2, width, _HEX_DIGITS, literal), 16)
            if value > 0x10FFFF or 0xD800 <= value <= 0xDFFF:
                raise MalformedLiteralError(f"invalid unicode escape in {literal!r}")
            out.extend(chr(value).encode("utf-8"))
            index += 2 + width
        else:
            raise MalformedLiteralError(f"unknown escape sequence \\{code} in {literal!r}")
    return bytes(out)


def _digits(body: str, start: int, count: int, allowed: str, literal: str) -> str:
    chunk = body[start : start + count]
    if len(chunk) != count or any(char not in allowed for char in chunk):
        raise MalformedLiteralError(f"invalid escape sequence in {literal!r}")
    return chunk


__all__ = ["MalformedLiteralError", "unquote"]
