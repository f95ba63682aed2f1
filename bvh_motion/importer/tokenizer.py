"""
BVH tokenizer and bounds-checked token cursor.

BVH has no comments and no quoting: a token is any maximal run of characters
that are not space, tab, CR, LF or NUL. Non-ASCII characters also split
tokens, so a stray UTF-8 sequence acts like whitespace.
"""

import re

import numpy as np

from ..errors import BVHImportError


_SEPARATORS = re.compile(r"[ \t\r\n\x00\x80-\U0010FFFF]+")
_FLOAT = re.compile(r"[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?")
_INT = re.compile(r"[+-]?[0-9]+")


def tokenize(data):
    """
    Split BVH text into tokens.

    Args:
        data: File contents as str or bytes

    Returns:
        List of token strings, in file order
    """
    if isinstance(data, (bytes, bytearray)):
        # latin-1 keeps every byte >= 0x80 as a single non-ASCII separator
        data = bytes(data).decode("latin-1")
    return [t for t in _SEPARATORS.split(data) if t]


class TokenStream:
    """
    Positional reader over a token list.

    Every access is bounds-checked; running off the end or meeting an
    unexpected token raises BVHImportError instead of IndexError.
    """

    def __init__(self, tokens, source=None):
        self.tokens = tokens
        self.index = 0
        self.n = len(tokens)
        self.source = source

    @property
    def remaining(self):
        return self.n - self.index

    def at_end(self):
        return self.index >= self.n

    def error(self, message, index=None):
        return BVHImportError(message, token_index=self.index if index is None else index, source=self.source)

    def peek(self, offset=0):
        """Token at index + offset without consuming it, or None past the end."""
        i = self.index + offset
        if i >= self.n:
            return None
        return self.tokens[i]

    def next(self):
        if self.index >= self.n:
            raise self.error("Unexpected end of file")
        token = self.tokens[self.index]
        self.index += 1
        return token

    def expect(self, keyword):
        token = self.next()
        if token != keyword:
            raise self.error(f"Expected '{keyword}', found '{token}'", index=self.index - 1)
        return token

    def read_float(self):
        token = self.next()
        # Plain decimal notation only: no digit separators, nan or inf
        if not _FLOAT.fullmatch(token):
            raise self.error(f"Invalid number '{token}'", index=self.index - 1)
        value = float(token)
        if not np.isfinite(value):
            raise self.error(f"Non-finite number '{token}'", index=self.index - 1)
        return value

    def read_floats(self, count):
        """Read count numbers as a float64 array."""
        if self.index + count > self.n:
            raise self.error(f"Unexpected end of file: {count} values needed, {self.remaining} left")
        return np.array([self.read_float() for _ in range(count)], dtype=np.float64)

    def read_int(self):
        token = self.next()
        if not _INT.fullmatch(token):
            raise self.error(f"Invalid integer '{token}'", index=self.index - 1)
        return int(token)
