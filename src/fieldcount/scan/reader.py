from __future__ import annotations

from typing import BinaryIO

EOF = -1

WHITESPACE = frozenset(b" \t\n\r\v\f")


class ByteReader:
    """Chunked byte cursor over a binary stream with a single byte of pushback.

    `read()` returns the next byte as an int, or `EOF` once the stream is drained.
    `tell()` counts bytes consumed by the caller, so a pushed-back byte is not counted.
    """

    def __init__(self, stream: BinaryIO, chunk_size: int = 1 << 16) -> None:
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        self._stream = stream
        self._chunk_size = chunk_size
        self._buf = b""
        self._pos = 0
        self._consumed = 0
        self._pushback = EOF

    def _fill(self) -> bool:
        chunk = self._stream.read(self._chunk_size)
        if not chunk:
            return False
        self._consumed += len(self._buf)
        self._buf = chunk
        self._pos = 0
        return True

    def read(self) -> int:
        if self._pushback != EOF:
            b = self._pushback
            self._pushback = EOF
            return b
        if self._pos >= len(self._buf) and not self._fill():
            return EOF
        b = self._buf[self._pos]
        self._pos += 1
        return b

    def unread(self, b: int) -> None:
        if b == EOF:
            return
        if self._pushback != EOF:
            raise RuntimeError("only one byte of pushback is supported")
        self._pushback = b

    def skip_ws(self) -> int:
        """Return the first non-whitespace byte (consumed), or EOF."""
        b = self.read()
        while b != EOF and b in WHITESPACE:
            b = self.read()
        return b

    def skip_to(self, target: int) -> bool:
        """Consume bytes through the next occurrence of `target`.

        Returns False when the stream ends first.
        """
        if self._pushback != EOF:
            b = self._pushback
            self._pushback = EOF
            if b == target:
                return True
        while True:
            idx = self._buf.find(target, self._pos)
            if idx >= 0:
                self._pos = idx + 1
                return True
            self._pos = len(self._buf)
            if not self._fill():
                return False

    def tell(self) -> int:
        offset = self._consumed + self._pos
        if self._pushback != EOF:
            offset -= 1
        return offset
