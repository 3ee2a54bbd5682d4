from __future__ import annotations

from fieldcount.scan.errors import ScanError
from fieldcount.scan.reader import EOF, ByteReader

QUOTE = ord('"')
BACKSLASH = ord("\\")

# \uXXXX escapes are not reconstructed; they collapse to this byte.
UNICODE_PLACEHOLDER = ord("?")

_ESCAPES = {
    ord('"'): ord('"'),
    ord("\\"): ord("\\"),
    ord("/"): ord("/"),
    ord("b"): ord("\b"),
    ord("f"): ord("\f"),
    ord("n"): ord("\n"),
    ord("r"): ord("\r"),
    ord("t"): ord("\t"),
}

_HEX_DIGITS = frozenset(b"0123456789abcdefABCDEF")


def read_json_string(reader: ByteReader) -> str:
    """Decode a string literal body; the opening quote must already be consumed.

    Consumes through the closing quote. Unknown escapes pass the escaped byte through.
    Raises ScanError on end-of-stream or a malformed \\u escape.
    """
    buf = bytearray()
    while True:
        c = reader.read()
        if c == EOF:
            raise ScanError("eof_in_string", reader.tell())
        if c == QUOTE:
            return buf.decode("utf-8", errors="surrogateescape")
        if c == BACKSLASH:
            esc = reader.read()
            if esc == EOF:
                raise ScanError("eof_in_escape", reader.tell())
            if esc == ord("u"):
                for _ in range(4):
                    h = reader.read()
                    if h == EOF or h not in _HEX_DIGITS:
                        raise ScanError("bad_unicode_escape", reader.tell())
                c = UNICODE_PLACEHOLDER
            else:
                c = _ESCAPES.get(esc, esc)
        buf.append(c)
