from __future__ import annotations

from fieldcount.scan.errors import ScanError
from fieldcount.scan.reader import EOF, WHITESPACE, ByteReader
from fieldcount.scan.strings import BACKSLASH, QUOTE, read_json_string

OPENERS = frozenset(b"{[")
CLOSERS = frozenset(b"}]")
_TOKEN_END = frozenset(b",}]")


def skip_container(reader: ByteReader) -> None:
    """Consume an object or array whose opening bracket was already read."""
    depth = 1
    in_string = False
    escaped = False
    while depth > 0:
        c = reader.read()
        if c == EOF:
            raise ScanError("eof_in_container", reader.tell())
        if in_string:
            if escaped:
                escaped = False
            elif c == BACKSLASH:
                escaped = True
            elif c == QUOTE:
                in_string = False
            continue
        if c == QUOTE:
            in_string = True
        elif c in OPENERS:
            depth += 1
        elif c in CLOSERS:
            depth -= 1


def skip_bare_token(reader: ByteReader, first: int) -> None:
    # Numbers and literals are not validated, only stepped over.
    c = first
    while c != EOF and c not in _TOKEN_END and c not in WHITESPACE:
        c = reader.read()
    if c in _TOKEN_END:
        reader.unread(c)


def skip_value(reader: ByteReader, first: int) -> None:
    """Discard one JSON value whose first byte `first` has already been read."""
    if first == QUOTE:
        read_json_string(reader)
    elif first in OPENERS:
        skip_container(reader)
    else:
        skip_bare_token(reader, first)
