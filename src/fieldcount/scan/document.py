"""
Document scanner: finds `"key": value` pairs anywhere in a byte stream.

No parse tree is built and object nesting is not tracked. Every quoted string
followed by a colon is treated as a key, wherever it sits. Values of other keys are
skipped whole, so keys inside an object-valued field are not visited unless
`descend` is set.
"""

from __future__ import annotations

import os
import time
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

from fieldcount.report.progress import ProgressReporter
from fieldcount.scan.reader import EOF, ByteReader
from fieldcount.scan.skip import OPENERS, skip_value
from fieldcount.scan.strings import QUOTE, read_json_string
from fieldcount.table.freq import INITIAL_BUCKETS, FrequencyTable, make_table
from fieldcount.util.logging import get_logger

DEFAULT_TARGET_KEY = "model"
COLON = ord(":")

logger = get_logger(__name__)


@dataclass(frozen=True)
class ScanStats:
    values_seen: int
    unique: int
    bytes_read: int
    elapsed_sec: float


def scan_document(
    reader: ByteReader,
    table: FrequencyTable,
    *,
    target_key: str = DEFAULT_TARGET_KEY,
    descend: bool = False,
    progress: ProgressReporter | None = None,
) -> ScanStats:
    """Count string values of `target_key` into `table`.

    Non-string values of the target key are skipped, never counted. End-of-stream
    between pairs, or right after a colon, ends the scan normally. Raises ScanError
    on an unterminated string or container, which invalidates the whole scan.
    """
    start = time.time()
    values_seen = 0
    while reader.skip_to(QUOTE):
        key = read_json_string(reader)
        c = reader.skip_ws()
        if c != COLON:
            continue
        c = reader.skip_ws()
        if c == EOF:
            break
        if c == QUOTE and key == target_key:
            table.increment(read_json_string(reader))
            values_seen += 1
            if progress is not None:
                progress.maybe_report(reader.tell(), values_seen, table.size())
        elif descend and c in OPENERS:
            continue
        else:
            skip_value(reader, c)
    return ScanStats(
        values_seen=values_seen,
        unique=table.size(),
        bytes_read=reader.tell(),
        elapsed_sec=time.time() - start,
    )


def stream_size(stream: BinaryIO) -> int:
    """Total byte size of a seekable stream, 0 when it can't be determined."""
    try:
        pos = stream.tell()
        end = stream.seek(0, os.SEEK_END)
        stream.seek(pos, os.SEEK_SET)
    except (OSError, ValueError):
        return 0
    return max(0, end)


def count_field_values(
    path: str | Path,
    *,
    target_key: str = DEFAULT_TARGET_KEY,
    table_kind: str = "dict",
    initial_buckets: int = INITIAL_BUCKETS,
    descend: bool = False,
    chunk_size: int = 1 << 16,
    progress_interval: float | None = None,
) -> tuple[FrequencyTable, ScanStats]:
    """Scan the file at `path` and return the filled table with its stats.

    `progress_interval=None` disables the stderr progress line.
    """
    table = make_table(table_kind, initial_buckets)
    with open(path, "rb") as f:
        total_bytes = stream_size(f)
        progress = None
        if progress_interval is not None:
            progress = ProgressReporter(total_bytes, progress_interval, label=f"{target_key}s")
        logger.debug("scan_start path=%s total_bytes=%d key=%s", path, total_bytes, target_key)
        try:
            stats = scan_document(
                ByteReader(f, chunk_size),
                table,
                target_key=target_key,
                descend=descend,
                progress=progress,
            )
        finally:
            if progress is not None:
                progress.finish()
    return table, stats
