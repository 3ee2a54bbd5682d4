from __future__ import annotations

from typing import Iterable


def rank_counts(items: Iterable[tuple[str, int]]) -> list[tuple[str, int]]:
    """Descending count, ties broken by ascending value."""
    return sorted(items, key=lambda kv: (-kv[1], kv[0]))


def header_label(target_key: str) -> str:
    return f"Unique {target_key}s"


def format_report(items: Iterable[tuple[str, int]], target_key: str = "model") -> list[str]:
    ranked = rank_counts(items)
    lines = [f"{header_label(target_key)}: {len(ranked)}"]
    lines.extend(f"{value}: {count}" for value, count in ranked)
    return lines
