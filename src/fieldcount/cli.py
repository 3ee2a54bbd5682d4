from __future__ import annotations

from typing import Optional

import typer
from pydantic import ValidationError

from fieldcount.report.ranking import format_report
from fieldcount.scan.document import count_field_values
from fieldcount.scan.errors import ScanError
from fieldcount.util.config import ScanConfig, resolve_config
from fieldcount.util.logging import configure_logging, get_logger

app = typer.Typer(add_completion=False)


def _load_settings(config: str, overrides: dict) -> ScanConfig:
    try:
        return resolve_config(config or None, overrides)
    except (OSError, ValueError, ValidationError) as exc:
        configure_logging()
        get_logger(__name__).error("Invalid configuration %s: %s", config or "<cli>", exc)
        raise SystemExit(1)


@app.command()
def main(
    path: str = typer.Argument(..., help="JSON file to scan."),
    config: str = typer.Option("", "--config", help="YAML file with scan settings."),
    key: Optional[str] = typer.Option(None, "--key", help="Field whose string values are counted."),
    table: Optional[str] = typer.Option(None, "--table", help="Counting table: dict or chained."),
    initial_buckets: Optional[int] = typer.Option(None, "--initial-buckets"),
    descend: Optional[bool] = typer.Option(
        None,
        "--descend/--no-descend",
        help="Keep scanning inside object and array values instead of skipping them.",
    ),
    progress: Optional[bool] = typer.Option(None, "--progress/--no-progress"),
    progress_interval: Optional[float] = typer.Option(None, "--progress-interval"),
    chunk_size: Optional[int] = typer.Option(None, "--chunk-size"),
    log_level: Optional[str] = typer.Option(None, "--log-level"),
) -> None:
    cfg = _load_settings(
        config,
        {
            "target_key": key,
            "table": table,
            "initial_buckets": initial_buckets,
            "descend": descend,
            "progress": progress,
            "progress_interval": progress_interval,
            "chunk_size": chunk_size,
            "log_level": log_level,
        },
    )
    configure_logging(cfg.log_level)
    logger = get_logger(__name__)
    logger.info(
        "count_field path=%s key=%s table=%s descend=%s",
        path,
        cfg.target_key,
        cfg.table,
        str(cfg.descend).lower(),
    )
    try:
        counts, stats = count_field_values(
            path,
            target_key=cfg.target_key,
            table_kind=cfg.table,
            initial_buckets=cfg.initial_buckets,
            descend=cfg.descend,
            chunk_size=cfg.chunk_size,
            progress_interval=cfg.progress_interval if cfg.progress else None,
        )
    except ScanError as exc:
        logger.error("Parse error while reading '%s'", path)
        logger.debug("scan failure reason=%s offset=%d", exc.reason, exc.offset)
        raise SystemExit(1)
    except OSError as exc:
        logger.error("Cannot open '%s': %s", path, exc.strerror or exc)
        raise SystemExit(1)
    for line in format_report(counts.items(), cfg.target_key):
        typer.echo(line.encode("utf-8", "surrogateescape"))
    logger.info(
        "count_field complete values=%d unique=%d bytes=%d elapsed=%.2fs",
        stats.values_seen,
        stats.unique,
        stats.bytes_read,
        stats.elapsed_sec,
    )


if __name__ == "__main__":
    app()
