from __future__ import annotations

import os
import subprocess
import sys
from pathlib import Path

import yaml
from typer.testing import CliRunner

from fieldcount.cli import app

FLAT = (
    '[{"id":1,"model":"RDV2","serial":"A"},'
    '{"id":2,"model":"ABC","serial":"B"},'
    '{"id":3,"model":"RDV2","serial":"C"}]'
)
QUIET = ["--no-progress", "--log-level", "WARNING"]

runner = CliRunner()


def _write(tmp_path: Path, text: str, name: str = "input.json") -> Path:
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


def test_prints_ranked_counts(tmp_path: Path) -> None:
    path = _write(tmp_path, FLAT)
    result = runner.invoke(app, [str(path), *QUIET])
    assert result.exit_code == 0
    assert result.stdout.splitlines() == ["Unique models: 2", "RDV2: 2", "ABC: 1"]


def test_chained_table_and_custom_key(tmp_path: Path) -> None:
    path = _write(tmp_path, FLAT)
    result = runner.invoke(app, [str(path), "--key", "serial", "--table", "chained", *QUIET])
    assert result.exit_code == 0
    assert result.stdout.splitlines() == ["Unique serials: 3", "A: 1", "B: 1", "C: 1"]


def test_config_file_enables_descend(tmp_path: Path) -> None:
    path = _write(tmp_path, '[{"model":"XYZ"},{"nested":{"model":"RDV2"}}]')
    cfg = _write(tmp_path, yaml.safe_dump({"descend": True, "progress": False}), name="scan.yaml")
    result = runner.invoke(app, [str(path), "--config", str(cfg), "--log-level", "WARNING"])
    assert result.exit_code == 0
    assert result.stdout.splitlines() == ["Unique models: 2", "RDV2: 1", "XYZ: 1"]


def test_truncated_input_fails_without_output(tmp_path: Path) -> None:
    path = _write(tmp_path, '[{"model":"RDV2"},{"mod')
    result = runner.invoke(app, [str(path), *QUIET])
    assert result.exit_code == 1
    assert "Unique models" not in result.stdout


def test_missing_file_fails(tmp_path: Path) -> None:
    result = runner.invoke(app, [str(tmp_path / "absent.json"), *QUIET])
    assert result.exit_code == 1
    assert "Unique models" not in result.stdout


def test_bad_config_fails(tmp_path: Path) -> None:
    path = _write(tmp_path, FLAT)
    result = runner.invoke(app, [str(path), "--table", "btree", *QUIET])
    assert result.exit_code == 1


def test_missing_argument_is_usage_error() -> None:
    result = runner.invoke(app, [])
    assert result.exit_code == 2


def test_count_field_script_smoke(tmp_path: Path) -> None:
    path = _write(tmp_path, '[{"model":"RDV2"},{"model":123},{"model":"RDV2"},{"model":"ABC"}]')
    root = Path(__file__).resolve().parents[1]
    script = root / "scripts" / "count_field.py"
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(root / "src"), env.get("PYTHONPATH")]))
    result = subprocess.run(
        [sys.executable, str(script), str(path), "--progress-interval", "0"],
        check=True,
        cwd=str(root),
        capture_output=True,
        text=True,
        env=env,
    )
    assert result.stdout.splitlines() == ["Unique models: 2", "RDV2: 2", "ABC: 1"]
    assert "processed" in result.stderr


def test_script_reports_parse_error(tmp_path: Path) -> None:
    path = _write(tmp_path, '[{"model":"RDV2"},{"mod')
    root = Path(__file__).resolve().parents[1]
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(root / "src"), env.get("PYTHONPATH")]))
    result = subprocess.run(
        [sys.executable, str(root / "scripts" / "count_field.py"), str(path), "--no-progress"],
        cwd=str(root),
        capture_output=True,
        text=True,
        env=env,
    )
    assert result.returncode == 1
    assert result.stdout == ""
    assert "Parse error" in result.stderr


def test_unknown_log_level_is_a_setup_error(tmp_path: Path) -> None:
    path = _write(tmp_path, FLAT)
    result = runner.invoke(app, [str(path), "--log-level", "LOUD", "--no-progress"])
    assert result.exit_code == 1
    assert isinstance(result.exception, SystemExit)
    assert "Unique models" not in result.stdout


def test_invalid_utf8_values_are_reported_verbatim(tmp_path: Path) -> None:
    path = tmp_path / "raw.json"
    path.write_bytes(b'[{"model":"\xff"},{"model":"\xfe"},{"model":"\xff"}]')
    result = runner.invoke(app, [str(path), *QUIET])
    assert result.exit_code == 0
    assert result.stdout_bytes.splitlines() == [b"Unique models: 2", b"\xff: 2", b"\xfe: 1"]
