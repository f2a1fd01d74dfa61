from __future__ import annotations

from pathlib import Path

from typer.testing import CliRunner

from proving_service.cli import app
from proving_service.transpiler import transpile

from .samples import ASSEMBLY_HEAD, ASSEMBLY_TAIL, ASSEMBLY_TEXT

runner = CliRunner()


def _write(tmp_path: Path, text: str) -> Path:
    src = tmp_path / "verifier.yul"
    src.write_text(text, encoding="utf-8")
    return src


def test_transpile_to_stdout(tmp_path: Path):
    src = _write(tmp_path, ASSEMBLY_TEXT)
    result = runner.invoke(app, ["--log-level", "WARNING", "transpile", str(src)])
    assert result.exit_code == 0, result.output
    assert result.stdout == transpile(ASSEMBLY_TEXT).contract


def test_transpile_to_file(tmp_path: Path):
    src = _write(tmp_path, ASSEMBLY_TEXT)
    out = tmp_path / "Verifier.sol"
    result = runner.invoke(app, ["transpile", str(src), "-o", str(out)])
    assert result.exit_code == 0, result.output
    assert out.read_text(encoding="utf-8") == transpile(ASSEMBLY_TEXT).contract


def test_transpile_trim_options(tmp_path: Path):
    src = _write(tmp_path, "// extra\n" + ASSEMBLY_TEXT)
    out = tmp_path / "Verifier.sol"
    result = runner.invoke(app, ["transpile", str(src), "-o", str(out), "--trim-head", "17"])
    assert result.exit_code == 0, result.output
    assert out.read_text(encoding="utf-8") == transpile(ASSEMBLY_TEXT).contract


def test_transpile_failure_exits_nonzero(tmp_path: Path):
    src = _write(tmp_path, "\n".join(ASSEMBLY_HEAD + ASSEMBLY_TAIL))
    out = tmp_path / "Verifier.sol"
    result = runner.invoke(app, ["transpile", str(src), "-o", str(out)])
    assert result.exit_code == 1
    assert "error:" in result.output
    assert not out.exists()


def test_transpile_missing_input(tmp_path: Path):
    result = runner.invoke(app, ["transpile", str(tmp_path / "nope.yul")])
    assert result.exit_code != 0
