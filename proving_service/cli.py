"""
Command line interface for the proving service.

Commands:
  - transpile : convert a verifier assembly listing into a Solidity contract
  - serve     : run the HTTP API under uvicorn

Usage:
  proving-service transpile verifier.yul -o Verifier.sol
  proving-service serve --port 8000
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from .config import get_settings
from .logging import get_logger, setup_logging
from .transpiler import TranspileError, transpile

app = typer.Typer(add_completion=False, help="Proving service tools")


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Override LOG_LEVEL"),
):
    """Shared options for all subcommands."""
    cfg = get_settings()
    setup_logging(level=(log_level or cfg.log_level).upper(), log_format="console")


@app.command("transpile")
def transpile_cmd(
    input_path: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="Assembly listing"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write contract here (default: stdout)"),
    trim_head: Optional[int] = typer.Option(None, "--trim-head", min=0, help="Wrapper lines to drop before the body"),
    trim_tail: Optional[int] = typer.Option(None, "--trim-tail", min=0, help="Wrapper lines to drop after the body"),
):
    """Transpile verifier assembly into the Verifier contract."""
    cfg = get_settings()
    log = get_logger(__name__)
    try:
        result = transpile(
            input_path.read_text(encoding="utf-8"),
            trim_head=cfg.transpile_trim_head if trim_head is None else trim_head,
            trim_tail=cfg.transpile_trim_tail if trim_tail is None else trim_tail,
        )
    except TranspileError as e:
        log.error("transpile_failed", input=str(input_path), **e.to_details())
        typer.echo(f"error: {e.message}", err=True)
        raise typer.Exit(code=1)

    if output is None:
        typer.echo(result.contract, nl=False)
    else:
        output.write_text(result.contract, encoding="utf-8")
        log.info(
            "transpiled",
            output=str(output),
            num_pub_inputs=result.num_pub_inputs,
            transcript_words=result.buffer_word_count,
        )


@app.command("serve")
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address (default: HOST)"),
    port: Optional[int] = typer.Option(None, "--port", help="Port (default: PORT)"),
    workers: int = typer.Option(1, "--workers", min=1),
    reload: bool = typer.Option(False, "--reload", help="Enable autoreload (dev only)"),
):
    """Run the HTTP API."""
    from .main import run

    cfg = get_settings()
    run(host or cfg.host, port or cfg.port, workers=workers, reload=reload, log_level=cfg.log_level)


if __name__ == "__main__":
    app()
