"""CLI entrypoint for defi-query."""

from __future__ import annotations

import asyncio
import json
import logging
import os
from pathlib import Path
from typing import Annotated, Any

import typer

from .logger import setup_logging
from .settings import QuerySettings
from .state import AppState

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    add_help_option=True,
    pretty_exceptions_enable=True,
    pretty_exceptions_short=True,
    pretty_exceptions_show_locals=False,
    rich_markup_mode="rich",
    help="Ask natural-language questions about DeFi protocol data.",
)

ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        "-c",
        help="Path to a TOML config file (can include [defi_query] table).",
    ),
]
LogLevelOption = Annotated[
    str | None,
    typer.Option(
        "--log-level",
        help="Override logging verbosity (TRACE, DEBUG, INFO, WARNING, ERROR, CRITICAL).",
    ),
]


def _build_logger() -> logging.Logger:
    """Build a logger instance."""
    return logging.getLogger("defi_query")


def _load_state(config_path: Path | None, **overrides: Any) -> AppState:
    """Build settings (CLI > ENV > FILE), configure logging and wrap in state."""
    if config_path:
        os.environ["DEFI_QUERY_CONFIG"] = str(config_path)

    init_kwargs = {k: v for k, v in overrides.items() if v is not None}
    if "log_level" in init_kwargs:
        init_kwargs["log_level"] = init_kwargs["log_level"].upper()

    settings = QuerySettings(**init_kwargs)
    setup_logging(settings.log_level)
    return AppState.from_settings(settings, logger=_build_logger())


@app.command()
def query(
    text: Annotated[str, typer.Argument(help="The question, e.g. 'Aave TVL on Base'.")],
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print the raw JSON envelope instead of tables."),
    ] = False,
    demo_mode: Annotated[
        bool | None,
        typer.Option(
            "--demo/--live",
            help="Force demo data, or allow live sources when credentials are set.",
        ),
    ] = None,
    config_path: ConfigOption = None,
    log_level: LogLevelOption = None,
) -> None:
    """Resolve a question and print the result. Exits 1 when it fails."""
    state = _load_state(config_path, demo_mode=demo_mode, log_level=log_level)

    from .pipeline.run import process_query
    from .report.formatter import format_result

    try:
        result = asyncio.run(process_query(state, text))
    finally:
        state.client.close()

    if as_json:
        typer.echo(json.dumps(result.to_dict(), indent=2))
    else:
        format_result(result)

    if not result.success:
        raise typer.Exit(code=1)


@app.command()
def serve(
    host: Annotated[str | None, typer.Option("--host", help="Bind address.")] = None,
    port: Annotated[int | None, typer.Option("--port", "-p", help="Bind port.")] = None,
    config_path: ConfigOption = None,
    log_level: LogLevelOption = None,
) -> None:
    """Run the HTTP API with uvicorn."""
    state = _load_state(config_path, host=host, port=port, log_level=log_level)

    import uvicorn

    from .server import create_app

    settings = state.settings
    state.logger.info("Serving on %s:%d", settings.host, settings.port)
    uvicorn.run(
        create_app(state),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


@app.command("show-config")
def show_config(
    config_path: ConfigOption = None,
) -> None:
    """Print effective config (with secrets redacted) and exit."""
    state = _load_state(config_path)
    state.client.close()
    typer.echo(json.dumps(state.settings.as_safe_dict(), indent=2))


def run() -> None:
    """Entrypoint used by the console script."""
    app()


if __name__ == "__main__":
    run()
