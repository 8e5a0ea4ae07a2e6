"""Shared CLI helpers: console, logger, config loading with a readable failure."""

from pathlib import Path

import typer
from rich.console import Console

from graphlinker.access import AzureADConfig, load_gateway_config
from graphlinker.errors import ConfigurationError
from graphlinker.utils.logger import get_logger

console = Console()
logger = get_logger("graphlinker.cli")


def load_config_or_exit(path: Path | None, command: str) -> AzureADConfig:
    """Load the gateway config; print the error and exit 1 when it is missing or invalid."""
    log = logger.bind(command=command)
    try:
        return load_gateway_config(path)
    except ConfigurationError as e:
        console.print(f"[red]Config error: {e}[/red]")
        log.error("config.load_failed", error=str(e))
        raise typer.Exit(1) from e
