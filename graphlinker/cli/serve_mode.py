"""Serve mode: run the FastAPI gateway with uvicorn."""

import sys
from pathlib import Path
from typing import Optional

import typer
import uvicorn

from graphlinker.api.server import create_app
from graphlinker.config import GATEWAY_HOST, GATEWAY_PORT
from graphlinker.errors import ConfigurationError

from .shared import console, load_config_or_exit, logger


def serve(
    port: int = typer.Option(GATEWAY_PORT, "--port", "-p", help="Port for the gateway server"),
    host: str = typer.Option(GATEWAY_HOST, "--host", "-h", help="Bind host"),
    config: Optional[Path] = typer.Option(None, "--config", help="Gateway config file (default GATEWAY_CONFIG_PATH)"),
    mock: bool = typer.Option(
        False,
        "--mock",
        "-m",
        help="Use the JSON mock provider (data/inbox.json, output/sent_items.json) instead of Graph",
    ),
) -> None:
    """Start the gateway. Refuses to start when the config or GATEWAY_API_KEY is missing."""
    log = logger.bind(command="serve", port=port, mock=mock)
    log.info("serve.start")

    azure_ad = load_config_or_exit(config, "serve")
    try:
        app = create_app(azure_ad=azure_ad, use_mock=mock)
    except ConfigurationError as e:
        console.print(f"[red]Config error: {e}[/red]")
        log.error("serve.config_error", error=str(e))
        raise typer.Exit(1) from e

    console.print(f"[green]Starting gateway on http://{host}:{port}[/green]")
    console.print(f"[dim]{len(azure_ad.allowed_accounts)} allowed accounts. Docs at /docs[/dim]")
    if mock:
        console.print("[yellow]Mock provider: no mail leaves this machine.[/yellow]")
    try:
        uvicorn.run(
            app,
            host=host,
            port=port,
            log_level="info",
            timeout_graceful_shutdown=15,
        )
    except KeyboardInterrupt:
        console.print("\n[dim]Shutting down...[/dim]")
        sys.exit(0)
