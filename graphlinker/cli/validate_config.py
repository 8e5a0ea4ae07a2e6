"""Validate gateway config: load YAML, check accounts, print summary table."""

from pathlib import Path
from typing import Optional

import typer
from rich.table import Table

from .shared import console, load_config_or_exit, logger


def validate_config(
    config: Optional[Path] = typer.Option(None, "--config", help="Gateway config file (default GATEWAY_CONFIG_PATH)"),
) -> None:
    """Load the azure_ad section, validate the allowed accounts, print a summary table."""
    log = logger.bind(command="validate-config")
    log.info("validate_config.start")

    azure_ad = load_config_or_exit(config, "validate-config")

    table = Table(title="Allowed accounts")
    table.add_column("Email", style="cyan")
    table.add_column("Display name", style="green")
    table.add_column("Allowed receivers")

    for account in azure_ad.allowed_accounts:
        receivers = "\n".join(account.allowed_receivers) or "[dim](none)[/dim]"
        table.add_row(account.email, account.display_name, receivers)

    console.print(table)
    if not azure_ad.allowed_accounts:
        console.print("[yellow]No allowed accounts configured: every request will be rejected.[/yellow]")
    console.print(f"[green]Config valid. {len(azure_ad.allowed_accounts)} accounts.[/green]")
    log.info("validate_config.ok", accounts=len(azure_ad.allowed_accounts))
