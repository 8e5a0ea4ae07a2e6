"""Check access: evaluate a sender and receivers against the configured allow-list."""

from pathlib import Path
from typing import Optional

import typer
from rich.table import Table

from graphlinker.access import AccessEvaluator, AuthorizationConfig

from .shared import console, load_config_or_exit, logger


def check_access(
    sender: str = typer.Argument(..., help="Sender mailbox"),
    receivers: Optional[list[str]] = typer.Argument(None, help="Receiver addresses to check"),
    config: Optional[Path] = typer.Option(None, "--config", help="Gateway config file (default GATEWAY_CONFIG_PATH)"),
) -> None:
    """Print whether SENDER is allowed and which pattern (if any) allows each RECEIVER. Exit 1 on any denial."""
    log = logger.bind(command="check-access", sender=sender)
    evaluator = AccessEvaluator(AuthorizationConfig.from_azure_ad(load_config_or_exit(config, "check-access")))

    if not evaluator.is_sender_allowed(sender):
        console.print(f"[red]Sender {sender} is not allowed.[/red]")
        log.info("check_access.sender_denied")
        raise typer.Exit(1)
    console.print(f"[green]Sender {sender} is allowed.[/green]")

    if not receivers:
        return

    table = Table(title=f"Receivers for {sender}")
    table.add_column("Receiver", style="cyan")
    table.add_column("Result")
    table.add_column("Pattern")

    denied = []
    for receiver in receivers:
        pattern = evaluator.match_receiver(sender, receiver)
        if pattern is None:
            denied.append(receiver)
            table.add_row(receiver, "[red]denied[/red]", "")
        else:
            table.add_row(receiver, "[green]allowed[/green]", pattern)
    console.print(table)
    log.info("check_access.done", receivers=len(receivers), denied=len(denied))
    if denied:
        raise typer.Exit(1)
