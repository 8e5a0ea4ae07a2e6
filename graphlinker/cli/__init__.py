"""CLI commands: serve, validate-config, check-access."""

from typer import Typer

from graphlinker.cli import check_access, serve_mode, validate_config as validate_config_module

app = Typer(help="GraphLinker: allow-listed mail gateway over Microsoft Graph")


def register_commands() -> None:
    """Register all CLI commands on the global app."""
    app.command()(serve_mode.serve)
    app.command(name="validate-config")(validate_config_module.validate_config)
    app.command(name="check-access")(check_access.check_access)


register_commands()
