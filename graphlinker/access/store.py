"""Allow-list store: load the gateway config (YAML) once at startup and fail fast."""

import os
from pathlib import Path
from typing import Any

import yaml
from email_validator import EmailNotValidError, validate_email
from pydantic import ValidationError

from graphlinker.access.models import AllowedAccount, AuthorizationConfig, AzureADConfig
from graphlinker.access.patterns import fold_address
from graphlinker.config import GATEWAY_CONFIG_PATH
from graphlinker.errors import ConfigurationError
from graphlinker.utils.logger import get_logger

logger = get_logger("graphlinker.access.store")

SECTION = "azure_ad"

# Environment variables that override the matching azure_ad keys when set
_ENV_OVERRIDES = {
    "tenant_id": "AZURE_TENANT_ID",
    "client_id": "AZURE_CLIENT_ID",
    "client_secret": "AZURE_CLIENT_SECRET",
}


def get_config_path() -> Path:
    """Path to the gateway config file. Override via GATEWAY_CONFIG_PATH env."""
    raw = os.getenv("GATEWAY_CONFIG_PATH", "").strip()
    if raw:
        return Path(raw)
    return GATEWAY_CONFIG_PATH


def is_valid_email(addr: str) -> bool:
    """Return True if the address is a valid email format.

    Syntax only: no DNS lookup, and internal domains (`corp`, `mail.local`) are accepted.
    """
    if not addr or not isinstance(addr, str):
        return False
    try:
        validate_email(addr.strip(), check_deliverability=False, globally_deliverable=False)
        return True
    except EmailNotValidError:
        return False


def _read_section(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise ConfigurationError(
            f"Gateway config not found: {path}. Set GATEWAY_CONFIG_PATH or create config/gateway.yaml."
        )
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in gateway config {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"Gateway config must be a YAML object (dict), got {type(data).__name__}")
    section = data.get(SECTION)
    if section is None:
        raise ConfigurationError(f"{SECTION} configuration section is missing in {path}.")
    if not isinstance(section, dict):
        raise ConfigurationError(f"{SECTION} configuration section must be a mapping in {path}.")
    return dict(section)


def _apply_env_overrides(section: dict[str, Any]) -> dict[str, Any]:
    for key, env_name in _ENV_OVERRIDES.items():
        value = os.getenv(env_name, "").strip()
        if value:
            section[key] = value
    return section


def _check_accounts(accounts: tuple[AllowedAccount, ...]) -> None:
    """Reject invalid or duplicate account emails (duplicates compare case-insensitively)."""
    seen: dict[str, str] = {}
    for account in accounts:
        if not is_valid_email(account.email):
            raise ConfigurationError(f"Invalid email format in allowed_accounts: {account.email!r}")
        key = fold_address(account.email)
        if key in seen:
            raise ConfigurationError(
                f"Duplicate allowed account {account.email!r} (already configured as {seen[key]!r})."
            )
        seen[key] = account.email


def load_gateway_config(path: Path | None = None) -> AzureADConfig:
    """Load and validate the azure_ad section. Raises ConfigurationError on any problem."""
    path = path or get_config_path()
    section = _apply_env_overrides(_read_section(path))
    try:
        config = AzureADConfig.model_validate(section)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid {SECTION} configuration in {path}: {e}") from e
    _check_accounts(config.allowed_accounts)
    logger.info(
        "access_store.config_loaded",
        path=str(path),
        account_count=len(config.allowed_accounts),
        tenant_id=config.tenant_id[:8],
    )
    return config


def load_authorization_config(path: Path | None = None) -> AuthorizationConfig:
    """Load the allow-list only."""
    return AuthorizationConfig.from_azure_ad(load_gateway_config(path))
