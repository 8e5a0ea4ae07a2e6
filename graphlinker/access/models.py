"""Pydantic models for the allow-list configuration."""

from typing import Iterable, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class AllowedAccount(BaseModel):
    """A mailbox the gateway may act for, with the receivers it may address."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    email: str
    display_name: str = ""
    allowed_receivers: tuple[str, ...] = ()

    @field_validator("email")
    @classmethod
    def _strip_email(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("email must be non-empty")
        return value

    @field_validator("allowed_receivers", mode="before")
    @classmethod
    def _coerce_receivers(cls, value):
        if value is None:
            return ()
        if isinstance(value, str):
            # A single pattern written as a scalar in YAML
            return (value,)
        return tuple(str(p).strip() for p in value)


class AzureADConfig(BaseModel):
    """The `azure_ad` section: client-credential parameters plus the allow-list."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    tenant_id: str = Field(min_length=1)
    client_id: str = Field(min_length=1)
    client_secret: str = Field(min_length=1)
    redirect_uri: Optional[str] = None  # unused by client-credential flow
    allowed_accounts: tuple[AllowedAccount, ...] = ()


class AuthorizationConfig:
    """Read-only view over the configured accounts, in configured order."""

    __slots__ = ("_accounts",)

    def __init__(self, accounts: Iterable[AllowedAccount]):
        self._accounts = tuple(accounts)

    @classmethod
    def from_azure_ad(cls, azure_ad: AzureADConfig) -> "AuthorizationConfig":
        return cls(azure_ad.allowed_accounts)

    @property
    def accounts(self) -> tuple[AllowedAccount, ...]:
        return self._accounts

    def __iter__(self):
        return iter(self._accounts)

    def __len__(self) -> int:
        return len(self._accounts)
