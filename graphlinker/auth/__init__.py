"""Authentication for application (client credential) Graph API access."""

from graphlinker.auth.credential import (
    MSALClientCredential,
    get_client_secret_credential,
)

__all__ = [
    "MSALClientCredential",
    "get_client_secret_credential",
]
