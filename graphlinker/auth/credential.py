"""MSAL client-credential TokenCredential for application (app-only) Graph access."""

import time
from typing import Any

import msal
from azure.core.credentials import AccessToken, TokenCredential

from graphlinker.config import GRAPH_SCOPES
from graphlinker.utils.logger import get_logger

logger = get_logger("graphlinker.auth")


class MSALClientCredential(TokenCredential):
    """
    TokenCredential that exchanges (tenant id, client id, client secret) for an app-only token.
    Tokens are kept in an in-memory MSAL cache and reused until they expire.
    """

    def __init__(self, tenant_id: str, client_id: str, client_secret: str):
        self._tenant_id = tenant_id
        self._client_id = client_id
        self._cache = msal.SerializableTokenCache()
        authority = f"https://login.microsoftonline.com/{tenant_id}"
        self._app = msal.ConfidentialClientApplication(
            client_id=client_id,
            authority=authority,
            client_credential=client_secret,
            token_cache=self._cache,
        )

    def get_token(self, *scopes: str, **kwargs: Any) -> AccessToken:
        scopes_list = list(scopes) if scopes else GRAPH_SCOPES
        # acquire_token_for_client looks up the cache before calling the token endpoint
        result = self._app.acquire_token_for_client(scopes=scopes_list)
        if not result or "access_token" not in result:
            error = (result or {}).get("error_description") or (result or {}).get("error") or "token request failed"
            logger.error("auth.token_error", tenant_id=self._tenant_id[:8], error=error)
            raise RuntimeError(f"Client credential token request failed: {error}")
        expires_on = int(time.time()) + int(result.get("expires_in", 0))
        return AccessToken(token=result["access_token"], expires_on=expires_on)


def get_client_secret_credential(tenant_id: str, client_id: str, client_secret: str) -> TokenCredential:
    """Return a TokenCredential for GraphServiceClient using the client secret flow."""
    return MSALClientCredential(tenant_id=tenant_id, client_id=client_id, client_secret=client_secret)
