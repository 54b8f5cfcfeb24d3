"""
Provider Authentication

The abstraction HTTP clients for external services call to obtain a
valid access token. Clients never touch the token store directly.

StoredTokenAuthProvider keeps a provider's tokens in a TokenStore and
refreshes them through an injected token-exchange callable when they
reach the expiry safety buffer. The network side of the exchange
lives outside this package.
"""

import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Callable, List, Mapping, Optional

from tokenvault.core.exceptions import (
    NotConnectedError,
    ReauthorizationRequired,
    TokenRefreshError,
)
from tokenvault.storage.models import TokenRecord
from tokenvault.storage.token_store import TokenStore

logger = logging.getLogger(__name__)

# refresh_token -> token endpoint JSON response
Refresher = Callable[[str], Mapping[str, Any]]
# access_token -> None
Revoker = Callable[[str], None]


class AuthProvider(ABC):
    """Source of access tokens for one external provider."""

    name: str

    @abstractmethod
    def get_access_token(self) -> str:
        """Return a valid access token, refreshing it if needed."""

    @abstractmethod
    def is_connected(self) -> bool:
        """Check whether credentials are stored for this provider."""


class StoredTokenAuthProvider(AuthProvider):
    """
    AuthProvider backed by a TokenStore.

    Args:
        name: Provider id the tokens are stored under
        store: Token store to read and persist tokens
        refresher: Exchanges a refresh token for a new token response
        revoker: Optionally revokes an access token at the provider
        clock: Returns the current Unix time in milliseconds
    """

    def __init__(
        self,
        name: str,
        store: TokenStore,
        refresher: Refresher,
        revoker: Optional[Revoker] = None,
        clock: Optional[Callable[[], int]] = None,
    ):
        self.name = name
        self.store = store
        self._refresher = refresher
        self._revoker = revoker
        self._clock = clock or (lambda: int(time.time() * 1000))

    def is_connected(self) -> bool:
        return self.store.has(self.name)

    def get_access_token(self) -> str:
        """
        Get a valid access token, refreshing if needed.

        Raises:
            NotConnectedError: No tokens stored for the provider
            ReauthorizationRequired: Token expired and cannot be refreshed
            TokenRefreshError: The refresh exchange failed
        """
        record = self.store.get(self.name)
        if record is None:
            raise NotConnectedError(self.name)

        if self.store.is_expired(self.name):
            return self.refresh().access_token

        return record.access_token

    def refresh(self) -> TokenRecord:
        """Refresh the access token using the stored refresh token."""
        current = self.store.get(self.name)
        if current is None:
            raise NotConnectedError(self.name)
        if not current.refresh_token:
            raise ReauthorizationRequired(self.name)

        logger.info(f"Refreshing {self.name} access token...")
        try:
            response = self._refresher(current.refresh_token)
            updated = TokenRecord.from_token_response(response, self._clock(), previous=current)
        except Exception as e:
            logger.error(f"{self.name} token refresh failed: {e}")
            raise TokenRefreshError(self.name, original_error=e) from e

        result = self.store.set(self.name, updated)
        if not result:
            logger.warning(f"{self.name} token refreshed but not persisted; using it for this run")
        logger.info(f"{self.name} access token refreshed")
        return updated

    def store_token_response(self, response: Mapping[str, Any]) -> TokenRecord:
        """Persist tokens from an authorization code exchange."""
        record = TokenRecord.from_token_response(response, self._clock())
        self.store.set(self.name, record)
        return record

    def scopes(self) -> List[str]:
        """Get the connected scopes."""
        record = self.store.get(self.name)
        return record.scopes if record else []

    def disconnect(self) -> None:
        """Revoke access (best effort) and remove stored tokens."""
        record = self.store.get(self.name)
        if record is not None and self._revoker is not None:
            try:
                self._revoker(record.access_token)
            except Exception as e:
                logger.warning(f"Could not revoke {self.name} token, removing locally anyway: {e}")

        self.store.remove(self.name)
        logger.info(f"{self.name} disconnected")
