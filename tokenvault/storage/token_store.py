"""
Token Store

Encrypted, write-through persistence for OAuth tokens of multiple
providers. The in-memory map is authoritative; after every successful
mutation the whole map is serialized to JSON, encrypted and written to
the token file.
"""

import json
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Optional

from tokenvault.config import VaultConfig
from tokenvault.core.exceptions import CryptoError, StorageError, TokenVaultError
from tokenvault.crypto.cipher import CipherCodec
from tokenvault.storage.models import TokenRecord
from tokenvault.storage.persistence import TokenFile

logger = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True)
class SaveResult:
    """Outcome of persisting a mutation. Truthy when the write succeeded."""

    ok: bool
    error: Optional[Exception] = None

    def __bool__(self) -> bool:
        return self.ok


class TokenStore:
    """
    Encrypted store of OAuth tokens keyed by provider name.

    Every public operation runs to completion, including its file write,
    before returning. The store assumes it is the only writer of its
    token file: two processes (or unsynchronized threads) mutating the
    same file can lose updates, last write wins. No merge is attempted.

    Loading never raises. A missing file yields an empty store; an
    unreadable, tampered or undecryptable file is logged and also yields
    an empty store. Save failures are logged and returned as a SaveResult,
    the in-memory state keeps the mutation.
    """

    def __init__(
        self,
        token_file: TokenFile,
        codec: CipherCodec,
        clock: Optional[Callable[[], int]] = None,
        expiry_buffer_ms: int = 5 * 60 * 1000,
    ):
        """
        Initialize and load the store.

        Args:
            token_file: File the encrypted tokens are persisted to
            codec: Envelope codec keyed for this machine
            clock: Returns the current Unix time in milliseconds
            expiry_buffer_ms: Lead time before expiry at which tokens count as expired
        """
        self._file = token_file
        self._codec = codec
        self._clock = clock or _now_ms
        self.expiry_buffer_ms = expiry_buffer_ms
        self._tokens: Dict[str, TokenRecord] = {}
        self.load()

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def load(self) -> None:
        """(Re)load tokens from disk, falling back to an empty store."""
        try:
            raw = self._file.read()
            if raw is None:
                self._tokens = {}
                return
            self._tokens = self._deserialize(self._codec.decrypt(raw))
        except (TokenVaultError, ValueError) as e:
            # ValueError covers invalid UTF-8, invalid JSON and malformed records
            logger.warning(f"Could not load OAuth tokens from {self._file.path}: {e}")
            self._tokens = {}
            return

        if self._tokens:
            logger.info(f"Loaded OAuth tokens for: {', '.join(self._tokens)}")

    def _deserialize(self, plaintext: bytes) -> Dict[str, TokenRecord]:
        data = json.loads(plaintext.decode("utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"Token data must be a JSON object, got {type(data).__name__}")
        return {provider: TokenRecord.from_dict(record) for provider, record in data.items()}

    def _serialize(self) -> str:
        return json.dumps(
            {provider: record.to_dict() for provider, record in self._tokens.items()},
            indent=2,
        )

    def _save(self) -> SaveResult:
        try:
            envelope = self._codec.encrypt(self._serialize())
            self._file.write(envelope.encode("ascii"))
        except (StorageError, CryptoError) as e:
            logger.error(f"Could not save OAuth tokens: {e}")
            return SaveResult(ok=False, error=e)
        return SaveResult(ok=True)

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def set(self, provider: str, record: TokenRecord) -> SaveResult:
        """Store tokens for a provider, replacing any existing record."""
        _check_provider(provider)
        if not isinstance(record, TokenRecord):
            raise TypeError(f"Expected TokenRecord, got {type(record).__name__}")
        # Must load back from disk, or the next load() would discard every provider
        record = TokenRecord.from_dict(record.to_dict())

        self._tokens[provider] = record
        result = self._save()
        if result:
            logger.info(f"Stored OAuth tokens for: {provider}")
        return result

    def get(self, provider: str) -> Optional[TokenRecord]:
        """Get tokens for a provider (or None if not stored)."""
        return self._lookup(provider)

    def has(self, provider: str) -> bool:
        """Check if tokens exist for a provider."""
        return self._lookup(provider) is not None

    def is_expired(self, provider: str) -> bool:
        """Check if the access token is expired, counting the safety buffer."""
        record = self._lookup(provider)
        if record is None:
            return True
        return self._clock() >= record.expires_at - self.expiry_buffer_ms

    def expires_in(self, provider: str) -> Optional[int]:
        """Milliseconds until the token actually expires (0 if past), or None."""
        record = self._lookup(provider)
        if record is None:
            return None
        return max(0, record.expires_at - self._clock())

    def remove(self, provider: str) -> SaveResult:
        """Remove tokens for a provider. Removing an unknown provider is a no-op."""
        if self._lookup(provider) is None:
            return SaveResult(ok=True)

        del self._tokens[provider]
        result = self._save()
        if result:
            logger.info(f"Removed OAuth tokens for: {provider}")
        return result

    def providers(self) -> List[str]:
        """List all connected providers."""
        return list(self._tokens)

    @property
    def path(self) -> Path:
        return self._file.path

    def __len__(self) -> int:
        return len(self._tokens)

    def __contains__(self, provider: object) -> bool:
        return self._lookup(provider) is not None

    def _lookup(self, provider: object) -> Optional[TokenRecord]:
        # Provider ids are strings; anything else is simply not stored
        if not isinstance(provider, str):
            return None
        return self._tokens.get(provider)


def _check_provider(provider: str) -> None:
    if not isinstance(provider, str) or not provider:
        raise ValueError("Provider must be a non-empty string")


# =============================================================================
# Factory Functions
# =============================================================================


_token_store: Optional[TokenStore] = None


def create_token_store(config: Optional[VaultConfig] = None) -> TokenStore:
    """Create a token store from configuration."""
    config = config or VaultConfig.from_env()
    return TokenStore(
        TokenFile(config.token_file),
        CipherCodec.for_machine(kdf_config=config.kdf, config=config.cipher),
        expiry_buffer_ms=config.expiry_buffer_ms,
    )


def get_token_store() -> TokenStore:
    """Get the process-wide token store, creating it on first use."""
    global _token_store
    if _token_store is None:
        _token_store = create_token_store()
    return _token_store


def reset_token_store() -> None:
    """Drop the process-wide token store."""
    global _token_store
    _token_store = None
