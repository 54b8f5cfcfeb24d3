"""
tokenvault

Encrypted persistence for OAuth tokens of multiple providers:
- Machine-bound key derivation (scrypt)
- Authenticated envelope encryption (AES-256-GCM)
- Write-through token store with expiry-aware access
"""

from .auth import AuthProvider, StoredTokenAuthProvider
from .config import VaultConfig
from .core.exceptions import (
    AuthenticationFailure,
    AuthError,
    DecodeError,
    StorageError,
    TokenVaultError,
)
from .crypto import CipherCodec
from .storage import (
    SaveResult,
    TokenFile,
    TokenRecord,
    TokenStore,
    create_token_store,
    get_token_store,
    reset_token_store,
)

__version__ = "0.1.0"

__all__ = [
    "TokenStore",
    "TokenRecord",
    "TokenFile",
    "SaveResult",
    "CipherCodec",
    "VaultConfig",
    "AuthProvider",
    "StoredTokenAuthProvider",
    "create_token_store",
    "get_token_store",
    "reset_token_store",
    "TokenVaultError",
    "DecodeError",
    "AuthenticationFailure",
    "StorageError",
    "AuthError",
]
