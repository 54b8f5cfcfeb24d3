"""
tokenvault Core

Exception taxonomy shared by the crypto, storage and auth layers.
"""

from .exceptions import (
    AuthenticationFailure,
    AuthError,
    CryptoError,
    DecodeError,
    NotConnectedError,
    ReauthorizationRequired,
    StorageError,
    TokenRefreshError,
    TokenVaultError,
)

__all__ = [
    "TokenVaultError",
    "CryptoError",
    "DecodeError",
    "AuthenticationFailure",
    "StorageError",
    "AuthError",
    "NotConnectedError",
    "ReauthorizationRequired",
    "TokenRefreshError",
]
