"""
tokenvault Exceptions

Custom exceptions for credential encryption, persistence and provider auth.
"""

from pathlib import Path
from typing import Optional


class TokenVaultError(Exception):
    """Base exception for tokenvault operations."""

    pass


# =============================================================================
# Crypto Exceptions
# =============================================================================


class CryptoError(TokenVaultError):
    """Base exception for envelope encryption and decryption."""

    pass


class DecodeError(CryptoError):
    """
    Malformed envelope.

    Raised when an envelope does not split into exactly three hex
    segments (nonce, tag, ciphertext) or a segment is not valid hex.
    """

    def __init__(self, message: str = "Malformed token envelope", segments: Optional[int] = None):
        self.segments = segments
        super().__init__(message)


class AuthenticationFailure(CryptoError):
    """
    Authentication tag verification failed.

    Causes: corruption, tampering, or a key derived from a different
    machine/user identity. No plaintext is ever returned in this case.
    """

    def __init__(self, message: str = "Token envelope failed authentication"):
        super().__init__(message)


# =============================================================================
# Storage Exceptions
# =============================================================================


class StorageError(TokenVaultError):
    """Filesystem read or write failure on the token file."""

    def __init__(
        self,
        message: str,
        path: Optional[Path] = None,
        original_error: Optional[Exception] = None,
    ):
        self.path = path
        self.original_error = original_error
        super().__init__(message)


# =============================================================================
# Auth Exceptions
# =============================================================================


class AuthError(TokenVaultError):
    """Provider authentication error."""

    def __init__(
        self,
        message: str,
        provider: Optional[str] = None,
        is_recoverable: bool = True,
    ):
        super().__init__(message)
        self.provider = provider
        self.is_recoverable = is_recoverable


class NotConnectedError(AuthError):
    """No credentials are stored for the provider."""

    def __init__(self, provider: str):
        super().__init__(
            f"{provider} not connected. Authorize the provider first.",
            provider=provider,
            is_recoverable=False,
        )


class ReauthorizationRequired(AuthError):
    """Stored credentials cannot be refreshed; the user must authorize again."""

    def __init__(self, provider: str, reason: str = "no refresh token available"):
        self.reason = reason
        super().__init__(
            f"{provider} requires re-authorization: {reason}",
            provider=provider,
            is_recoverable=False,
        )


class TokenRefreshError(AuthError):
    """The token exchange for a refresh failed."""

    def __init__(
        self,
        provider: str,
        original_error: Optional[Exception] = None,
    ):
        self.original_error = original_error
        detail = f": {original_error}" if original_error else ""
        super().__init__(f"{provider} token refresh failed{detail}", provider=provider)
