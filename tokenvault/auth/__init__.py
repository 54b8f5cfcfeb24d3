"""Provider authentication on top of the token store."""

from .provider import AuthProvider, StoredTokenAuthProvider

__all__ = ["AuthProvider", "StoredTokenAuthProvider"]
