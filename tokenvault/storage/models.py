"""
Token Models

The immutable OAuth token record stored per provider.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

# Keys of a serialized record, in on-disk order
RECORD_FIELDS = ("access_token", "refresh_token", "expires_at", "token_type", "scope")

DEFAULT_EXPIRES_IN = 3600  # seconds, when a token response omits expires_in


@dataclass(frozen=True)
class TokenRecord:
    """OAuth tokens for one provider."""

    access_token: str = field(repr=False)
    refresh_token: str = field(repr=False)
    expires_at: int  # Unix timestamp (ms), always absolute
    token_type: str = "Bearer"
    scope: str = ""

    def __post_init__(self) -> None:
        for name in ("access_token", "refresh_token", "token_type", "scope"):
            if not isinstance(getattr(self, name), str):
                raise ValueError(f"Token record field '{name}' must be a string")

        expires_at = self.expires_at
        if isinstance(expires_at, bool) or not isinstance(expires_at, (int, float)):
            raise ValueError("Token record field 'expires_at' must be a number")
        if isinstance(expires_at, float):
            if not expires_at.is_integer():
                raise ValueError("Token record field 'expires_at' must be an integer")
            # Stored as int so the JSON written to disk loads back unchanged
            object.__setattr__(self, "expires_at", int(expires_at))

    @property
    def scopes(self) -> List[str]:
        """Granted scopes as a list."""
        return self.scope.split()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary (for serialization)."""
        return {
            "access_token": self.access_token,
            "refresh_token": self.refresh_token,
            "expires_at": self.expires_at,
            "token_type": self.token_type,
            "scope": self.scope,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TokenRecord":
        """
        Create from a serialized record.

        Raises:
            ValueError: If a field is missing or has the wrong type
        """
        if not isinstance(data, Mapping):
            raise ValueError(f"Token record must be an object, got {type(data).__name__}")

        missing = [name for name in RECORD_FIELDS if name not in data]
        if missing:
            raise ValueError(f"Token record missing fields: {', '.join(missing)}")

        return cls(
            access_token=data["access_token"],
            refresh_token=data["refresh_token"],
            expires_at=data["expires_at"],
            token_type=data["token_type"],
            scope=data["scope"],
        )

    @classmethod
    def from_token_response(
        cls,
        response: Mapping[str, Any],
        now_ms: int,
        previous: Optional["TokenRecord"] = None,
    ) -> "TokenRecord":
        """
        Create from an OAuth token endpoint response.

        The relative ``expires_in`` (seconds) is converted to an absolute
        ``expires_at``. Refresh responses usually omit the refresh token
        and may omit the scope; those are carried over from ``previous``.
        """
        if not response.get("access_token"):
            raise ValueError("Token response has no access_token")

        expires_in = response.get("expires_in")
        if expires_in is None:
            expires_in = DEFAULT_EXPIRES_IN

        refresh_token = response.get("refresh_token") or (
            previous.refresh_token if previous else ""
        )
        scope = response.get("scope")
        if scope is None:
            scope = previous.scope if previous else ""

        return cls(
            access_token=response["access_token"],
            refresh_token=refresh_token,
            expires_at=int(now_ms + float(expires_in) * 1000),
            token_type=response.get("token_type") or "Bearer",
            scope=scope,
        )
