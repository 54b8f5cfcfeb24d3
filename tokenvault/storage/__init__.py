"""
tokenvault Storage

Encrypted, write-through token persistence.
"""

from .models import TokenRecord
from .persistence import TokenFile
from .token_store import (
    SaveResult,
    TokenStore,
    create_token_store,
    get_token_store,
    reset_token_store,
)

__all__ = [
    "TokenRecord",
    "TokenFile",
    "TokenStore",
    "SaveResult",
    "create_token_store",
    "get_token_store",
    "reset_token_store",
]
