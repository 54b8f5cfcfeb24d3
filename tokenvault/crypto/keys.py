"""
Key Derivation

Derives the token-file encryption key from the local machine identity
(hostname + user) and a fixed salt using scrypt. No separately managed
secret is needed: the same machine and user always derive the same key,
and a file copied to another machine or account will not decrypt.

This protects tokens against casual inspection of the file, not against
a local attacker who can read the same environment values.
"""

import getpass
import logging
import os
import platform
from dataclasses import dataclass
from typing import Optional

from cryptography.hazmat.primitives.kdf.scrypt import Scrypt

logger = logging.getLogger(__name__)

DEFAULT_SALT = b"tokenvault-v1-oauth-salt"

# Placeholders used when the host or user cannot be determined
DEFAULT_HOST = "agent"
DEFAULT_USER = "user"


@dataclass
class KeyDerivationConfig:
    """scrypt parameters for the machine key."""

    salt: bytes = DEFAULT_SALT
    length: int = 32  # 256 bits
    n: int = 2**14  # CPU/memory cost
    r: int = 8
    p: int = 1


def _host_name() -> str:
    for var in ("COMPUTERNAME", "HOSTNAME"):
        value = os.environ.get(var)
        if value:
            return value
    return platform.node() or DEFAULT_HOST


def _user_name() -> str:
    for var in ("USERNAME", "USER"):
        value = os.environ.get(var)
        if value:
            return value
    try:
        return getpass.getuser() or DEFAULT_USER
    except (KeyError, OSError):
        # No passwd entry and no login env vars (e.g. some containers)
        return DEFAULT_USER


def machine_identity() -> str:
    """
    Return the identity string the key is derived from.

    Format is ``"<host>-<user>"``. Missing values fall back to the
    ``agent``/``user`` placeholders, so this never raises.
    """
    return f"{_host_name()}-{_user_name()}"


def derive_key(
    identity: Optional[str] = None,
    config: Optional[KeyDerivationConfig] = None,
) -> bytes:
    """
    Derive a symmetric key from an identity string using scrypt.

    Args:
        identity: Identity to derive from (defaults to machine_identity())
        config: scrypt parameters and salt

    Returns:
        Key bytes of ``config.length``
    """
    config = config or KeyDerivationConfig()
    if identity is None:
        identity = machine_identity()

    kdf = Scrypt(salt=config.salt, length=config.length, n=config.n, r=config.r, p=config.p)
    key = kdf.derive(identity.encode("utf-8"))
    logger.debug("Derived token encryption key from machine identity")
    return key
