"""
tokenvault Crypto

Machine-bound key derivation and AES-GCM envelope encryption.
"""

from .cipher import CipherCodec, CipherConfig
from .keys import KeyDerivationConfig, derive_key, machine_identity

__all__ = [
    "CipherCodec",
    "CipherConfig",
    "KeyDerivationConfig",
    "derive_key",
    "machine_identity",
]
