"""
Cipher Codec

Authenticated encryption of token payloads with AES-GCM. Each payload is
encoded as a single text envelope of three hex segments:

    <nonce>:<tag>:<ciphertext>

A fresh random nonce is generated for every encryption.
"""

import binascii
import logging
import secrets
from dataclasses import dataclass
from typing import Optional, Union

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from tokenvault.core.exceptions import AuthenticationFailure, DecodeError
from tokenvault.crypto.keys import KeyDerivationConfig, derive_key

logger = logging.getLogger(__name__)

SEPARATOR = ":"


@dataclass
class CipherConfig:
    """Envelope encryption configuration."""

    algorithm: str = "AES-256-GCM"
    nonce_length: int = 12  # 96 bits for GCM
    tag_length: int = 16


class CipherCodec:
    """
    Encrypts and decrypts byte payloads into hex envelopes.

    Uses AES-GCM from the 'cryptography' library. Decryption fails closed:
    a malformed envelope raises DecodeError and a failed tag check raises
    AuthenticationFailure; no partial plaintext is ever returned.
    """

    def __init__(self, key: bytes, config: Optional[CipherConfig] = None):
        if len(key) not in (16, 24, 32):
            raise ValueError(f"AES key must be 16, 24 or 32 bytes, got {len(key)}")
        self.config = config or CipherConfig()
        self._aesgcm = AESGCM(key)

    @classmethod
    def for_machine(
        cls,
        kdf_config: Optional[KeyDerivationConfig] = None,
        config: Optional[CipherConfig] = None,
    ) -> "CipherCodec":
        """Create a codec keyed from the local machine identity."""
        return cls(derive_key(config=kdf_config), config)

    def encrypt(self, plaintext: Union[str, bytes]) -> str:
        """
        Encrypt a payload.

        Args:
            plaintext: Data to encrypt (str is encoded as UTF-8)

        Returns:
            Envelope string "<nonce>:<tag>:<ciphertext>" in hex
        """
        if isinstance(plaintext, str):
            plaintext = plaintext.encode("utf-8")

        nonce = secrets.token_bytes(self.config.nonce_length)
        ciphertext_with_tag = self._aesgcm.encrypt(nonce, plaintext, None)

        # AESGCM appends the tag to the ciphertext
        ciphertext = ciphertext_with_tag[: -self.config.tag_length]
        tag = ciphertext_with_tag[-self.config.tag_length :]

        return SEPARATOR.join((nonce.hex(), tag.hex(), ciphertext.hex()))

    def decrypt(self, envelope: Union[str, bytes]) -> bytes:
        """
        Decrypt an envelope produced by encrypt().

        Raises:
            DecodeError: Wrong segment count or invalid hex
            AuthenticationFailure: Tag verification failed
        """
        if isinstance(envelope, bytes):
            try:
                envelope = envelope.decode("ascii")
            except UnicodeDecodeError as e:
                raise DecodeError("Token envelope is not ASCII text") from e

        parts = envelope.strip().split(SEPARATOR)
        if len(parts) != 3:
            raise DecodeError(
                f"Expected 3 envelope segments, got {len(parts)}", segments=len(parts)
            )

        try:
            nonce, tag, ciphertext = (binascii.unhexlify(part) for part in parts)
        except (binascii.Error, ValueError) as e:
            raise DecodeError("Token envelope segment is not valid hex", segments=3) from e

        if not nonce:
            raise DecodeError("Token envelope has an empty nonce", segments=3)
        if len(tag) != self.config.tag_length:
            raise AuthenticationFailure(
                f"Authentication tag must be {self.config.tag_length} bytes, got {len(tag)}"
            )

        try:
            return self._aesgcm.decrypt(nonce, ciphertext + tag, None)
        except InvalidTag as e:
            raise AuthenticationFailure() from e
        except ValueError as e:
            # Nonce length outside what AES-GCM accepts
            raise DecodeError(f"Invalid token envelope: {e}", segments=3) from e
