"""
tokenvault Configuration

Dataclass configuration for the token store, resolved from environment
variables the same way as the token file path.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from tokenvault.crypto.cipher import CipherConfig
from tokenvault.crypto.keys import KeyDerivationConfig
from tokenvault.utils.paths import get_token_file_path

logger = logging.getLogger(__name__)

DEFAULT_EXPIRY_BUFFER_MS = 5 * 60 * 1000  # refresh 5 minutes before expiry


@dataclass
class VaultConfig:
    """Token store configuration."""

    token_file: Path = field(default_factory=get_token_file_path)
    expiry_buffer_ms: int = DEFAULT_EXPIRY_BUFFER_MS
    kdf: KeyDerivationConfig = field(default_factory=KeyDerivationConfig)
    cipher: CipherConfig = field(default_factory=CipherConfig)

    @classmethod
    def from_env(cls) -> "VaultConfig":
        """
        Build configuration from environment variables.

        Reads TOKENVAULT_TOKEN_FILE / TOKENVAULT_CONFIG_DIR / XDG_CONFIG_HOME
        for the file location and TOKENVAULT_EXPIRY_BUFFER_SECONDS for the
        expiry safety buffer.
        """
        config = cls(token_file=get_token_file_path())

        buffer_env = os.environ.get("TOKENVAULT_EXPIRY_BUFFER_SECONDS")
        if buffer_env:
            try:
                seconds = int(buffer_env)
                if seconds < 0:
                    raise ValueError("must not be negative")
                config.expiry_buffer_ms = seconds * 1000
            except ValueError as e:
                logger.warning(
                    f"Ignoring invalid TOKENVAULT_EXPIRY_BUFFER_SECONDS={buffer_env!r}: {e}"
                )

        return config
