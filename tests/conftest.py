"""
Pytest Configuration and Shared Fixtures

Centralized fixtures for testing tokenvault components. Every store is
built against an isolated temporary path with a fixed key, so tests never
touch the real token file or pay the full scrypt cost.
"""

import os
import tempfile
from pathlib import Path
from typing import Generator

import pytest

from tokenvault.crypto.cipher import CipherCodec
from tokenvault.crypto.keys import KeyDerivationConfig
from tokenvault.storage.models import TokenRecord
from tokenvault.storage.persistence import TokenFile
from tokenvault.storage.token_store import TokenStore, reset_token_store

TEST_KEY = bytes(range(32))
NOW_MS = 1_700_000_000_000


# =============================================================================
# Environment Setup
# =============================================================================


@pytest.fixture(autouse=True)
def clean_environment():
    """Ensure clean environment for each test."""
    original_env = os.environ.copy()

    yield

    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture(autouse=True)
def reset_singletons():
    """Reset the process-wide token store between tests."""
    yield
    reset_token_store()


# =============================================================================
# Temporary Directory Fixtures
# =============================================================================


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory that's cleaned up after the test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def token_path(temp_dir: Path) -> Path:
    """Provide a token file path inside a not-yet-created directory."""
    return temp_dir / "data" / "oauth-tokens.enc"


# =============================================================================
# Crypto Fixtures
# =============================================================================


@pytest.fixture
def fast_kdf() -> KeyDerivationConfig:
    """scrypt parameters cheap enough for unit tests."""
    return KeyDerivationConfig(n=2**4)


@pytest.fixture
def codec() -> CipherCodec:
    """Codec with a fixed, known key."""
    return CipherCodec(TEST_KEY)


# =============================================================================
# Store Fixtures
# =============================================================================


class FakeClock:
    """Settable millisecond clock."""

    def __init__(self, now_ms: int = NOW_MS):
        self.now_ms = now_ms

    def __call__(self) -> int:
        return self.now_ms

    def advance(self, ms: int) -> None:
        self.now_ms += ms


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def token_file(token_path: Path) -> TokenFile:
    return TokenFile(token_path)


@pytest.fixture
def store(token_file: TokenFile, codec: CipherCodec, clock: FakeClock) -> TokenStore:
    """Empty token store on an isolated path."""
    return TokenStore(token_file, codec, clock=clock)


@pytest.fixture
def make_record(clock: FakeClock):
    """Factory for token records expiring relative to the test clock."""

    def _make(
        access_token: str = "ya29.access",
        refresh_token: str = "1//refresh",
        expires_in_ms: int = 3600 * 1000,
        token_type: str = "Bearer",
        scope: str = "https://www.googleapis.com/auth/gmail.modify",
    ) -> TokenRecord:
        return TokenRecord(
            access_token=access_token,
            refresh_token=refresh_token,
            expires_at=clock() + expires_in_ms,
            token_type=token_type,
            scope=scope,
        )

    return _make
