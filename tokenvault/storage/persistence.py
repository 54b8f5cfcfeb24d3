"""
Token File Persistence

Raw read/write of the single encrypted token file. Writes go to a
temporary file in the same directory and are renamed over the target,
so a crash mid-write leaves either the old file or the new one.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Optional, Union

from tokenvault.core.exceptions import StorageError

logger = logging.getLogger(__name__)


class TokenFile:
    """The well-known file holding the encrypted token envelope."""

    def __init__(self, path: Union[str, Path]):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        return self._path.is_file()

    def read(self) -> Optional[bytes]:
        """Return the file contents, or None if the file does not exist."""
        try:
            return self._path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StorageError(
                f"Could not read token file {self._path}: {e}", path=self._path, original_error=e
            ) from e

    def write(self, data: bytes) -> None:
        """Replace the file contents, creating the parent directory if needed."""
        tmp_name = None
        try:
            self._path.parent.mkdir(mode=0o700, parents=True, exist_ok=True)

            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self._path.name}.", suffix=".tmp", dir=str(self._path.parent)
            )
            with os.fdopen(fd, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())

            try:
                os.chmod(tmp_name, 0o600)
            except OSError as e:  # depends on platform
                logger.warning(f"Could not set permissions on {self._path}: {e}")

            os.replace(tmp_name, self._path)
            tmp_name = None
        except OSError as e:
            raise StorageError(
                f"Could not write token file {self._path}: {e}", path=self._path, original_error=e
            ) from e
        finally:
            if tmp_name is not None:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    pass

    def delete(self) -> bool:
        """Remove the file. Returns False if there was nothing to remove."""
        try:
            self._path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            raise StorageError(
                f"Could not delete token file {self._path}: {e}", path=self._path, original_error=e
            ) from e
        logger.info(f"Deleted token file {self._path}")
        return True
