"""
Token file location.

Resolved from the first of these that is set:

  TOKENVAULT_TOKEN_FILE    the file itself
  TOKENVAULT_CONFIG_DIR    directory holding oauth-tokens.enc
  XDG_CONFIG_HOME          <dir>/tokenvault/oauth-tokens.enc

falling back to ~/.config/tokenvault/oauth-tokens.enc.
"""

import os
from pathlib import Path
from typing import Mapping, Optional

TOKEN_FILE_NAME = "oauth-tokens.enc"


def get_token_file_path(environ: Optional[Mapping[str, str]] = None) -> Path:
    """Return the path to the encrypted OAuth token file."""
    env = os.environ if environ is None else environ

    if env.get("TOKENVAULT_TOKEN_FILE"):
        return Path(env["TOKENVAULT_TOKEN_FILE"])
    if env.get("TOKENVAULT_CONFIG_DIR"):
        return Path(env["TOKENVAULT_CONFIG_DIR"]) / TOKEN_FILE_NAME

    config_home = env.get("XDG_CONFIG_HOME") or os.path.expanduser("~/.config")
    return Path(config_home) / "tokenvault" / TOKEN_FILE_NAME
