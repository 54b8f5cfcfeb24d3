"""
tokenvault Utilities
"""

from .paths import get_token_file_path

__all__ = ["get_token_file_path"]
