"""
Version helpers for vecpack.

A static __version__ (PEP 440), overridable with VECPACK_VERSION for dev
builds that want to stamp extra metadata.
"""

from __future__ import annotations

import os

# Bump this when publishing
__version__ = "0.1.0"


def get_version() -> str:
    """Effective version string: VECPACK_VERSION if set, else __version__."""
    return os.environ.get("VECPACK_VERSION") or __version__


__all__ = ["__version__", "get_version"]
