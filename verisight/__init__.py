# verisight/__init__.py
"""
verisight
=========

Deepfake-likelihood assessment for images and video, delegated to a remote
multimodal model, with rich console reporting and a bounded local history of
the last ten results.
"""
from __future__ import annotations

from importlib.metadata import version as _pkg_version

__all__ = ["__version__"]

try:
    # Read version dynamically from installed package metadata
    __version__: str = _pkg_version("verisight")
except Exception:  # pragma: no cover - fallback for development environments
    __version__ = "0.0.0-dev"
