# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/riakjson-python/LICENSE
# ==============================================================================

"""Utility helpers for riakjson."""

from __future__ import annotations

from .logger import get_logger, setup_logger


__all__ = [
    "get_logger",
    "setup_logger",
]
