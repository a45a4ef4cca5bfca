# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Provide the persistent prelude cache used by the snippet runner."""

from __future__ import annotations

from .store import CacheHandle, config_root, default_cache_root, ensure_cache

__all__ = [
    "CacheHandle",
    "config_root",
    "default_cache_root",
    "ensure_cache",
]
