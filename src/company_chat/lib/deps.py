"""Application dependency providers generators.

This module contains functions to create dependency providers for services and filters.
"""

from __future__ import annotations

from advanced_alchemy.extensions.litestar.providers import (
    create_filter_dependencies,
    create_service_dependencies,
    create_service_provider,
)

__all__ = (
    "create_filter_dependencies",
    "create_service_dependencies",
    "create_service_provider",
)
