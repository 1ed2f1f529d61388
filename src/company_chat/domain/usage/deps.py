"""Dependency providers for usage domain."""

from __future__ import annotations

from company_chat.domain.usage.services import UsageService
from company_chat.lib.deps import create_service_provider

__all__ = ("provide_usage_service",)

provide_usage_service = create_service_provider(
    UsageService,
    error_messages={
        "duplicate_key": "Usage record for this day, user and counter already exists.",
        "integrity": "Usage operation failed.",
    },
)
