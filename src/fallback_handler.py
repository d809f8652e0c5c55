"""Fallback handling utilities.

This module picks the deal record to show when the CRM cannot provide a
complete one, and logs every trigger so operators can see how often the page
runs on defaults.
"""
from enum import Enum
from typing import Any, Dict, Optional

import logging

from src.integrations.contracts.deals import (
    CONTACT_PROPERTY,
    FETCH_FAILURE_FALLBACK,
    HARD_FALLBACK,
    NO_IDENTIFIER_BASELINE,
    PARTIAL_FIELD_FALLBACK,
    PRICE_PROPERTY,
    DealRecord,
)

logger = logging.getLogger(__name__)


class FallbackReason(str, Enum):
    NOT_CONFIGURED = "not_configured"
    UPSTREAM_ERROR = "upstream_error"
    NOT_FOUND = "not_found"
    UNEXPECTED_ERROR = "unexpected_error"
    TIMEOUT = "timeout"
    FETCH_FAILED = "fetch_failed"
    NO_IDENTIFIER = "no_identifier"


_RECORDS = {
    FallbackReason.NOT_CONFIGURED: HARD_FALLBACK,
    FallbackReason.UPSTREAM_ERROR: HARD_FALLBACK,
    FallbackReason.NOT_FOUND: HARD_FALLBACK,
    FallbackReason.UNEXPECTED_ERROR: HARD_FALLBACK,
    FallbackReason.TIMEOUT: HARD_FALLBACK,
    FallbackReason.FETCH_FAILED: FETCH_FAILURE_FALLBACK,
    FallbackReason.NO_IDENTIFIER: NO_IDENTIFIER_BASELINE,
}

_WARNING_REASONS = {FallbackReason.UPSTREAM_ERROR, FallbackReason.UNEXPECTED_ERROR}


class FallbackHandler:
    """Resolves fallback deal records and logs triggers for telemetry.

    Two kinds of fallback exist:
    - whole-record fallbacks, chosen by failure reason (see FallbackReason)
    - per-field fallbacks, applied when a matched deal has empty properties
    """

    def generate_fallback(
        self,
        reason: FallbackReason,
        key: Optional[str] = None,
        detail: Optional[str] = None,
    ) -> DealRecord:
        level = logging.WARNING if reason in _WARNING_REASONS else logging.INFO
        logger.log(level, "Using fallback deal record: reason=%s, key=%s, detail=%s", reason.value, key, detail)
        return _RECORDS[reason]

    @staticmethod
    def fill_missing(properties: Optional[Dict[str, Any]]) -> DealRecord:
        """Build a record from CRM properties, defaulting each empty field on its own."""
        properties = properties or {}
        price = properties.get(PRICE_PROPERTY)
        contact = properties.get(CONTACT_PROPERTY)
        return DealRecord(
            price_final=str(price) if _present(price) else PARTIAL_FIELD_FALLBACK.price_final,
            advisor_contact_handle=str(contact) if _present(contact) else PARTIAL_FIELD_FALLBACK.advisor_contact_handle,
        )


def _present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str) and not value.strip():
        return False
    return True
