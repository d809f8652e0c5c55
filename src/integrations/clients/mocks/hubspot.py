"""
HubSpot Deals: MOCK client.

⚠️  This is a mock implementation for development and testing.
    It never calls HubSpot. Deals are served from an in-memory table keyed by
    both the external deal_uuid and the internal HubSpot id, and go through
    the same fallback rules as the real client.
"""

import logging
from typing import Any, Dict, List, Optional

from src.fallback_handler import FallbackHandler, FallbackReason
from src.integrations.contracts.deals import (
    CONTACT_PROPERTY,
    DEAL_UUID_PROPERTY,
    PRICE_PROPERTY,
    DealRecord,
    DealsClient,
    LookupMode,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Seed data
# ---------------------------------------------------------------------------

_MOCK_DEALS: List[Dict[str, Any]] = [
    {
        "id": "1001",
        "properties": {
            DEAL_UUID_PROPERTY: "7f3c2a1e-medellin-demo",
            PRICE_PROPERTY: "235000000",
            CONTACT_PROPERTY: "https://api.whatsapp.com/send?phone=3001234567",
        },
    },
    {
        "id": "1002",
        "properties": {
            DEAL_UUID_PROPERTY: "c41d9b20-no-advisor",
            PRICE_PROPERTY: "189500000",
            CONTACT_PROPERTY: "",
        },
    },
    {
        "id": "1003",
        "properties": {
            DEAL_UUID_PROPERTY: "0a9e77f4-no-price",
            CONTACT_PROPERTY: "+57 300 765 4321",
        },
    },
]


class MockHubSpotDealsClient(DealsClient):
    def __init__(
        self,
        deals: Optional[List[Dict[str, Any]]] = None,
        fallback_handler: Optional[FallbackHandler] = None,
    ) -> None:
        self.deals = list(_MOCK_DEALS if deals is None else deals)
        self.fallbacks = fallback_handler or FallbackHandler()
        self.calls: List[Dict[str, str]] = []

    async def lookup(self, key: str, mode: LookupMode) -> DealRecord:
        self.calls.append({"key": key, "mode": mode.value})
        logger.info("[MOCK] Looking up deal %s (%s)", key, mode.value)

        match = self._find(key, mode)
        if match is None:
            return self.fallbacks.generate_fallback(FallbackReason.NOT_FOUND, key=key)
        return self.fallbacks.fill_missing(match.get("properties"))

    def _find(self, key: str, mode: LookupMode) -> Optional[Dict[str, Any]]:
        for deal in self.deals:
            if mode is LookupMode.BY_INTERNAL_ID and str(deal.get("id")) == key:
                return deal
            if mode is LookupMode.BY_EXTERNAL_ID and (deal.get("properties") or {}).get(DEAL_UUID_PROPERTY) == key:
                return deal
        return None
