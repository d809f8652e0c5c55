"""
Integrations layer.
This package contains all code used to communicate with external systems:
- HubSpot CRM deals (committee price and advisor WhatsApp link)

Key rule:
- The API and the landing loader MUST NOT call HubSpot directly.
- They go through a DealsClient (under src/integrations/clients).
- We use the MOCK client during development and the REAL_HTTP client when a
  HubSpot access token is available.

Switching implementations:
- The selection of mock vs real clients happens in ONE place (src/api/main.py).
"""

from .contracts.deals import (
    DEFAULT_ADVISOR_CONTACT,
    FETCH_FAILURE_FALLBACK,
    HARD_FALLBACK,
    NO_IDENTIFIER_BASELINE,
    PARTIAL_FIELD_FALLBACK,
    DealRecord,
    DealsClient,
    LookupMode,
)

__all__ = [
    "DEFAULT_ADVISOR_CONTACT",
    "FETCH_FAILURE_FALLBACK",
    "HARD_FALLBACK",
    "NO_IDENTIFIER_BASELINE",
    "PARTIAL_FIELD_FALLBACK",
    "DealRecord",
    "DealsClient",
    "LookupMode",
]
