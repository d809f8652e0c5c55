"""
Deal contracts.

Defines the single record the landing page needs from the CRM (committee price
and advisor contact handle), the two lookup modes, and the named fallback
records substituted at each layer when the CRM cannot supply real data.

Both clients/mocks/hubspot.py and clients/real_http/hubspot.py return
DealRecord instances, so the endpoint and the page never see raw CRM payloads.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Dict

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# CRM property names
# ---------------------------------------------------------------------------

PRICE_PROPERTY = "precio_comite_final_final_final__el_unico__"
CONTACT_PROPERTY = "whatsapp_asesor"
DEAL_UUID_PROPERTY = "deal_uuid"

DEFAULT_ADVISOR_CONTACT = "https://api.whatsapp.com/send?phone=3009128399"


class LookupMode(str, Enum):
    BY_EXTERNAL_ID = "by_external_id"
    BY_INTERNAL_ID = "by_internal_id"

    @property
    def query_param(self) -> str:
        """Name of the query parameter carrying the key for this mode."""
        return "dealUuid" if self is LookupMode.BY_EXTERNAL_ID else "internalId"

    @property
    def missing_key_error(self) -> str:
        return "deal_uuid is required" if self is LookupMode.BY_EXTERNAL_ID else "NID is required"


class DealRecord(BaseModel):
    """Price and advisor contact shown on the landing page."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    price_final: str = Field(..., alias="priceFinal")
    advisor_contact_handle: str = Field(default="", alias="advisorContactHandle")

    @property
    def has_contact(self) -> bool:
        return bool(self.advisor_contact_handle.strip())

    def to_payload(self) -> Dict[str, str]:
        return self.model_dump(by_alias=True)


# ---------------------------------------------------------------------------
# Fallback records
#
# The values differ per failure class and are kept apart on purpose until
# product confirms a single canonical set.
# ---------------------------------------------------------------------------

HARD_FALLBACK = DealRecord(price_final="110000000", advisor_contact_handle=DEFAULT_ADVISOR_CONTACT)
PARTIAL_FIELD_FALLBACK = DealRecord(price_final="100000000", advisor_contact_handle="")
NO_IDENTIFIER_BASELINE = DealRecord(price_final="148566058", advisor_contact_handle=DEFAULT_ADVISOR_CONTACT)
# Loader-side fetch failure: partial price with the default contact.
FETCH_FAILURE_FALLBACK = DealRecord(
    price_final=PARTIAL_FIELD_FALLBACK.price_final,
    advisor_contact_handle=DEFAULT_ADVISOR_CONTACT,
)


class DealsClient(ABC):
    """Every CRM deals client (mock or real) must implement this interface."""

    @abstractmethod
    async def lookup(self, key: str, mode: LookupMode) -> DealRecord:
        """Return the deal record for ``key``. Must not raise for upstream failures."""

    @property
    def configured(self) -> bool:
        return True


__all__ = [
    "CONTACT_PROPERTY",
    "DEAL_UUID_PROPERTY",
    "DEFAULT_ADVISOR_CONTACT",
    "DealRecord",
    "DealsClient",
    "FETCH_FAILURE_FALLBACK",
    "HARD_FALLBACK",
    "LookupMode",
    "NO_IDENTIFIER_BASELINE",
    "PARTIAL_FIELD_FALLBACK",
    "PRICE_PROPERTY",
]
