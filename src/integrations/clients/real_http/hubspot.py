"""
Real HubSpot Deals HTTP Client.

Purpose:
- Looks up a single deal in HubSpot CRM, either by the external ``deal_uuid``
  property (search API) or by HubSpot's own object id (objects API)
- Normalizes the committee price and advisor WhatsApp link into a DealRecord

Important:
- Never raises for upstream problems. Missing credentials, HTTP errors,
  network errors and empty searches all resolve to a fallback record.
- Single attempt, no retries. No timeout beyond the httpx transport default.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx

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

DEFAULT_BASE_URL = "https://api.hubapi.com"
SEARCH_PATH = "/crm/v3/objects/deals/search"
OBJECT_PATH = "/crm/v3/objects/deals/{deal_id}"


class HubSpotDealsClient(DealsClient):
    def __init__(
        self,
        access_token: Optional[str],
        base_url: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        fallback_handler: Optional[FallbackHandler] = None,
    ) -> None:
        self.access_token = (access_token or "").strip()
        self.base_url = (base_url or DEFAULT_BASE_URL).rstrip("/")
        self._http_client = http_client
        self.fallbacks = fallback_handler or FallbackHandler()
        if not self.access_token:
            logger.warning("HubSpot access token is not set; deal lookups will use fallback values.")

    @property
    def configured(self) -> bool:
        return bool(self.access_token)

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.access_token}",
            "Content-Type": "application/json",
        }

    async def lookup(self, key: str, mode: LookupMode) -> DealRecord:
        if not self.configured:
            return self.fallbacks.generate_fallback(FallbackReason.NOT_CONFIGURED, key=key)

        try:
            if mode is LookupMode.BY_EXTERNAL_ID:
                properties = await self._search_by_uuid(key)
            else:
                properties = await self._fetch_by_id(key)
        except httpx.HTTPStatusError as e:
            logger.error(f"HTTP error from HubSpot deals API: {e.response.status_code} {e.response.text}")
            return self.fallbacks.generate_fallback(
                FallbackReason.UPSTREAM_ERROR, key=key, detail=f"status={e.response.status_code}"
            )
        except httpx.RequestError as e:
            logger.error(f"Request error connecting to HubSpot deals API: {e}")
            return self.fallbacks.generate_fallback(FallbackReason.UPSTREAM_ERROR, key=key, detail=str(e))
        except Exception as e:
            logger.exception("Unexpected error in HubSpot deals client")
            return self.fallbacks.generate_fallback(FallbackReason.UPSTREAM_ERROR, key=key, detail=str(e))

        if properties is None:
            return self.fallbacks.generate_fallback(FallbackReason.NOT_FOUND, key=key)
        return self.fallbacks.fill_missing(properties)

    async def _search_by_uuid(self, deal_uuid: str) -> Optional[Dict[str, Any]]:
        body = {
            "filterGroups": [
                {
                    "filters": [
                        {
                            "propertyName": DEAL_UUID_PROPERTY,
                            "operator": "EQ",
                            "value": deal_uuid,
                        }
                    ]
                }
            ],
            "properties": [PRICE_PROPERTY, CONTACT_PROPERTY, DEAL_UUID_PROPERTY],
            "limit": 1,
        }
        data = await self._request("POST", SEARCH_PATH, json=body)
        results = data.get("results") or []
        if not results:
            return None
        return results[0].get("properties") or {}

    async def _fetch_by_id(self, deal_id: str) -> Optional[Dict[str, Any]]:
        # The id is caller input; keep it a single path segment.
        path = OBJECT_PATH.format(deal_id=quote(deal_id, safe=""))
        params = {"properties": f"{PRICE_PROPERTY},{CONTACT_PROPERTY}"}
        data = await self._request("GET", path, params=params)
        return data.get("properties") or {}

    async def _request(self, method: str, path: str, **kwargs: Any) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        logger.info(f"Sending HubSpot deals request: {method} {url}")
        if self._http_client is not None:
            response = await self._http_client.request(method, url, headers=self._headers(), **kwargs)
        else:
            async with httpx.AsyncClient() as client:
                response = await client.request(method, url, headers=self._headers(), **kwargs)
        response.raise_for_status()
        data = response.json()
        if not isinstance(data, dict):
            raise ValueError("HubSpot response body is not a JSON object")
        return data
