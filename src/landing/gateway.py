"""
Lookup gateway.

The page loader's only network caller: fetches a DealRecord from the lookup
endpoint. Unlike the endpoint itself, this gateway raises on any failure so the
loader can decide which fallback to show.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError

from src.integrations.contracts.deals import DealRecord, LookupMode

logger = logging.getLogger(__name__)


class LookupGatewayError(ValueError):
    def __init__(self, message: str, *, payload: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.payload = payload or {}


class LookupGateway:
    def __init__(
        self,
        base_url: str = "",
        mode: LookupMode = LookupMode.BY_EXTERNAL_ID,
        path: str = "/lookup",
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.mode = mode
        self.path = path
        self._http_client = http_client

    async def fetch(self, identifier: str) -> DealRecord:
        url = f"{self.base_url}{self.path}"
        params = {self.mode.query_param: identifier}
        headers = {"Content-Type": "application/json"}

        try:
            if self._http_client is not None:
                response = await self._http_client.get(url, params=params, headers=headers)
            else:
                async with httpx.AsyncClient() as client:
                    response = await client.get(url, params=params, headers=headers)
        except httpx.RequestError as e:
            logger.error("Error calling lookup endpoint: %s", e)
            raise LookupGatewayError(f"Lookup request failed: {e}") from e

        if response.is_error:
            logger.error("Error response from lookup endpoint: %s %s", response.status_code, response.text)
            raise LookupGatewayError(
                f"Lookup endpoint error: {response.status_code}",
                payload={"status_code": response.status_code, "body": response.text},
            )

        try:
            data = response.json()
        except ValueError as e:
            raise LookupGatewayError("Lookup endpoint returned invalid JSON") from e

        if not isinstance(data, dict):
            raise LookupGatewayError("Invalid data received from lookup endpoint", payload={"body": data})

        try:
            return DealRecord.model_validate(data)
        except ValidationError as e:
            raise LookupGatewayError("Lookup endpoint returned an invalid deal record", payload=data) from e
