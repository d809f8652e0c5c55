from typing import Optional, Tuple

from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse

from src.error_handler import ErrorHandler
from src.integrations.contracts.deals import DealsClient, LookupMode

router = APIRouter()
error_handler = ErrorHandler()


def _resolve_key(deal_uuid: Optional[str], internal_id: Optional[str]) -> Tuple[LookupMode, str]:
    deal_uuid = (deal_uuid or "").strip() if deal_uuid is not None else None
    internal_id = (internal_id or "").strip() if internal_id is not None else None

    if deal_uuid:
        return LookupMode.BY_EXTERNAL_ID, deal_uuid
    if internal_id:
        return LookupMode.BY_INTERNAL_ID, internal_id
    if internal_id is not None and deal_uuid is None:
        return LookupMode.BY_INTERNAL_ID, ""
    return LookupMode.BY_EXTERNAL_ID, ""


@router.get("/lookup", tags=["Deals"])
async def lookup_deal(
    request: Request,
    deal_uuid: Optional[str] = Query(default=None, alias="dealUuid", description="External deal UUID"),
    internal_id: Optional[str] = Query(default=None, alias="internalId", description="Internal HubSpot deal id"),
):
    """
    Return the committee price and advisor contact for a deal.

    Upstream CRM problems never surface here: whenever an identifier is given
    the response is 200 with a usable record, falling back to defaults.
    """
    mode, key = _resolve_key(deal_uuid, internal_id)
    if not key:
        return JSONResponse(status_code=400, content={"error": mode.missing_key_error})

    client: DealsClient = request.app.state.deals_client
    try:
        record = await client.lookup(key, mode)
    except Exception as e:
        record = error_handler.handle_exception(e, context={"key": key, "mode": mode.value})

    return record.to_payload()
