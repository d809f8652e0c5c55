"""
FastAPI application - Main entry point
"""

from dotenv import load_dotenv

load_dotenv()

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from src.api.endpoints.lookup import router as lookup_router
from src.integrations.clients.mocks.hubspot import MockHubSpotDealsClient
from src.integrations.clients.real_http.hubspot import HubSpotDealsClient
from src.integrations.contracts.deals import DealsClient
from src.utils.config_loader import LandingSettings, load_landing_settings

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def _select_deals_client(settings: LandingSettings) -> DealsClient:
    if settings.integrations_mode == "mock":
        logger.info("Using mock HubSpot deals client")
        return MockHubSpotDealsClient()
    return HubSpotDealsClient(
        access_token=settings.hubspot_access_token,
        base_url=settings.hubspot_api_base_url,
    )


def create_app(
    settings: Optional[LandingSettings] = None,
    deals_client: Optional[DealsClient] = None,
) -> FastAPI:
    settings = settings or load_landing_settings()

    app = FastAPI(
        title="Offer Landing API",
        description="Deal price and advisor lookups for the offer landing page",
        version="1.0.0",
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Dependency injection: the CRM client is chosen once per app.
    app.state.settings = settings
    app.state.deals_client = deals_client or _select_deals_client(settings)

    app.include_router(lookup_router)
    app.include_router(lookup_router, prefix="/api/v1")

    @app.get("/")
    async def root():
        return {
            "message": "Offer Landing API",
            "version": "1.0.0",
            "endpoints": {
                "GET /lookup?dealUuid=<uuid>": "Deal price and advisor by external deal UUID",
                "GET /lookup?internalId=<id>": "Deal price and advisor by internal HubSpot id",
                "GET /health": "Health check",
            },
        }

    @app.get("/health")
    async def health_check(request: Request):
        client: DealsClient = request.app.state.deals_client
        return {
            "status": "healthy",
            "crm_configured": client.configured,
            "integrations_mode": request.app.state.settings.integrations_mode,
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
