"""Wiring for a page loader from landing settings."""

import logging
from typing import Optional

import httpx

from src.analytics.events import LandingAnalytics
from src.analytics.sink import AnalyticsSink, GA4AnalyticsSink, LoggingAnalyticsSink
from src.utils.config_loader import LandingSettings, load_landing_settings

from .address import PageAddress
from .gateway import LookupGateway
from .loader import PageStateLoader

logger = logging.getLogger(__name__)


def select_analytics_sink(settings: LandingSettings) -> AnalyticsSink:
    if settings.analytics_enabled and settings.ga_api_secret:
        return GA4AnalyticsSink(settings.ga_measurement_id, settings.ga_api_secret)
    if settings.analytics_enabled:
        logger.warning("Analytics enabled but GA_API_SECRET is not set; logging events instead.")
    return LoggingAnalyticsSink()


def create_page_loader(
    url: str,
    settings: Optional[LandingSettings] = None,
    base_url: str = "",
    http_client: Optional[httpx.AsyncClient] = None,
    sink: Optional[AnalyticsSink] = None,
) -> PageStateLoader:
    settings = settings or load_landing_settings()
    analytics = LandingAnalytics(sink or select_analytics_sink(settings), site=settings.analytics_site)
    return PageStateLoader(
        gateway=LookupGateway(base_url=base_url, http_client=http_client),
        address=PageAddress(url),
        analytics=analytics,
        deadline_seconds=settings.lookup_deadline_seconds,
    )
