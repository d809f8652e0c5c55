"""
Landing page controller.

Drives the offer landing from the ``nid`` query parameter: reads it from the
address, fetches the deal through the lookup endpoint, and exposes the record
the page should display together with the loading state.
"""

from .address import PageAddress
from .contact import build_contact_link, format_price
from .factory import create_page_loader, select_analytics_sink
from .gateway import LookupGateway, LookupGatewayError
from .loader import LoaderEvent, LoaderState, PageStateLoader

__all__ = [
    "LoaderEvent",
    "LoaderState",
    "LookupGateway",
    "LookupGatewayError",
    "PageAddress",
    "PageStateLoader",
    "build_contact_link",
    "create_page_loader",
    "format_price",
    "select_analytics_sink",
]
