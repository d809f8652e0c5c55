"""
Analytics layer.

The landing core reports user-visible events through one narrow interface,
AnalyticsSink.notify(event_name, category, label=None, value=None).

Key rule:
- Notifications are fire-and-forget. A failing sink must never block or break
  the page loader, so callers always go through SafeAnalyticsSink.
"""

from .events import LandingAnalytics, ScrollDepthTracker, TimeOnPageTracker
from .sink import AnalyticsSink, GA4AnalyticsSink, LoggingAnalyticsSink, SafeAnalyticsSink

__all__ = [
    "AnalyticsSink",
    "GA4AnalyticsSink",
    "LandingAnalytics",
    "LoggingAnalyticsSink",
    "SafeAnalyticsSink",
    "ScrollDepthTracker",
    "TimeOnPageTracker",
]
