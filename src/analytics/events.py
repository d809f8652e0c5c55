"""
Landing page analytics events.

Event names carry the site suffix (``_medellin`` by default) so several city
landings can share one GA4 property.
"""

from __future__ import annotations

import time
from typing import Callable, Iterable, Optional, Set

from .sink import AnalyticsSink, SafeAnalyticsSink

SCROLL_MILESTONES = (25, 50, 75, 90, 100)
MIN_TRACKED_SECONDS = 10


class LandingAnalytics:
    def __init__(self, sink: AnalyticsSink, site: str = "medellin") -> None:
        self.sink = sink if isinstance(sink, SafeAnalyticsSink) else SafeAnalyticsSink(sink)
        self.site = site

    def _event(self, name: str) -> str:
        return f"{name}_{self.site}"

    # Navigation
    def page_view(self, page_name: str) -> None:
        self.sink.notify(self._event("page_view"), "navigation", page_name)

    # Forms
    def form_start(self, form_name: str) -> None:
        self.sink.notify(self._event("form_start"), "engagement", form_name)

    def form_complete(self, form_name: str) -> None:
        self.sink.notify(self._event("form_complete"), "conversion", form_name)

    def form_error(self, form_name: str, error_type: str) -> None:
        self.sink.notify(self._event("form_error"), "error", f"{form_name}_{error_type}")

    # Contact / properties
    def contact_click(self, method: str) -> None:
        self.sink.notify(self._event("contact_click"), "engagement", method)

    def property_view(self, property_id: Optional[str] = None) -> None:
        self.sink.notify(self._event("property_view"), "engagement", property_id)

    def property_inquiry(self, property_id: Optional[str] = None) -> None:
        self.sink.notify(self._event("property_inquiry"), "conversion", property_id)

    # CTA
    def cta_click(self, cta_name: str, location: str) -> None:
        self.sink.notify(self._event("cta_click"), "engagement", f"{cta_name}_{location}")

    # Scroll and time on page
    def scroll_depth(self, percentage: int) -> None:
        self.sink.notify(f"scroll_{percentage}_{self.site}", "engagement", f"{percentage}%", percentage)

    def time_on_page(self, seconds: int) -> None:
        self.sink.notify(self._event("time_on_page"), "engagement", None, seconds)

    def error_occurred(self, error_type: str, error_message: str) -> None:
        self.sink.notify(self._event("error"), "error", f"{error_type}_{error_message}")


class ScrollDepthTracker:
    """Reports each scroll milestone once, based on the deepest point reached."""

    def __init__(self, analytics: LandingAnalytics, milestones: Iterable[int] = SCROLL_MILESTONES) -> None:
        self.analytics = analytics
        self.milestones = tuple(sorted(milestones))
        self.max_scroll = 0
        self.tracked: Set[int] = set()

    def on_scroll(self, scroll_y: float, scroll_height: float, viewport_height: float) -> None:
        scrollable = scroll_height - viewport_height
        if scrollable <= 0:
            percent = 100
        else:
            percent = round(scroll_y / scrollable * 100)
        self.max_scroll = max(self.max_scroll, percent)

        for milestone in self.milestones:
            if self.max_scroll >= milestone and milestone not in self.tracked:
                self.analytics.scroll_depth(milestone)
                self.tracked.add(milestone)


class TimeOnPageTracker:
    def __init__(self, analytics: LandingAnalytics, clock: Callable[[], float] = time.monotonic) -> None:
        self.analytics = analytics
        self.clock = clock
        self.started_at = clock()

    def on_leave(self) -> Optional[int]:
        """Report time spent when the visitor leaves; short visits are not reported."""
        seconds = round(self.clock() - self.started_at)
        if seconds > MIN_TRACKED_SECONDS:
            self.analytics.time_on_page(seconds)
            return seconds
        return None
