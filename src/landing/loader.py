"""
Page state loader.

Explicit state machine behind the landing page:

    IDLE --load--> LOADING --fetch ok/failed--> READY
                   LOADING --deadline--> TIMED_OUT
    LOADING/READY/TIMED_OUT --identifier cleared--> IDLE

Every fetch gets a generation token. Results, failures and deadlines that
belong to a superseded request are dropped, and events with no entry in
TRANSITIONS for the current state are ignored, so a late response can never
overwrite a state that has already moved on.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple

from src.analytics.events import LandingAnalytics, ScrollDepthTracker, TimeOnPageTracker
from src.fallback_handler import FallbackHandler, FallbackReason
from src.integrations.contracts.deals import DEFAULT_ADVISOR_CONTACT, NO_IDENTIFIER_BASELINE, DealRecord

from .address import PageAddress
from .contact import build_contact_link
from .gateway import LookupGateway

logger = logging.getLogger(__name__)

DEFAULT_DEADLINE_SECONDS = 15.0


class LoaderState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    TIMED_OUT = "timed_out"


class LoaderEvent(str, Enum):
    LOAD_REQUESTED = "load_requested"
    FETCH_SUCCEEDED = "fetch_succeeded"
    FETCH_FAILED = "fetch_failed"
    DEADLINE_ELAPSED = "deadline_elapsed"
    IDENTIFIER_CLEARED = "identifier_cleared"


TRANSITIONS: Dict[Tuple[LoaderState, LoaderEvent], LoaderState] = {
    (LoaderState.IDLE, LoaderEvent.LOAD_REQUESTED): LoaderState.LOADING,
    (LoaderState.LOADING, LoaderEvent.LOAD_REQUESTED): LoaderState.LOADING,
    (LoaderState.READY, LoaderEvent.LOAD_REQUESTED): LoaderState.LOADING,
    (LoaderState.TIMED_OUT, LoaderEvent.LOAD_REQUESTED): LoaderState.LOADING,
    (LoaderState.LOADING, LoaderEvent.FETCH_SUCCEEDED): LoaderState.READY,
    (LoaderState.LOADING, LoaderEvent.FETCH_FAILED): LoaderState.READY,
    (LoaderState.LOADING, LoaderEvent.DEADLINE_ELAPSED): LoaderState.TIMED_OUT,
    (LoaderState.LOADING, LoaderEvent.IDENTIFIER_CLEARED): LoaderState.IDLE,
    (LoaderState.READY, LoaderEvent.IDENTIFIER_CLEARED): LoaderState.IDLE,
    (LoaderState.TIMED_OUT, LoaderEvent.IDENTIFIER_CLEARED): LoaderState.IDLE,
}

# action -> (cta name, page location)
_CTA_BY_ACTION = {
    "oferta": ("solicitar_oferta", "hero_section"),
    "visita": ("agendar_visita", "visit_section"),
    "habi-paga-todo": ("habi_paga_todo", "service_cards"),
    "cliente-paga-tramites": ("cliente_paga_tramites", "service_cards"),
}
# Service-card actions always reach an advisor, falling back to the default line.
_DEFAULT_CONTACT_ACTIONS = {"habi-paga-todo", "cliente-paga-tramites"}

StateListener = Callable[[LoaderState, Optional[DealRecord]], None]


class PageStateLoader:
    def __init__(
        self,
        gateway: LookupGateway,
        address: PageAddress,
        analytics: LandingAnalytics,
        deadline_seconds: float = DEFAULT_DEADLINE_SECONDS,
        param_name: str = "nid",
        fallback_handler: Optional[FallbackHandler] = None,
    ) -> None:
        self.gateway = gateway
        self.address = address
        self.analytics = analytics
        self.deadline_seconds = deadline_seconds
        self.param_name = param_name
        self.fallbacks = fallback_handler or FallbackHandler()

        self.state = LoaderState.IDLE
        self.identifier: Optional[str] = None
        self.record: Optional[DealRecord] = None
        self.history: List[Tuple[LoaderState, LoaderEvent, LoaderState]] = []
        self._listeners: List[StateListener] = []
        self._generation = 0
        self._inflight: Optional[asyncio.Future] = None
        self.scroll_tracker: Optional[ScrollDepthTracker] = None
        self.time_tracker: Optional[TimeOnPageTracker] = None

    # --- Read side -------------------------------------------------------------

    @property
    def is_loading(self) -> bool:
        return self.state is LoaderState.LOADING

    @property
    def is_ready(self) -> bool:
        return self.state in (LoaderState.READY, LoaderState.TIMED_OUT)

    @property
    def display_record(self) -> Optional[DealRecord]:
        """Record the page should render; None while a lookup is in flight."""
        if self.state is LoaderState.IDLE:
            return NO_IDENTIFIER_BASELINE
        return self.record

    def subscribe(self, listener: StateListener) -> None:
        self._listeners.append(listener)

    # --- Page lifecycle ----------------------------------------------------------

    async def mount(self) -> Optional[DealRecord]:
        self.analytics.page_view("home")
        self.scroll_tracker = ScrollDepthTracker(self.analytics)
        self.time_tracker = TimeOnPageTracker(self.analytics)
        identifier = self.address.get_param(self.param_name)
        if identifier and self.record is None:
            await self._load(identifier)
        return self.display_record

    async def submit(self, identifier: str) -> Optional[DealRecord]:
        """Load a user-submitted identifier and write it into the address on success."""
        identifier = (identifier or "").strip()
        if not identifier:
            return self.display_record
        await self._load(identifier, update_address=True)
        return self.display_record

    async def address_changed(self) -> Optional[DealRecord]:
        identifier = self.address.get_param(self.param_name)
        if identifier:
            if identifier != self.identifier:
                await self._load(identifier)
        elif self.identifier is not None:
            self._clear()
        return self.display_record

    def contact_link(self, action: str) -> Optional[str]:
        """Report the CTA click and return the advisor link for ``action``."""
        if action not in _CTA_BY_ACTION:
            raise ValueError(f"Unknown contact action: {action}")
        cta_name, location = _CTA_BY_ACTION[action]
        self.analytics.cta_click(cta_name, location)
        self.analytics.contact_click("whatsapp")

        handle = self.record.advisor_contact_handle if self.record is not None else ""
        if not handle and action in _DEFAULT_CONTACT_ACTIONS:
            handle = DEFAULT_ADVISOR_CONTACT
        return build_contact_link(handle, action)

    # --- State machine -------------------------------------------------------------

    async def _load(self, identifier: str, update_address: bool = False) -> None:
        self._generation += 1
        token = self._generation
        self._cancel_inflight()

        self.identifier = identifier
        self._apply(LoaderEvent.LOAD_REQUESTED, None)

        task = asyncio.ensure_future(self.gateway.fetch(identifier))
        task.add_done_callback(_discard_result)
        self._inflight = task

        try:
            done, _ = await asyncio.wait({task}, timeout=self.deadline_seconds)
        except asyncio.CancelledError:
            # The awaiting caller went away; do not leave the page loading.
            if token == self._generation:
                self._cancel_inflight()
                record = self.fallbacks.generate_fallback(
                    FallbackReason.FETCH_FAILED, key=identifier, detail="lookup cancelled"
                )
                self._apply(LoaderEvent.FETCH_FAILED, record)
                self.analytics.error_occurred("lookup", "cancelled")
            raise

        if token != self._generation:
            logger.debug("Dropping superseded lookup for %s", identifier)
            return

        if not done:
            record = self.fallbacks.generate_fallback(FallbackReason.TIMEOUT, key=identifier)
            self._apply(LoaderEvent.DEADLINE_ELAPSED, record)
            self.analytics.error_occurred("lookup", "timeout")
            return

        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Error loading deal properties: %s", exc)
            record = self.fallbacks.generate_fallback(FallbackReason.FETCH_FAILED, key=identifier, detail=str(exc))
            self._apply(LoaderEvent.FETCH_FAILED, record)
            self.analytics.error_occurred("lookup", "fetch_failed")
            return

        if self._apply(LoaderEvent.FETCH_SUCCEEDED, task.result()):
            self.analytics.property_view(identifier)
            if update_address:
                self.address.replace_param(self.param_name, identifier)

    def _clear(self) -> None:
        self._generation += 1
        self._cancel_inflight()
        self.identifier = None
        self._apply(LoaderEvent.IDENTIFIER_CLEARED, None)

    def _cancel_inflight(self) -> None:
        if self._inflight is not None and not self._inflight.done():
            self._inflight.cancel()
        self._inflight = None

    def _apply(self, event: LoaderEvent, record: Optional[DealRecord]) -> bool:
        next_state = TRANSITIONS.get((self.state, event))
        if next_state is None:
            logger.debug("Ignoring %s in state %s", event.value, self.state.value)
            return False

        previous = self.state
        self.state = next_state
        self.record = record
        self.history.append((previous, event, next_state))
        for listener in self._listeners:
            listener(next_state, record)
        return True


def _discard_result(task: asyncio.Future) -> None:
    # Late or superseded fetches finish unobserved; retrieve the outcome so
    # asyncio does not report it as never retrieved.
    if not task.cancelled():
        task.exception()
