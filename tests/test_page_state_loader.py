import asyncio

import pytest

from src.analytics.events import LandingAnalytics
from src.analytics.sink import AnalyticsSink
from src.integrations.contracts.deals import (
    FETCH_FAILURE_FALLBACK,
    HARD_FALLBACK,
    NO_IDENTIFIER_BASELINE,
    DealRecord,
)
from src.landing.address import PageAddress
from src.landing.gateway import LookupGatewayError
from src.landing.loader import LoaderEvent, LoaderState, PageStateLoader

DEAL = DealRecord(price_final="250000000", advisor_contact_handle="https://wa.me/573001112233")


class FakeGateway:
    def __init__(self, responses=None):
        self.responses = responses or {}
        self.gates = {}
        self.calls = []
        self.cancelled = []

    async def fetch(self, identifier):
        self.calls.append(identifier)
        gate = self.gates.get(identifier)
        if gate is not None:
            try:
                await gate.wait()
            except asyncio.CancelledError:
                self.cancelled.append(identifier)
                raise
        result = self.responses.get(identifier, DEAL)
        if isinstance(result, Exception):
            raise result
        return result


class BrokenSink(AnalyticsSink):
    def notify(self, event_name, category, label=None, value=None):
        raise RuntimeError("analytics down")


def _loader(url, sink, gateway=None, deadline=1.0):
    return PageStateLoader(
        gateway=gateway or FakeGateway(),
        address=PageAddress(url),
        analytics=LandingAnalytics(sink),
        deadline_seconds=deadline,
    )


@pytest.mark.asyncio
async def test_no_identifier_renders_baseline_without_fetch(sink):
    loader = _loader("/", sink)

    record = await loader.mount()

    assert loader.state is LoaderState.IDLE
    assert record == NO_IDENTIFIER_BASELINE
    assert record.price_final == "148566058"
    assert loader.gateway.calls == []
    assert sink.names() == ["page_view_medellin"]


@pytest.mark.asyncio
async def test_mount_with_identifier_loads_record(sink):
    loader = _loader("/?nid=abc123", sink)

    record = await loader.mount()

    assert loader.state is LoaderState.READY
    assert record == DEAL
    assert loader.gateway.calls == ["abc123"]
    assert loader.history == [
        (LoaderState.IDLE, LoaderEvent.LOAD_REQUESTED, LoaderState.LOADING),
        (LoaderState.LOADING, LoaderEvent.FETCH_SUCCEEDED, LoaderState.READY),
    ]
    assert ("property_view_medellin", "engagement", "abc123", None) in sink.events


@pytest.mark.asyncio
async def test_submit_rewrites_address_and_second_mount_repeats_fetch(sink):
    address = PageAddress("/?utm_source=ads")
    gateway = FakeGateway()
    loader = PageStateLoader(gateway, address, LandingAnalytics(sink))

    await loader.submit("  abc123 ")

    assert loader.state is LoaderState.READY
    assert gateway.calls == ["abc123"]
    assert address.url == "/?utm_source=ads&nid=abc123"
    assert len(address.history) == 1

    second_gateway = FakeGateway()
    second = PageStateLoader(second_gateway, PageAddress(address.url), LandingAnalytics(sink))
    await second.mount()
    assert second_gateway.calls == gateway.calls
    assert second.display_record == loader.display_record


@pytest.mark.asyncio
async def test_blank_submission_is_ignored(sink):
    loader = _loader("/", sink)

    await loader.submit("   ")

    assert loader.state is LoaderState.IDLE
    assert loader.gateway.calls == []


@pytest.mark.asyncio
async def test_deadline_forces_fallback_and_late_response_is_ignored(sink):
    gateway = FakeGateway()
    gateway.gates["slow"] = asyncio.Event()
    loader = _loader("/?nid=slow", sink, gateway=gateway, deadline=0.05)

    await loader.mount()

    assert loader.state is LoaderState.TIMED_OUT
    assert loader.is_ready
    assert loader.display_record == HARD_FALLBACK
    assert loader.display_record.price_final == "110000000"
    assert "error_medellin" in sink.names()

    gateway.gates["slow"].set()
    await asyncio.sleep(0.01)

    assert loader.state is LoaderState.TIMED_OUT
    assert loader.display_record == HARD_FALLBACK


@pytest.mark.asyncio
async def test_fetch_failure_shows_fetch_failure_fallback(sink):
    gateway = FakeGateway({"bad": LookupGatewayError("Lookup endpoint error: 500")})
    loader = _loader("/?nid=bad", sink, gateway=gateway)

    await loader.mount()

    assert loader.state is LoaderState.READY
    assert loader.display_record == FETCH_FAILURE_FALLBACK
    assert loader.display_record.price_final == "100000000"


@pytest.mark.asyncio
async def test_failed_submission_does_not_rewrite_address(sink):
    gateway = FakeGateway({"bad": LookupGatewayError("offline")})
    loader = _loader("/", sink, gateway=gateway)

    await loader.submit("bad")

    assert loader.address.url == "/"


@pytest.mark.asyncio
async def test_removing_identifier_returns_to_idle_and_baseline(sink):
    loader = _loader("/?nid=abc123", sink)
    await loader.mount()
    assert loader.display_record == DEAL

    loader.address.push("/")
    record = await loader.address_changed()

    assert loader.state is LoaderState.IDLE
    assert loader.record is None
    assert loader.identifier is None
    assert record == NO_IDENTIFIER_BASELINE


@pytest.mark.asyncio
async def test_back_and_forward_navigation_refetches_changed_identifier(sink):
    other = DealRecord(price_final="199000000", advisor_contact_handle="")
    gateway = FakeGateway({"second": other})
    loader = _loader("/?nid=first", sink, gateway=gateway)
    await loader.mount()

    loader.address.push("/?nid=second")
    assert await loader.address_changed() == other

    loader.address.back()
    assert await loader.address_changed() == DEAL

    await loader.address_changed()
    assert gateway.calls == ["first", "second", "first"]


@pytest.mark.asyncio
async def test_newer_request_supersedes_in_flight_request(sink):
    newer = DealRecord(price_final="321000000", advisor_contact_handle="")
    gateway = FakeGateway({"second": newer})
    gateway.gates["first"] = asyncio.Event()
    loader = _loader("/", sink, gateway=gateway)

    first = asyncio.ensure_future(loader.submit("first"))
    await asyncio.sleep(0)
    assert loader.is_loading

    await loader.submit("second")
    gateway.gates["first"].set()
    await first

    assert loader.state is LoaderState.READY
    assert loader.identifier == "second"
    assert loader.display_record == newer
    assert loader.address.get_param("nid") == "second"


@pytest.mark.asyncio
async def test_listeners_see_each_state_entry(sink):
    seen = []
    loader = _loader("/?nid=abc123", sink)
    loader.subscribe(lambda state, record: seen.append((state, record)))

    await loader.mount()

    assert seen == [(LoaderState.LOADING, None), (LoaderState.READY, DEAL)]


@pytest.mark.asyncio
async def test_broken_analytics_never_breaks_loader():
    loader = _loader("/?nid=abc123", BrokenSink())

    record = await loader.mount()

    assert record == DEAL
    assert loader.contact_link("oferta") is not None


@pytest.mark.asyncio
async def test_contact_links_follow_advisor_availability(sink):
    gateway = FakeGateway({"no-advisor": DealRecord(price_final="1", advisor_contact_handle="")})
    loader = _loader("/?nid=abc123", sink, gateway=gateway)
    await loader.mount()

    link = loader.contact_link("oferta")
    assert link.startswith("https://wa.me/573001112233?text=")
    assert ("cta_click_medellin", "engagement", "solicitar_oferta_hero_section", None) in sink.events
    assert ("contact_click_medellin", "engagement", "whatsapp", None) in sink.events

    await loader.submit("no-advisor")
    assert loader.contact_link("visita") is None
    default_link = loader.contact_link("habi-paga-todo")
    assert default_link.startswith("https://api.whatsapp.com/send?phone=3009128399&text=")


@pytest.mark.asyncio
async def test_cancelled_mount_does_not_leave_page_loading(sink):
    gateway = FakeGateway()
    gateway.gates["slow"] = asyncio.Event()
    loader = _loader("/?nid=slow", sink, gateway=gateway, deadline=0.05)

    with pytest.raises(asyncio.TimeoutError):
        await asyncio.wait_for(loader.mount(), 0.01)
    await asyncio.sleep(0.1)

    assert loader.state is LoaderState.READY
    assert loader.display_record == FETCH_FAILURE_FALLBACK
    assert gateway.cancelled == ["slow"]
    assert ("error_medellin", "error", "lookup_cancelled", None) in sink.events


@pytest.mark.asyncio
async def test_mount_starts_scroll_and_time_trackers(sink):
    loader = _loader("/", sink)
    assert loader.scroll_tracker is None
    assert loader.time_tracker is None

    await loader.mount()
    loader.scroll_tracker.on_scroll(scroll_y=100, scroll_height=1200, viewport_height=800)

    assert sink.names() == ["page_view_medellin", "scroll_25_medellin"]
    assert loader.time_tracker.on_leave() is None


@pytest.mark.asyncio
async def test_unknown_contact_action_is_rejected_before_reporting(sink):
    loader = _loader("/?nid=abc123", sink)
    await loader.mount()
    reported = list(sink.events)

    with pytest.raises(ValueError):
        loader.contact_link("llamada")

    assert sink.events == reported
