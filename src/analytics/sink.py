"""
Analytics sinks.

- LoggingAnalyticsSink: development sink, writes each event to the log
- GA4AnalyticsSink: production sink, sends events to the GA4 Measurement Protocol
- SafeAnalyticsSink: wraps any sink so notify() never raises
"""

from __future__ import annotations

import logging
import uuid
from abc import ABC, abstractmethod
from concurrent.futures import Executor, ThreadPoolExecutor
from typing import Any, Dict, Optional

import requests

logger = logging.getLogger(__name__)

GA4_COLLECT_URL = "https://www.google-analytics.com/mp/collect"


class AnalyticsSink(ABC):
    @abstractmethod
    def notify(
        self,
        event_name: str,
        category: str,
        label: Optional[str] = None,
        value: Optional[float] = None,
    ) -> None:
        """Record one analytics event. Returns nothing."""


class LoggingAnalyticsSink(AnalyticsSink):
    def notify(self, event_name, category, label=None, value=None) -> None:
        logger.info(
            "[DEV] Analytics event: action=%s category=%s label=%s value=%s",
            event_name,
            category,
            label,
            value,
        )


class GA4AnalyticsSink(AnalyticsSink):
    """Sends events to GA4 on a background worker so callers never wait on the network."""

    def __init__(
        self,
        measurement_id: str,
        api_secret: str,
        client_id: Optional[str] = None,
        executor: Optional[Executor] = None,
        timeout_seconds: float = 5.0,
    ) -> None:
        self.measurement_id = measurement_id
        self.api_secret = api_secret
        self.client_id = client_id or str(uuid.uuid4())
        self.timeout_seconds = timeout_seconds
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(max_workers=1, thread_name_prefix="ga4-sink")
        self._closed = False

    def build_payload(self, event_name, category, label=None, value=None) -> Dict[str, Any]:
        params: Dict[str, Any] = {"event_category": category}
        if label is not None:
            params["event_label"] = label
        if value is not None:
            params["value"] = value
        return {"client_id": self.client_id, "events": [{"name": event_name, "params": params}]}

    def notify(self, event_name, category, label=None, value=None) -> None:
        if self._closed:
            logger.debug("GA4 sink is closed; dropping event %s", event_name)
            return
        payload = self.build_payload(event_name, category, label, value)
        self._executor.submit(self._send, payload)

    def _send(self, payload: Dict[str, Any]) -> None:
        try:
            resp = requests.post(
                GA4_COLLECT_URL,
                params={"measurement_id": self.measurement_id, "api_secret": self.api_secret},
                json=payload,
                timeout=self.timeout_seconds,
            )
            resp.raise_for_status()
        except Exception as e:
            logger.warning(f"Failed to send analytics event to GA4: {e}")

    def close(self) -> None:
        """Stop accepting events and wait for queued sends. A caller-supplied executor is left running."""
        self._closed = True
        if self._owns_executor:
            self._executor.shutdown(wait=True)


class SafeAnalyticsSink(AnalyticsSink):
    def __init__(self, inner: AnalyticsSink) -> None:
        self.inner = inner

    def notify(self, event_name, category, label=None, value=None) -> None:
        try:
            self.inner.notify(event_name, category, label, value)
        except Exception as e:
            logger.warning("Analytics sink failed for event %s: %s", event_name, e)
