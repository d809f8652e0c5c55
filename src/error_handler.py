"""Error handling helpers for the deal lookup endpoint."""
from typing import Any, Dict
import logging

from src.integrations.contracts.deals import HARD_FALLBACK, DealRecord

logger = logging.getLogger(__name__)


class ErrorHandler:
    def handle_exception(self, exc: Exception, context: Dict[str, Any] = None) -> DealRecord:
        logger.error("Unhandled exception during deal lookup: %s (context=%s)", exc, context or {}, exc_info=True)
        return HARD_FALLBACK
