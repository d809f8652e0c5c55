"""Advisor contact links and price formatting for the landing page."""

import logging
import re
from typing import Optional, Union
from urllib.parse import quote

logger = logging.getLogger(__name__)

CONTACT_MESSAGES = {
    "oferta": "¡Hola! Me interesa solicitar una oferta para mi propiedad.",
    "visita": "¡Hola! Me gustaría agendar una visita a sus oficinas.",
    "habi-paga-todo": "Hola deseo solicitar mi oferta y que habi se encargue de los costos de tramites y notarias",
    "cliente-paga-tramites": "Hola deseo solicitar mi oferta pero me hare cargo de los costos de tramites y notarias",
}


def format_price(price: Union[str, int, float]) -> str:
    """Format a price as Colombian pesos without decimals, e.g. ``$ 110.000.000``."""
    if isinstance(price, str):
        digits = re.sub(r"[^\d]", "", price)
        if not digits:
            return "$0"
        amount = int(digits)
    else:
        amount = round(price)
    return "$ " + f"{amount:,}".replace(",", ".")


def build_contact_link(handle: str, action: str) -> Optional[str]:
    """
    Build the WhatsApp link for an advisor handle with the action's message.

    The handle is either a full URL or a bare phone number. Returns None when
    the handle is empty.
    """
    if action not in CONTACT_MESSAGES:
        raise ValueError(f"Unknown contact action: {action}")
    if not handle or not handle.strip():
        logger.warning("Advisor WhatsApp link not available")
        return None

    url = handle.strip()
    if not url.startswith("http"):
        number = re.sub(r"[^\d+]", "", url)
        url = f"https://wa.me/{number.replace('+', '')}"

    separator = "&" if "?" in url else "?"
    message = quote(CONTACT_MESSAGES[action], safe="!'()*")
    return f"{url}{separator}text={message}"
