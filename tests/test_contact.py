import pytest

from src.landing.contact import build_contact_link, format_price


def test_format_price_as_colombian_pesos():
    assert format_price("110000000") == "$ 110.000.000"
    assert format_price("$148.566.058") == "$ 148.566.058"
    assert format_price(2500000) == "$ 2.500.000"
    assert format_price("sin precio") == "$0"


def test_phone_handle_becomes_wa_me_link():
    link = build_contact_link("+57 300 123 4567", "visita")
    assert link == (
        "https://wa.me/573001234567?text="
        "%C2%A1Hola!%20Me%20gustar%C3%ADa%20agendar%20una%20visita%20a%20sus%20oficinas."
    )


def test_url_handle_with_query_appends_text_parameter():
    link = build_contact_link("https://api.whatsapp.com/send?phone=3009128399", "oferta")
    assert link.startswith("https://api.whatsapp.com/send?phone=3009128399&text=%C2%A1Hola!")


def test_empty_handle_is_unavailable():
    assert build_contact_link("", "oferta") is None
    assert build_contact_link("   ", "oferta") is None


def test_unknown_action_is_rejected():
    with pytest.raises(ValueError):
        build_contact_link("3001234567", "llamada")
