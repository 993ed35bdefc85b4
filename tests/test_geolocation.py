import pytest

from tests.helpers import data_of

GEO = "/api/geolocation"


def test_detect_from_country_header(client):
    result = data_of(client.post(f"{GEO}/detect", headers={"CF-IPCountry": "br"}))

    assert result["location"]["market_code"] == "BR"
    assert result["location"]["source"] == "cf-ipcountry"
    assert result["location"]["confidence"] == 0.9
    assert result["market_config"]["currency_code"] == "BRL"
    assert result["market_config"]["currency_symbol"] == "R$"


def test_detect_from_accept_language(client):
    result = data_of(client.post(f"{GEO}/detect", headers={"Accept-Language": "de-DE,de;q=0.9,en;q=0.8"}))

    assert result["location"]["market_code"] == "DE"
    assert result["location"]["source"] == "accept-language"
    assert result["location"]["confidence"] == 0.6


def test_unknown_country_header_falls_through(client):
    result = data_of(client.post(f"{GEO}/detect", headers={"X-Country-Code": "ZZ", "Accept-Language": "en-GB"}))
    assert result["location"]["market_code"] == "GB"


def test_detect_default_market(client):
    result = data_of(client.post(f"{GEO}/detect", headers={"Accept-Language": "en"}))

    assert result["location"]["market_code"] == "US"
    assert result["location"]["source"] == "default"
    assert result["location"]["confidence"] == 0.1


@pytest.mark.parametrize("code", ["US", "BR", "GB", "DE", "FR", "IN", "MX", "CA"])
def test_market_config(client, code):
    config = data_of(client.get(f"{GEO}/config", params={"market_code": code.lower()}))

    assert config["market_code"] == code
    assert config["display_config"]["date_format"]


def test_unknown_market_config(client):
    response = client.get(f"{GEO}/config", params={"market_code": "ZZ"})
    assert response.status_code == 404


def test_convert_currency(client):
    result = data_of(client.post(f"{GEO}/convert-currency", json={"amount": 100, "from": "usd", "to": "BRL"}))

    assert result["converted_amount"] == 500.0
    assert result["exchange_rate"] == 5.0
    assert result["formatted_amount"] == "R$500.00"


def test_convert_between_non_usd_currencies(client):
    result = data_of(client.post(f"{GEO}/convert-currency", json={"amount": "50", "from": "BRL", "to": "USD"}))

    assert result["converted_amount"] == 10.0
    assert result["formatted_amount"] == "$10.00"


def test_convert_unknown_currency(client):
    response = client.post(f"{GEO}/convert-currency", json={"amount": 1, "from": "USD", "to": "XYZ"})

    assert response.status_code == 400
    assert response.json()["status_code"] == "3001"


def test_convert_negative_amount(client):
    response = client.post(f"{GEO}/convert-currency", json={"amount": -1, "from": "USD", "to": "EUR"})
    assert response.status_code == 400


def test_initialize_market_updates_tenant_settings(client, tenant_b):
    headers = tenant_b["headers"]

    result = data_of(client.post(f"{GEO}/initialize-market", headers=headers, json={"market_code": "br"}))
    assert result["market_code"] == "BR"
    assert result["tenant_id"] == tenant_b["id"]

    settings = data_of(client.get("/api/tenant-admin/settings", headers=headers))["settings"]
    assert settings["market_code"] == "BR"
    assert settings["currency"] == "BRL"
    assert settings["language"] == "pt-BR"
    assert settings["timezone"] == "America/Sao_Paulo"


def test_initialize_market_from_headers(client, tenant_b):
    headers = {**tenant_b["headers"], "CF-IPCountry": "FR"}

    result = data_of(client.post(f"{GEO}/initialize-market", headers=headers, json={}))
    assert result["market_code"] == "FR"


def test_initialize_market_requires_tenant_admin(client, tenant_a):
    response = client.post(f"{GEO}/initialize-market", headers=tenant_a["agent_headers"], json={"market_code": "US"})
    assert response.status_code == 403


def test_initialize_market_requires_login(client):
    response = client.post(f"{GEO}/initialize-market", json={"market_code": "US"})
    assert response.status_code == 401
