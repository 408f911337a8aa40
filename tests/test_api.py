import pytest
from fastapi.testclient import TestClient

from app.main import create_app
from app.services.rates.cache_service import RateCache
from app.services.rates.store import FALLBACK_CURRENCY_RATES


@pytest.fixture
def client(cache: RateCache) -> TestClient:
    return TestClient(create_app(cache=cache))


@pytest.fixture
def display_body():
    return {
        "service": {
            "name": "StreamFlix",
            "slug": "streamflix",
            "category": "streaming",
            "annualOnly": True,
            "regionalPrices": [
                {"country": "United States", "countryCode": "US", "currency": "USD", "price": 15.99},
                {"country": "India", "countryCode": "IN", "currency": "INR", "price": 199},
                {"country": "Germany", "countryCode": "DE", "currency": "EUR", "price": 7.99},
            ],
        },
        "userCountry": "Germany",
    }


def test_root(client):
    r = client.get("/")
    assert r.status_code == 200
    assert "version" in r.json()


def test_rates_report_fallback_until_refreshed(client, source):
    r = client.get("/rates")
    assert r.status_code == 200
    body = r.json()
    assert body["source"] == "fallback"
    assert body["fetched_at"] is None
    assert body["rates"]["EUR"] == FALLBACK_CURRENCY_RATES["EUR"]
    assert source.calls == 0


def test_refresh_and_invalidate(client, source):
    r = client.post("/rates/refresh")
    assert r.status_code == 200
    assert r.json()["source"] == "cache"
    assert r.json()["rates"]["EUR"] == 1.2
    assert source.calls == 1

    assert client.delete("/rates/cache").json() == {"status": "invalidated"}
    assert client.get("/rates").json()["source"] == "fallback"


def test_refresh_failure_reports_fallback(client, source):
    source.fail = True
    r = client.post("/rates/refresh")
    assert r.status_code == 200
    assert r.json()["source"] == "fallback"


def test_failed_refresh_keeps_cached_table(client, cache, source):
    assert client.post("/rates/refresh").json()["source"] == "cache"
    good = cache.snapshot()
    source.fail = True

    r = client.post("/rates/refresh")

    assert r.status_code == 200
    assert r.json()["source"] == "cache"
    assert r.json()["rates"]["EUR"] == 1.2
    assert cache.snapshot() is good
    assert source.calls == 2


def test_convert_endpoint(client):
    r = client.get("/rates/convert", params={"amount": 10, "from_currency": "eur"})
    assert r.status_code == 200
    body = r.json()
    assert body["from_currency"] == "EUR"
    assert body["to_currency"] == "USD"
    assert body["converted"] == pytest.approx(11.0)
    assert body["outcome"] == "converted"


def test_convert_requires_currency(client):
    r = client.get("/rates/convert", params={"amount": 10})
    assert r.status_code == 422
    assert r.json()["error"] == "validation_error"


def test_price_display_endpoint(client, display_body):
    r = client.post("/pricing/display", json=display_body)
    assert r.status_code == 200
    body = r.json()
    assert body["cheapest"]["country_code"] == "IN"
    assert body["user_country"]["country_code"] == "DE"
    assert body["is_annual_only"] is True
    prices = [p["price_in_usd"] for p in body["all_prices"]]
    assert prices == sorted(prices)


def test_price_display_with_fresh_rates(client, source, display_body):
    display_body["freshRates"] = True
    r = client.post("/pricing/display", json=display_body)
    assert r.status_code == 200
    assert source.calls == 1
    assert r.json()["user_country"]["price_in_usd"] == pytest.approx(7.99 * 1.2)


def test_simple_endpoint_matches_display(client, display_body):
    full = client.post("/pricing/display", json=display_body).json()
    simple = client.post("/pricing/simple", json=display_body).json()
    assert simple == {
        "cheapest_price": full["cheapest"]["price_in_usd"],
        "cheapest_country": full["cheapest"]["country"],
        "user_price": full["user_country"]["price_in_usd"],
        "savings_percentage": full["savings"]["percentage"],
        "is_cheaper": full["savings"]["is_positive"],
    }


def test_no_price_data_is_404(client, display_body):
    display_body["regionalPrices"] = []
    r = client.post("/pricing/display", json=display_body)
    assert r.status_code == 404
    assert r.json()["error"] == "no_price_data"
    assert client.post("/pricing/simple", json=display_body).status_code == 404


def test_negative_price_rejected(client, display_body):
    display_body["service"]["regionalPrices"][0]["price"] = -1
    r = client.post("/pricing/display", json=display_body)
    assert r.status_code == 422


def test_unknown_route(client):
    r = client.get("/nope")
    assert r.status_code == 404
    assert r.json()["error"] == "not_found"
