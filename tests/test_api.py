# ==============================================================================
# test_api.py — HTTP endpoint tests
# ==============================================================================
# Purpose: Request validation, empty-site warnings and health endpoints
# ==============================================================================

import httpx
import pytest
import respx
from fastapi.testclient import TestClient

from sitemap_analyzer.main import app

NS = 'xmlns="http://www.sitemaps.org/schemas/sitemap/0.9"'

def urlset(*locs):
    entries = "".join(f"<url><loc>{loc}</loc></url>" for loc in locs)
    return f'<?xml version="1.0" encoding="UTF-8"?><urlset {NS}>{entries}</urlset>'

@pytest.fixture
def client():
    return TestClient(app)

def test_root_and_health(client):
    assert client.get("/").json()["status"] == "healthy"

    health = client.get("/health").json()
    assert health["service"] == "sitemap-analyzer"
    assert "environment" in health

@pytest.mark.parametrize("body", [
    {"sitemap_url": "not a url"},
    {"sitemap_url": "/sitemap.xml"},
    {"sitemap_url": "https://shop.test/sitemap.xml", "max_urls": -1},
    {"sitemap_url": "https://shop.test/sitemap.xml", "max_urls": "lots"},
])
def test_analyze_rejects_bad_input(client, body):
    response = client.post("/api/v1/analyze", json=body)

    assert response.status_code == 400

def test_analyze_empty_sitemap_warns(client):
    with respx.mock:
        respx.get("https://shop.test/sitemap.xml").mock(return_value=httpx.Response(200, text=urlset()))

        response = client.post("/api/v1/analyze", json={"sitemap_url": "https://shop.test/sitemap.xml"})

    assert response.status_code == 200
    payload = response.json()
    assert payload["results"] == []
    assert payload["stats"]["total"] == 0
    assert "warning" in payload

def test_analyze_returns_flat_records(client):
    with respx.mock:
        respx.get("https://shop.test/sitemap.xml").mock(
            return_value=httpx.Response(200, text=urlset("https://shop.test/urun/1"))
        )
        respx.get("https://shop.test/urun/1").mock(return_value=httpx.Response(
            200, text="<html><head><title>Kazak</title></head><body><span class='price'>99 TL</span></body></html>"
        ))
        respx.get("https://shop.test/blog").mock(return_value=httpx.Response(404))

        response = client.post(
            "/api/v1/analyze", json={"sitemap_url": "https://shop.test/sitemap.xml", "max_urls": "all"}
        )

    payload = response.json()
    rows = {row["url"]: row for row in payload["results"]}
    assert rows["https://shop.test/urun/1"]["type"] == "product"
    assert rows["https://shop.test/urun/1"]["price"] == "99 TL"
    assert payload["categorized"]["product"] == ["https://shop.test/urun/1"]
    assert payload["stats"]["total"] == len(payload["results"])
    assert "warning" not in payload

def test_list_urls(client):
    with respx.mock:
        respx.get("https://shop.test/sitemap.xml").mock(return_value=httpx.Response(200, text=urlset(
            "https://shop.test/urun/1",
            "https://shop.test/kategori/a",
            "https://shop.test/sayfa/iletisim",
        )))

        response = client.get(
            "/api/v1/urls", params={"sitemap_url": "https://shop.test/sitemap.xml", "max_urls": "2"}
        )

    payload = response.json()
    assert payload["urls"] == ["https://shop.test/urun/1", "https://shop.test/kategori/a"]
    assert payload["counts"]["product"] == 1
    assert payload["counts"]["category"] == 1
    assert payload["categorized"]["static"] == []

def test_list_urls_unreachable_sitemap_warns(client):
    with respx.mock:
        respx.get("https://shop.test/sitemap.xml").mock(return_value=httpx.Response(503))

        response = client.get("/api/v1/urls", params={"sitemap_url": "https://shop.test/sitemap.xml"})

    assert response.json()["urls"] == []
    assert "warning" in response.json()

def test_list_urls_rejects_bad_url(client):
    assert client.get("/api/v1/urls", params={"sitemap_url": "nope"}).status_code == 400
