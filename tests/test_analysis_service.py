# ==============================================================================
# test_analysis_service.py — Pipeline orchestration tests
# ==============================================================================
# Purpose: End-to-end runs over mocked sites, failure handling and URL caps
# ==============================================================================

import asyncio

import httpx
import pytest
import respx

from sitemap_analyzer.crawler.fetch_client import RateLimitedClient
from sitemap_analyzer.models.page_models import CategoryDetails, PageType, PipelineResult, ProductDetails
from sitemap_analyzer.services.analysis_service import SiteAnalysisService, apply_url_cap

NS = 'xmlns="http://www.sitemaps.org/schemas/sitemap/0.9"'

PRODUCT_PAGE = """
<html><head><title>Deri Ayakkabı</title></head>
<body>
  <h1>Deri Ayakkabı</h1>
  <span class="price">1.299 TL</span>
</body></html>
"""

CATEGORY_PAGE = "<html><head><title>Erkek</title></head><body><h1>Erkek</h1></body></html>"

ABOUT_PAGE = """
<html><head><title>Hakkımızda</title></head>
<body><h1>Hakkımızda</h1><div class="page-content">Biz bir aile şirketiyiz.</div></body></html>
"""

def urlset(*locs):
    entries = "".join(f"<url><loc>{loc}</loc></url>" for loc in locs)
    return f'<?xml version="1.0" encoding="UTF-8"?><urlset {NS}>{entries}</urlset>'

def sitemap_index(*locs):
    entries = "".join(f"<sitemap><loc>{loc}</loc></sitemap>" for loc in locs)
    return f'<?xml version="1.0" encoding="UTF-8"?><sitemapindex {NS}>{entries}</sitemapindex>'

def run_service(scheduler, observer, action):
    async def scenario():
        async with RateLimitedClient(observer=observer) as client:
            service = SiteAnalysisService(client, observer=observer, scheduler=scheduler, probe_common_pages=False)
            return await action(service)

    return asyncio.run(scenario())

def test_end_to_end_sitemap_index(scheduler, observer):
    with respx.mock:
        respx.get("https://shop.test/sitemap_index.xml").mock(return_value=httpx.Response(200, text=sitemap_index(
            "https://shop.test/sitemap-products.xml",
            "https://shop.test/sitemap-pages.xml",
        )))
        respx.get("https://shop.test/sitemap-products.xml").mock(
            return_value=httpx.Response(200, text=urlset("https://shop.test/urun/1"))
        )
        respx.get("https://shop.test/sitemap-pages.xml").mock(return_value=httpx.Response(200, text=urlset(
            "https://shop.test/kategori/a",
            "https://shop.test/sayfa/hakkimizda",
        )))
        respx.get("https://shop.test/urun/1").mock(return_value=httpx.Response(200, text=PRODUCT_PAGE))
        respx.get("https://shop.test/kategori/a").mock(return_value=httpx.Response(200, text=CATEGORY_PAGE))
        respx.get("https://shop.test/sayfa/hakkimizda").mock(return_value=httpx.Response(200, text=ABOUT_PAGE))
        respx.get("https://shop.test/blog").mock(return_value=httpx.Response(404))

        result = run_service(
            scheduler, observer, lambda service: service.analyze_site("https://shop.test/sitemap_index.xml")
        )

    records = result.records
    assert records["https://shop.test/urun/1"].type == PageType.PRODUCT
    assert isinstance(records["https://shop.test/urun/1"].details, ProductDetails)
    assert records["https://shop.test/urun/1"].details.price == "1.299 TL"
    assert records["https://shop.test/kategori/a"].type == PageType.CATEGORY
    assert isinstance(records["https://shop.test/kategori/a"].details, CategoryDetails)
    assert records["https://shop.test/sayfa/hakkimizda"].type == PageType.STATIC
    # the extracted about page wins over the synthetic one
    assert records["https://shop.test/sayfa/hakkimizda"].description == "Biz bir aile şirketiyiz."

    stats = result.stats
    assert stats.product == 1
    assert stats.category == 4
    assert stats.blog == 3
    assert stats.static == 6
    assert stats.others == 0
    assert stats.total == len(records) == 14
    assert stats.total == stats.product + stats.category + stats.blog + stats.static + stats.others

    assert observer.of("coverage.locale") == [{"locale": "tr"}]
    assert "pipeline.done" in observer.names()
    assert len(result.to_array()) == 14

def test_empty_input_returns_empty_result(scheduler, observer):
    service = SiteAnalysisService(RateLimitedClient(), observer=observer, scheduler=scheduler, probe_common_pages=False)

    result = asyncio.run(service.run(["", "not a url"]))

    assert result.records == {}
    assert result.stats.total == 0
    assert "pipeline.empty" in observer.names()

def test_failed_pages_keep_their_bucket_type(scheduler, observer):
    with respx.mock:
        respx.get("https://shop.test/urun/1").mock(return_value=httpx.Response(500))
        respx.get("https://shop.test/page-x").mock(return_value=httpx.Response(500))
        respx.get("https://shop.test/blog").mock(return_value=httpx.Response(404))

        result = run_service(
            scheduler,
            observer,
            lambda service: service.run(["https://shop.test/urun/1", "https://shop.test/page-x"]),
        )

    product = result.records["https://shop.test/urun/1"]
    assert product.type == PageType.PRODUCT
    assert product.error
    assert product.images == []

    other = result.records["https://shop.test/page-x"]
    assert other.type == PageType.OTHERS
    assert other.error

    assert result.stats.product == 1
    assert result.stats.others == 1
    assert len(observer.of("extract.failed")) == 2

def test_max_urls_caps_discovered_urls(scheduler, observer):
    with respx.mock:
        respx.get("https://shop.test/sitemap.xml").mock(return_value=httpx.Response(200, text=urlset(
            "https://shop.test/urun/1",
            "https://shop.test/urun/2",
            "https://shop.test/urun/3",
        )))
        respx.get("https://shop.test/urun/1").mock(return_value=httpx.Response(200, text=PRODUCT_PAGE))
        respx.get("https://shop.test/blog").mock(return_value=httpx.Response(404))

        result = run_service(
            scheduler, observer, lambda service: service.analyze_site("https://shop.test/sitemap.xml", max_urls="1")
        )

    assert "https://shop.test/urun/1" in result.records
    assert "https://shop.test/urun/2" not in result.records
    assert result.stats.product == 1
    # no Turkish markers among the classified URLs
    assert "https://shop.test/about-us" in result.records

def test_discover_and_classify_does_not_fetch_pages(scheduler, observer):
    with respx.mock:
        respx.get("https://shop.test/sitemap.xml").mock(return_value=httpx.Response(200, text=urlset(
            "https://shop.test/urun/1",
            "https://shop.test/blog/icerik/merhaba",
            "https://shop.test/",
        )))

        buckets = run_service(
            scheduler, observer, lambda service: service.discover_and_classify("https://shop.test/sitemap.xml")
        )

    assert buckets.product == ["https://shop.test/urun/1"]
    assert buckets.blog == ["https://shop.test/blog/icerik/merhaba"]
    assert buckets.static == ["https://shop.test/"]

def test_empty_result_is_a_plain_pipeline_result():
    result = PipelineResult()

    assert result.to_array() == []
    assert result.categorized() == {"product": [], "category": [], "blog": [], "static": [], "others": []}

@pytest.mark.parametrize("max_urls, expected", [
    (None, ["a", "b", "c"]),
    ("all", ["a", "b", "c"]),
    (" ALL ", ["a", "b", "c"]),
    (2, ["a", "b"]),
    ("2", ["a", "b"]),
    (0, []),
    (10, ["a", "b", "c"]),
])
def test_apply_url_cap(max_urls, expected):
    assert apply_url_cap(["a", "b", "c"], max_urls) == expected

@pytest.mark.parametrize("max_urls", [-1, "-3", "many", True, [1]])
def test_apply_url_cap_rejects_bad_values(max_urls):
    with pytest.raises(ValueError):
        apply_url_cap(["a"], max_urls)

def test_others_records_carry_no_payload(scheduler, observer):
    html = "<html><head><title>Haber</title></head><body><article><p>Bugün yeni mağazamız açıldı.</p></article></body></html>"

    with respx.mock:
        respx.get("https://shop.test/haber-1").mock(return_value=httpx.Response(200, text=html))
        respx.get("https://shop.test/blog").mock(return_value=httpx.Response(404))

        result = run_service(scheduler, observer, lambda service: service.run(["https://shop.test/haber-1"]))

    record = result.records["https://shop.test/haber-1"]
    assert record.type == PageType.OTHERS
    assert record.details is None
    assert record.error is None
    assert record.title == "Haber"
    assert "blogCategories" not in record.to_flat_dict()
