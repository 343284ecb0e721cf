# ==============================================================================
# test_config_service.py — Configuration loading tests
# ==============================================================================
# Purpose: Bundled YAML tables, environment overrides and load errors
# ==============================================================================

import pytest

from sitemap_analyzer.models.page_models import PageType
from sitemap_analyzer.services.config_service import DEFAULT_USER_AGENT, ConfigService

def test_bundled_tables_load():
    service = ConfigService()

    selectors = service.load_selectors()
    rules = service.load_url_rules()
    locales = service.load_locales()

    assert selectors.common.image_limit == 5
    assert selectors.common.title[0].attrs == ["content"]
    assert set(selectors.detection) == {PageType.BLOG.value, PageType.PRODUCT.value, PageType.CATEGORY.value}
    assert rules.primary_product_prefixes == ["/urun/"]
    assert [pack.name for pack in locales.packs] == ["tr", "en"]

def test_tables_are_cached():
    service = ConfigService()

    assert service.load_url_rules() is service.load_url_rules()

def test_environment_defaults(monkeypatch):
    for key in ("SITEMAP_BATCH_SIZE", "SITEMAP_MAX_DEPTH", "SITEMAP_USER_AGENT", "SITEMAP_DEFAULT_RETRY_AFTER"):
        monkeypatch.delenv(key, raising=False)
    service = ConfigService()

    assert service.batch_size == 10
    assert service.max_sitemap_depth == 5
    assert service.default_retry_after == 30
    assert service.user_agent == DEFAULT_USER_AGENT

def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("SITEMAP_BATCH_SIZE", "3")
    monkeypatch.setenv("SITEMAP_PAGE_TIMEOUT", "2.5")
    monkeypatch.setenv("SITEMAP_PROBE_COMMON_PAGES", "TRUE")
    service = ConfigService()

    assert service.batch_size == 3
    assert service.page_timeout == 2.5
    assert service.probe_common_pages is True

def test_required_env_var_missing(monkeypatch):
    monkeypatch.delenv("SITEMAP_SOMETHING_REQUIRED", raising=False)

    with pytest.raises(ValueError):
        ConfigService().env_var("SITEMAP_SOMETHING_REQUIRED", required=True)

def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        ConfigService(tmp_path).load_url_rules()

def test_malformed_yaml(tmp_path):
    (tmp_path / "url_rules.yaml").write_text("primary_product_prefixes: [unclosed\n", encoding="utf-8")

    with pytest.raises(ValueError):
        ConfigService(tmp_path).load_url_rules()

def test_non_mapping_yaml(tmp_path):
    (tmp_path / "locales.yaml").write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ValueError):
        ConfigService(tmp_path).load_locales()

def test_invalid_table(tmp_path):
    (tmp_path / "url_rules.yaml").write_text("static_prefixes: 12\n", encoding="utf-8")

    with pytest.raises(ValueError):
        ConfigService(tmp_path).load_url_rules()
