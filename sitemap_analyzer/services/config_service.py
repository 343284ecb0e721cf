from pathlib import Path
import yaml
import os
from typing import Any, Dict, Optional, Type, TypeVar
from dotenv import load_dotenv
from pydantic import BaseModel, ValidationError
from sitemap_analyzer.models.config_models import ExtractionConfig, UrlRules, LocaleCatalog

ModelT = TypeVar("ModelT", bound=BaseModel)

CONFIG_DIR = Path(__file__).parent.parent / "config"

DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; SitemapAnalyzer/1.0)"

class ConfigService:
    """Service for loading and managing application configuration"""

    def __init__(self, config_dir: Optional[Path] = None):
        self._config_dir = Path(config_dir) if config_dir else CONFIG_DIR
        self._cache: Dict[str, BaseModel] = {}
        self._env_loaded = False
        self._load_environment()

    def _load_environment(self):
        """Load environment variables from .env file"""
        if not self._env_loaded:
            env_path = Path(__file__).parent.parent.parent / ".env"

            if env_path.exists():
                load_dotenv(env_path)
            else:
                load_dotenv()

            self._env_loaded = True

    def env_var(self, key: str, default: Optional[str] = None, required: bool = False) -> str:
        """Get environment variable with validation"""
        value = os.getenv(key, default)

        if required and not value:
            raise ValueError(f"Required environment variable '{key}' is not set")

        return value

    @property
    def log_level(self) -> str:
        """Log level from environment"""
        return self.env_var("LOG_LEVEL", default="INFO")

    @property
    def environment(self) -> str:
        """Current environment (development, production, etc.)"""
        return self.env_var("ENVIRONMENT", default="development")

    @property
    def request_timeout(self) -> float:
        """Timeout for sitemap, robots and probe requests in seconds"""
        return float(self.env_var("SITEMAP_REQUEST_TIMEOUT", default="10"))

    @property
    def page_timeout(self) -> float:
        """Timeout for page fetches during extraction in seconds"""
        return float(self.env_var("SITEMAP_PAGE_TIMEOUT", default="15"))

    @property
    def batch_size(self) -> int:
        """Number of requests allowed in flight per batch window"""
        return int(self.env_var("SITEMAP_BATCH_SIZE", default="10"))

    @property
    def batch_delay_ms(self) -> int:
        """Pause between batch windows in milliseconds"""
        return int(self.env_var("SITEMAP_BATCH_DELAY_MS", default="500"))

    @property
    def default_retry_after(self) -> int:
        """Seconds to wait after a 429 without a usable retry-after header"""
        return int(self.env_var("SITEMAP_DEFAULT_RETRY_AFTER", default="30"))

    @property
    def max_sitemap_depth(self) -> int:
        """Deepest sitemap index nesting that is still followed"""
        return int(self.env_var("SITEMAP_MAX_DEPTH", default="5"))

    @property
    def user_agent(self) -> str:
        """User-Agent header sent with every request"""
        return self.env_var("SITEMAP_USER_AGENT", default=DEFAULT_USER_AGENT)

    @property
    def probe_common_pages(self) -> bool:
        """Whether well-known static pages are probed before classification"""
        return self.env_var("SITEMAP_PROBE_COMMON_PAGES", default="False").lower() == "true"

    @property
    def category_crawl_limit(self) -> int:
        """How many category pages are crawled when looking for product links"""
        return int(self.env_var("SITEMAP_CATEGORY_CRAWL_LIMIT", default="10"))

    def _load_yaml_model(self, filename: str, model: Type[ModelT]) -> ModelT:
        """Load a YAML table from the config directory into a pydantic model, cached"""
        if filename in self._cache:
            return self._cache[filename]

        config_path = self._config_dir / filename

        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found at {config_path}")

        with open(config_path, "r", encoding="utf-8") as file:
            try:
                raw_config: Any = yaml.safe_load(file)
            except yaml.YAMLError as e:
                raise ValueError(f"Error parsing configuration: {e}")

        if not isinstance(raw_config, dict):
            raise ValueError(f"Invalid configuration format in {filename}")

        try:
            loaded = model(**raw_config)
        except ValidationError as e:
            raise ValueError(f"Invalid configuration in {filename}: {e}")

        self._cache[filename] = loaded
        return loaded

    def load_selectors(self) -> ExtractionConfig:
        """Loads the extractor selector chains from selectors.yaml"""
        return self._load_yaml_model("selectors.yaml", ExtractionConfig)

    def load_url_rules(self) -> UrlRules:
        """Loads the classifier prefix tables from url_rules.yaml"""
        return self._load_yaml_model("url_rules.yaml", UrlRules)

    def load_locales(self) -> LocaleCatalog:
        """Loads the synthetic page copy from locales.yaml"""
        return self._load_yaml_model("locales.yaml", LocaleCatalog)

# Global config service instance
config_service = ConfigService()
