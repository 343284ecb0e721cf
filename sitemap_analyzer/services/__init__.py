# ==============================================================================
# services/__init__.py — Service layer
# ==============================================================================
# Purpose: Configuration, coverage and orchestration services
# ==============================================================================

from .config_service import config_service, ConfigService
from .coverage_service import CoverageService, create_static_page_data
from .analysis_service import SiteAnalysisService, apply_url_cap

__all__ = [
    'config_service',
    'ConfigService',
    'CoverageService',
    'create_static_page_data',
    'SiteAnalysisService',
    'apply_url_cap',
]
