# ==============================================================================
# __init__.py — Model layer exports
# ==============================================================================
# Purpose: Export Pydantic models for easy importing
# Sections: Imports, Public exports
# ==============================================================================

from .page_models import (
    PageType,
    PageComment,
    ProductDetails,
    BlogDetails,
    CategoryDetails,
    StaticDetails,
    PageRecord,
    CategoryBuckets,
    PipelineStats,
    PipelineResult
)

from .config_models import (
    SelectorRule,
    ExtractionConfig,
    UrlRules,
    SyntheticPage,
    LocalePack,
    LocaleCatalog
)

# ==============================================================================
# Public exports
# ==============================================================================
__all__ = [
    # Page Models
    "PageType",
    "PageComment",
    "ProductDetails",
    "BlogDetails",
    "CategoryDetails",
    "StaticDetails",
    "PageRecord",
    "CategoryBuckets",
    "PipelineStats",
    "PipelineResult",

    # Config Models
    "SelectorRule",
    "ExtractionConfig",
    "UrlRules",
    "SyntheticPage",
    "LocalePack",
    "LocaleCatalog"
]
