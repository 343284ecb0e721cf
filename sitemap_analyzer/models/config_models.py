from pydantic import BaseModel, Field, model_validator
from typing import List, Optional, Dict, Any

class SelectorRule(BaseModel):
    """
    One step of a selector chain.

    A bare string in YAML is shorthand for a rule that reads the element text.
    When ``attrs`` is set the first non-empty attribute wins and text is only
    read if ``text`` is true. A positive ``min_length`` lets the chain move on
    when this rule matches but yields a shorter value.
    """
    selector: str
    attrs: List[str] = Field(default_factory=list)
    text: bool = True
    min_length: int = 0

    @model_validator(mode="before")
    @classmethod
    def _coerce_shorthand(cls, value: Any) -> Any:
        if isinstance(value, str):
            return {"selector": value}
        return value

class DetectionMarkers(BaseModel):
    """URL substrings and DOM markers that identify a page shape"""
    url_markers: List[str] = Field(default_factory=list)
    dom_markers: Optional[str] = None

class CommentSelectors(BaseModel):
    """Chain locating comment items plus field selectors inside each item"""
    items: List[SelectorRule] = Field(default_factory=list)
    author: List[SelectorRule] = Field(default_factory=list)
    content: List[SelectorRule] = Field(default_factory=list)
    date: List[SelectorRule] = Field(default_factory=list)

class CommonSelectors(BaseModel):
    title: List[SelectorRule] = Field(default_factory=list)
    description: List[SelectorRule] = Field(default_factory=list)
    images: List[SelectorRule] = Field(default_factory=list)
    image_limit: int = 5
    breadcrumb: List[SelectorRule] = Field(default_factory=list)

class ProductSelectors(BaseModel):
    price: List[SelectorRule] = Field(default_factory=list)
    stock: List[SelectorRule] = Field(default_factory=list)
    out_of_stock_keywords: List[str] = Field(default_factory=list)
    features: List[SelectorRule] = Field(default_factory=list)
    feature_paragraphs: List[SelectorRule] = Field(default_factory=list)
    category: List[SelectorRule] = Field(default_factory=list)
    images: List[SelectorRule] = Field(default_factory=list)
    comments: CommentSelectors = Field(default_factory=CommentSelectors)

class BlogSelectors(BaseModel):
    date: List[SelectorRule] = Field(default_factory=list)
    date_patterns: List[str] = Field(default_factory=list)
    description: List[SelectorRule] = Field(default_factory=list)
    paragraphs: List[SelectorRule] = Field(default_factory=list)
    categories: List[SelectorRule] = Field(default_factory=list)
    category_slug_pattern: Optional[str] = None
    content: List[SelectorRule] = Field(default_factory=list)
    featured_images: List[SelectorRule] = Field(default_factory=list)
    min_image_size: int = 100
    content_images: List[SelectorRule] = Field(default_factory=list)
    image_excludes: List[str] = Field(default_factory=list)
    placeholder_image: str

class CategorySelectors(BaseModel):
    slug_pattern: str
    heading: List[SelectorRule] = Field(default_factory=list)

class StaticSelectors(BaseModel):
    heading: List[SelectorRule] = Field(default_factory=list)
    content: List[SelectorRule] = Field(default_factory=list)

class ExtractionConfig(BaseModel):
    """Complete selector table loaded from selectors.yaml"""
    common: CommonSelectors
    detection: Dict[str, DetectionMarkers] = Field(default_factory=dict)
    product: ProductSelectors
    blog: BlogSelectors
    category: CategorySelectors
    static: StaticSelectors

class UrlRules(BaseModel):
    """Ordered prefix tables used by the URL classifier"""
    primary_product_prefixes: List[str] = Field(default_factory=list)
    blog_content_prefixes: List[str] = Field(default_factory=list)
    category_prefixes: List[str] = Field(default_factory=list)
    product_category_prefixes: List[str] = Field(default_factory=list)
    product_prefixes: List[str] = Field(default_factory=list)
    blog_prefixes: List[str] = Field(default_factory=list)
    blog_category_prefixes: List[str] = Field(default_factory=list)
    static_prefixes: List[str] = Field(default_factory=list)

class SyntheticPage(BaseModel):
    """Placeholder copy for one injected page"""
    slug: str
    title: str
    description: str

class LocalePack(BaseModel):
    """Detector markers plus the copy tables injected for one locale"""
    name: str
    markers: List[str] = Field(default_factory=list)
    static_prefix: str = "/"
    blog_prefix: str = "/blog/"
    category_prefix: str = "/category/"
    static_pages: List[SyntheticPage] = Field(default_factory=list)
    blog_posts: List[SyntheticPage] = Field(default_factory=list)
    blog_categories: List[str] = Field(default_factory=list)
    blog_content: str = ""
    blog_index_description: str = ""
    category_pages: List[SyntheticPage] = Field(default_factory=list)

class LocaleCatalog(BaseModel):
    """Ordered locale packs; the last one is the default"""
    packs: List[LocalePack] = Field(default_factory=list)

    def detect(self, urls: List[str]) -> LocalePack:
        """Pick the first pack whose markers appear in any of the urls."""
        if not self.packs:
            raise ValueError("Locale catalog has no packs")

        for pack in self.packs[:-1]:
            if any(marker in url for url in urls for marker in pack.markers):
                return pack

        return self.packs[-1]
