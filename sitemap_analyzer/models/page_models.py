from typing import List, Optional, Dict, Union, Any, Literal
from typing_extensions import Annotated
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel
from enum import Enum
from datetime import datetime

class PageType(str, Enum):
    """Content category reported for every page record"""
    PRODUCT = "product"
    CATEGORY = "category"
    BLOG = "blog"
    STATIC = "static"
    OTHERS = "others"

class PageComment(BaseModel):
    """A single product review or comment"""
    author: str = ""
    content: str = ""
    date: str = ""

class ProductDetails(BaseModel):
    """Product-specific fields"""
    kind: Literal["product"] = "product"
    price: Optional[str] = None
    stock_status: str = "Available"
    in_stock: bool = True
    features: List[str] = Field(default_factory=list)
    category: str = "Products"
    comments: List[PageComment] = Field(default_factory=list)

class BlogDetails(BaseModel):
    """Blog post fields"""
    kind: Literal["blog"] = "blog"
    date: str
    blog_categories: List[str] = Field(default_factory=lambda: ["Uncategorized"])
    blog_content: Optional[str] = None

class CategoryDetails(BaseModel):
    """Category listing fields"""
    kind: Literal["category"] = "category"
    category: str

class StaticDetails(BaseModel):
    """Static pages carry no extra fields"""
    kind: Literal["static"] = "static"

PageDetails = Annotated[
    Union[ProductDetails, BlogDetails, CategoryDetails, StaticDetails],
    Field(discriminator="kind"),
]

class PageRecord(BaseModel):
    """
    One record per discovered URL.

    The envelope holds the fields every page has; ``details`` carries the
    payload of the page shape that was extracted, discriminated by ``kind``.
    Records of type ``others`` carry no payload.
    Records of type ``others`` carry no payload.
    """
    url: str
    title: str
    description: str = ""
    type: PageType
    timestamp: datetime = Field(default_factory=datetime.now)
    images: List[str] = Field(default_factory=list)
    breadcrumb: List[str] = Field(default_factory=list)
    structured_data: Optional[Any] = None
    error: Optional[str] = None
    details: Optional[PageDetails] = None

    def to_flat_dict(self) -> Dict[str, Any]:
        """Flatten envelope and payload into the camelCase shape the UI consumes."""
        flat = self.model_dump(mode="json", exclude={"details"}, exclude_none=True)
        flat["structuredData"] = flat.pop("structured_data", None) or {}
        if self.details is not None:
            payload = self.details.model_dump(mode="json", exclude={"kind"}, exclude_none=True)
            for key, value in payload.items():
                flat[to_camel(key)] = value
        return flat

class CategoryBuckets(BaseModel):
    """Ordered, de-duplicated URLs per category for one pipeline run"""
    product: List[str] = Field(default_factory=list)
    category: List[str] = Field(default_factory=list)
    blog: List[str] = Field(default_factory=list)
    static: List[str] = Field(default_factory=list)
    others: List[str] = Field(default_factory=list)

    def add(self, page_type: PageType, url: str) -> bool:
        """Append url to its bucket unless already present anywhere."""
        if self.contains(url):
            return False
        getattr(self, page_type.value).append(url)
        return True

    def urls(self, page_type: PageType) -> List[str]:
        return getattr(self, page_type.value)

    def contains(self, url: str) -> bool:
        return any(url in self.urls(page_type) for page_type in PageType)

    def all_urls(self) -> List[str]:
        return [url for page_type in PageType for url in self.urls(page_type)]

    def counts(self) -> Dict[str, int]:
        return {page_type.value: len(self.urls(page_type)) for page_type in PageType}

class PipelineStats(BaseModel):
    """Record counts by type; total always equals the sum of the categories"""
    total: int = 0
    product: int = 0
    category: int = 0
    blog: int = 0
    static: int = 0
    others: int = 0

    @classmethod
    def from_records(cls, records: Dict[str, PageRecord]) -> "PipelineStats":
        counts = {page_type.value: 0 for page_type in PageType}
        for record in records.values():
            counts[record.type.value] += 1
        return cls(total=len(records), **counts)

class PipelineResult(BaseModel):
    """Keyed page records plus summary statistics for one run"""
    records: Dict[str, PageRecord] = Field(default_factory=dict)
    stats: PipelineStats = Field(default_factory=PipelineStats)
    generated_at: datetime = Field(default_factory=datetime.now)

    @classmethod
    def from_records(cls, records: Dict[str, PageRecord]) -> "PipelineResult":
        return cls(records=records, stats=PipelineStats.from_records(records))

    def to_array(self) -> List[Dict[str, Any]]:
        """Flat array form of the records, in insertion order."""
        return [record.to_flat_dict() for record in self.records.values()]

    def categorized(self) -> Dict[str, List[str]]:
        """URLs grouped by their final record type."""
        grouped: Dict[str, List[str]] = {page_type.value: [] for page_type in PageType}
        for url, record in self.records.items():
            grouped[record.type.value].append(url)
        return grouped
