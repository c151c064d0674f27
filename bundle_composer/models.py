from dataclasses import dataclass, field
from datetime import datetime, timezone


def _drop_none(d: dict) -> dict:
    return {k: v for k, v in d.items() if v is not None}


@dataclass(frozen=True)
class ParentProduct:
    product_id: str
    product_title: str


@dataclass(frozen=True)
class ComponentImage:
    parent_product_id: str
    parent_product_title: str
    component_product_id: str
    component_product_title: str
    image_url: str
    alt_text: str | None = None

    def to_dict(self) -> dict:
        return {
            "productId": self.parent_product_id,
            "productTitle": self.parent_product_title,
            "componentProductId": self.component_product_id,
            "componentProductTitle": self.component_product_title,
            "imageUrl": self.image_url,
            "altText": self.alt_text,
        }


@dataclass(frozen=True)
class ProductImageGroup:
    product_id: str
    product_title: str
    component_images: tuple[ComponentImage, ...] = ()

    @property
    def image_urls(self) -> list[str]:
        return [img.image_url for img in self.component_images]

    def to_dict(self) -> dict:
        return {
            "productId": self.product_id,
            "productTitle": self.product_title,
            "componentImages": [img.to_dict() for img in self.component_images],
            "imageUrls": self.image_urls,
        }


@dataclass(frozen=True)
class ResolveStats:
    requested_products: int = 0
    products_found: int = 0
    components_found: int = 0
    images_found: int = 0

    def to_dict(self) -> dict:
        return {
            "requestedProducts": self.requested_products,
            "productsFound": self.products_found,
            "componentsFound": self.components_found,
            "imagesFound": self.images_found,
        }


@dataclass(frozen=True)
class GridLayout:
    rows: int
    cols: int
    cell_width: int
    cell_height: int
    positions: tuple[tuple[int, int], ...]

    @property
    def canvas_width(self) -> int:
        return self.cols * self.cell_width

    @property
    def canvas_height(self) -> int:
        return self.rows * self.cell_height

    @property
    def descriptor(self) -> str:
        return f"{self.cols}x{self.rows}"

    def to_dict(self) -> dict:
        return {
            "rows": self.rows,
            "cols": self.cols,
            "cellWidth": self.cell_width,
            "cellHeight": self.cell_height,
            "canvasWidth": self.canvas_width,
            "canvasHeight": self.canvas_height,
        }


@dataclass(frozen=True)
class CompositeResult:
    combined_image_url: str
    original_count: int
    processing_method: str
    api_used: str
    layout: GridLayout | None = None
    processed_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict:
        metadata = _drop_none({
            "originalCount": self.original_count,
            "processingMethod": self.processing_method,
            "apiUsed": self.api_used,
            "layout": self.layout.to_dict() if self.layout else None,
        })
        return {
            "combinedImageUrl": self.combined_image_url,
            "processedAt": self.processed_at.isoformat().replace("+00:00", "Z"),
            "metadata": metadata,
        }


@dataclass(frozen=True)
class BatchOutcome:
    product_id: str
    product_title: str
    success: bool
    combined_image_url: str | None = None
    media_count: int | None = None
    error: str | None = None

    def to_dict(self) -> dict:
        return _drop_none({
            "productId": self.product_id,
            "productTitle": self.product_title,
            "success": self.success,
            "combinedImageUrl": self.combined_image_url,
            "mediaCount": self.media_count,
            "error": self.error,
        })
