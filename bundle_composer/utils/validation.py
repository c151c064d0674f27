import re
from urllib.parse import urlparse

from ..errors import ValidationError

PRODUCT_GID_PATTERN = re.compile(r"^gid://shopify/Product/\d+$")


def is_product_gid(value) -> bool:
    return isinstance(value, str) and bool(PRODUCT_GID_PATTERN.fullmatch(value))


def is_absolute_url(value) -> bool:
    if not isinstance(value, str) or not value.strip():
        return False
    parsed = urlparse(value)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def require_product_ids(product_ids) -> list[str]:
    if not isinstance(product_ids, list):
        raise ValidationError("productIds must be an array")
    if not product_ids:
        raise ValidationError("productIds array is empty")
    for pid in product_ids:
        if not is_product_gid(pid):
            raise ValidationError(f"Invalid product ID format: {pid}")
    return list(product_ids)


def require_image_urls(image_urls) -> list[str]:
    if not isinstance(image_urls, list):
        raise ValidationError("imageUrls must be an array")
    if not image_urls:
        raise ValidationError("No image URLs provided")
    for url in image_urls:
        if not is_absolute_url(url):
            raise ValidationError(f"Invalid URL format: {url}")
    return list(image_urls)
