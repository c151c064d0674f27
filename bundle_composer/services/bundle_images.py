"""Resolve bundle products into groups of component images.

For each requested parent product we ask Shopify for its bundle components
and keep the featured image of every component that has one. Lookups run in
a small thread pool; a product that is missing or whose lookup fails is
logged and left out of the result rather than failing the request.
"""
import logging
from concurrent.futures import ThreadPoolExecutor

from ..errors import BundleImageError, ProductNotFound
from ..models import ComponentImage, ParentProduct, ProductImageGroup, ResolveStats
from ..utils.validation import require_product_ids

log = logging.getLogger(__name__)


def components_with_images(parent: ParentProduct, components: list[dict]) -> list[ComponentImage]:
    """Keep only components that have a featured image.

    Components without one are common (drafts, placeholder products) and are
    dropped without logging.
    """
    images = []
    for comp in components:
        url = comp.get("featuredImageUrl")
        if not url:
            continue
        images.append(ComponentImage(
            parent_product_id=parent.product_id,
            parent_product_title=parent.product_title,
            component_product_id=comp.get("id"),
            component_product_title=comp.get("title"),
            image_url=url,
            alt_text=comp.get("featuredImageAlt"),
        ))
    return images


def _lookup(shopify, product_id: str) -> dict | None:
    try:
        product = shopify.query_bundle_components(product_id)
        if product is None:
            raise ProductNotFound(f"Product not found: {product_id}")
        return product
    except ProductNotFound:
        log.info("Product not found, skipping: %s", product_id)
    except BundleImageError as e:
        log.error("Bundle component lookup failed for %s: %s", product_id, e)
    except Exception:
        log.exception("Unexpected error looking up bundle components for %s", product_id)
    return None


def resolve_bundle_images(product_ids, shopify, max_workers: int = 4) -> tuple[list[ProductImageGroup], ResolveStats]:
    """Return image groups for ``product_ids`` in request order, plus counters.

    Raises ``ValidationError`` before any lookup if the id list is empty or
    any id is not a product GID.
    """
    product_ids = require_product_ids(product_ids)
    log.info("Resolving bundle images for %d products", len(product_ids))

    workers = max(1, min(max_workers, len(product_ids)))
    with ThreadPoolExecutor(max_workers=workers) as pool:
        products = list(pool.map(lambda pid: _lookup(shopify, pid), product_ids))

    groups: list[ProductImageGroup] = []
    found = 0
    components_found = 0
    images_found = 0
    for product in products:
        if product is None:
            continue
        found += 1
        parent = ParentProduct(product_id=product["id"], product_title=product.get("title") or "")
        components = product.get("components") or []
        components_found += len(components)

        images = components_with_images(parent, components)
        if not images:
            log.info("No component images for %s (%d components)", parent.product_id, len(components))
            continue
        images_found += len(images)
        groups.append(ProductImageGroup(
            product_id=parent.product_id,
            product_title=parent.product_title,
            component_images=tuple(images),
        ))
        log.debug("Collected %d images for %s", len(images), parent.product_id)

    stats = ResolveStats(
        requested_products=len(product_ids),
        products_found=found,
        components_found=components_found,
        images_found=images_found,
    )
    log.info("Resolved %d image groups (%d images)", len(groups), images_found)
    return groups, stats
