from flask import Blueprint, request, jsonify, current_app

from ..errors import BundleImageError, ValidationError
from ..extensions import shopify_client as shopify, image_composer
from ..services.bundle_images import resolve_bundle_images
from ..services.bundle_updater import BundleImageUpdater
from ..utils.validation import is_absolute_url, is_product_gid

bp = Blueprint("bundle_api", __name__)


def _to_bool(param, default: bool = False):
    if param is None:
        return default
    if isinstance(param, bool):
        return param
    if isinstance(param, (int, float)):
        return param != 0
    if isinstance(param, str):
        return param.strip().lower() in ("1", "true", "yes", "y", "on")
    return False


def _json_body() -> dict:
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    return body


def _health(message: str):
    current_app.logger.debug("GET %s", request.path)
    return jsonify({"status": "ok", "message": message})


@bp.errorhandler(BundleImageError)
def _bundle_error(e: BundleImageError):
    current_app.logger.warning("%s %s failed: %s", request.method, request.path, e)
    return jsonify(e.to_dict()), e.status_code


# -----------------------------
# Bundle component images
# -----------------------------
@bp.get("/fetch-bundle-images")
def fetch_bundle_images_health():
    return _health("Fetch bundle images API ready")


@bp.post("/fetch-bundle-images")
def fetch_bundle_images():
    """Return featured images of the bundle components of each requested product."""
    body = _json_body()
    try:
        groups, stats = resolve_bundle_images(
            body.get("productIds"), shopify, max_workers=current_app.config.get("MAX_WORKERS", 4)
        )
    except BundleImageError:
        raise
    except Exception as e:
        current_app.logger.exception("Fetch bundle images failed")
        return jsonify({"error": str(e)}), 500

    return jsonify({
        "products": [g.to_dict() for g in groups],
        "metadata": stats.to_dict(),
    })


# -----------------------------
# Image compositing
# -----------------------------
@bp.get("/image-process")
def image_process_health():
    return _health("Image processing API ready")


@bp.post("/image-process")
def image_process():
    body = _json_body()
    try:
        result = image_composer.build(body.get("imageUrls"))
    except BundleImageError:
        raise
    except Exception as e:
        current_app.logger.exception("Image processing failed")
        return jsonify({"error": str(e)}), 500
    return jsonify(result.to_dict())


# -----------------------------
# Write a composite back to a product
# -----------------------------
@bp.get("/update-product-image")
def update_product_image_health():
    return _health("Update product image API ready")


@bp.post("/update-product-image")
def update_product_image():
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        body = {}
    product_id = body.get("productId")
    image_url = body.get("imageUrl")
    alt_text = body.get("altText")

    def _fail(message: str, status: int):
        return jsonify({"productId": product_id or "unknown", "success": False, "error": message}), status

    if not product_id or not image_url or not alt_text:
        return _fail("Missing required fields: productId, imageUrl, or altText", 400)
    if not is_product_gid(product_id):
        return _fail(f"Invalid product ID format: {product_id}", 400)
    if not is_absolute_url(image_url):
        return _fail(f"Invalid image URL format: {image_url}", 400)

    current_app.logger.info("Updating product image for %s", product_id)
    try:
        result = shopify.set_product_image(product_id, image_url, alt_text)
    except BundleImageError as e:
        current_app.logger.error("Product image update failed for %s: %s", product_id, e)
        return _fail(str(e), e.status_code)
    except Exception as e:
        current_app.logger.exception("Product image update failed for %s", product_id)
        return _fail(str(e), 500)

    return jsonify({"productId": product_id, "success": True, "mediaCount": result["mediaCount"]})


# -----------------------------
# Full pipeline: resolve -> composite -> (optional) write back
# -----------------------------
@bp.get("/process-bundles")
def process_bundles_health():
    return _health("Process bundles API ready")


@bp.post("/process-bundles")
def process_bundles():
    """Run the whole bundle image pipeline for the selected products.

    Body: ``{"productIds": [...], "writeBack": true}``. With ``writeBack``
    false the composites are built but not saved to the products.
    """
    body = _json_body()
    write_back = _to_bool(body.get("writeBack"), default=True)
    max_workers = current_app.config.get("MAX_WORKERS", 4)

    progress = []

    def _record(p):
        progress.append(p.to_dict())
        current_app.logger.info("[%s] %d/%d %s", p.phase.value, p.completed, p.total, p.step)

    try:
        groups, stats = resolve_bundle_images(body.get("productIds"), shopify, max_workers=max_workers)
        updater = BundleImageUpdater(image_composer, shopify, write_back=write_back, on_progress=_record)
        outcomes = updater.run(groups)
    except BundleImageError:
        raise
    except Exception as e:
        current_app.logger.exception("Process bundles failed")
        return jsonify({"error": str(e)}), 500

    succeeded = sum(1 for o in outcomes if o.success)
    metadata = stats.to_dict()
    metadata.update({
        "writeBack": write_back,
        "processed": len(outcomes),
        "succeeded": succeeded,
        "failed": len(outcomes) - succeeded,
    })
    return jsonify({
        "results": [o.to_dict() for o in outcomes],
        "metadata": metadata,
        "progress": progress,
    })
