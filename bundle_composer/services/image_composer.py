"""Combine several product images into one grid image.

The actual pixel work happens in an external service; this module only
uploads sources, plans the grid and builds the URL of the composite.

IMAGE_API_MODE selects the backend:

- ``demo``: no credentials, no network. Returns a Lorem Picsum placeholder
  seeded from the input URLs, so the same input always gives the same URL.
- ``cloudinary``: uploads every source by URL with the Cloudinary SDK, then
  chains overlay transformations onto the first upload.
"""
import hashlib
import logging
from concurrent.futures import ThreadPoolExecutor

import cloudinary
import cloudinary.exceptions
import cloudinary.uploader

from ..errors import ConfigurationError, ExternalServiceError
from ..models import CompositeResult, GridLayout
from ..utils.grid_layout import compute_layout
from ..utils.validation import require_image_urls

log = logging.getLogger(__name__)

IMAGE_API_MODES = ("demo", "cloudinary")


class DemoCompositor:
    name = "demo"
    api_used = "Lorem Picsum (Free Demo API)"
    width = 800
    height = 600

    def compose(self, image_urls: list[str]) -> CompositeResult:
        seed = hashlib.sha1("\n".join(image_urls).encode("utf-8")).hexdigest()[:12]
        url = f"https://picsum.photos/seed/{seed}/{self.width}/{self.height}"
        log.info("Generated demo image URL: %s", url)
        return CompositeResult(
            combined_image_url=url,
            original_count=len(image_urls),
            processing_method="demo-collage",
            api_used=self.api_used,
        )


class CloudinaryCompositor:
    name = "cloudinary"
    api_used = "Cloudinary"

    def __init__(self, cloud_name: str, api_key: str, api_secret: str,
                 folder: str = "bundle-images", timeout: float = 30, max_workers: int = 4):
        self.cloud_name = cloud_name
        self.api_key = api_key
        self.api_secret = api_secret
        self.folder = folder
        self.timeout = timeout
        self.max_workers = max_workers

    @property
    def credentials(self) -> dict:
        return {"cloud_name": self.cloud_name, "api_key": self.api_key, "api_secret": self.api_secret}

    def upload_image(self, url: str) -> str:
        """Upload a remote image by URL; returns its Cloudinary public id."""
        options = {"timeout": self.timeout, **self.credentials}
        if self.folder:
            options["folder"] = self.folder
        try:
            result = cloudinary.uploader.upload(url, **options)
        except cloudinary.exceptions.Error as e:
            raise ExternalServiceError(f"Cloudinary upload failed for {url}: {e}") from e

        public_id = (result or {}).get("public_id")
        if not public_id:
            raise ExternalServiceError(f"Cloudinary upload returned no public_id for {url}")
        return public_id

    def transformation(self, overlay_refs: list[str], layout: GridLayout) -> list[dict]:
        """Transformation chain placing the base image then each overlay on the grid.

        ``overlay_refs[i]`` goes to ``layout.positions[i + 1]``.
        """
        cell = {"width": layout.cell_width, "height": layout.cell_height, "crop": "fill"}
        canvas = {"width": layout.canvas_width, "height": layout.canvas_height, "gravity": "north_west"}
        steps = [
            dict(cell),
            {**canvas, "crop": "pad", "background": "white"},
        ]
        for ref, (x, y) in zip(overlay_refs, layout.positions[1:]):
            steps.append({**cell, "overlay": ref.replace("/", ":")})
            steps.append({"flags": "layer_apply", "gravity": "north_west", "x": x, "y": y})
        steps.append({**canvas, "crop": "crop"})
        return steps

    def compose_url(self, base_ref: str, overlay_refs: list[str], layout: GridLayout) -> str:
        return cloudinary.CloudinaryImage(base_ref).build_url(
            cloud_name=self.cloud_name,
            secure=True,
            format="jpg",
            transformation=self.transformation(overlay_refs, layout),
        )

    def compose(self, image_urls: list[str]) -> CompositeResult:
        workers = max(1, min(self.max_workers, len(image_urls)))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            refs = list(pool.map(self.upload_image, image_urls))

        layout = compute_layout(len(refs))
        url = self.compose_url(refs[0], refs[1:], layout)
        log.info("Cloudinary combined URL (%s grid): %s", layout.descriptor, url)
        return CompositeResult(
            combined_image_url=url,
            original_count=len(image_urls),
            processing_method=f"{self.name}-grid-{layout.descriptor}",
            api_used=self.api_used,
            layout=layout,
        )


class ImageComposer:
    def __init__(self, mode: str = "demo", *, cloud_name: str | None = None, api_key: str | None = None,
                 api_secret: str | None = None, folder: str = "bundle-images",
                 timeout: float = 30, max_workers: int = 4):
        self.mode = (mode or "demo").strip().lower()
        self.cloud_name = cloud_name
        self.api_key = api_key
        self.api_secret = api_secret
        self.folder = folder
        self.timeout = timeout
        self.max_workers = max_workers

    @classmethod
    def from_config(cls, config) -> "ImageComposer":
        return cls(
            config.get("IMAGE_API_MODE") or "demo",
            cloud_name=config.get("CLOUDINARY_CLOUD_NAME"),
            api_key=config.get("CLOUDINARY_API_KEY"),
            api_secret=config.get("CLOUDINARY_API_SECRET"),
            folder=config.get("CLOUDINARY_FOLDER") or "bundle-images",
            timeout=float(config.get("HTTP_TIMEOUT") or 30),
            max_workers=int(config.get("MAX_WORKERS") or 4),
        )

    def backend(self):
        if self.mode == "demo":
            return DemoCompositor()
        if self.mode == "cloudinary":
            missing = [name for name, value in (
                ("CLOUDINARY_CLOUD_NAME", self.cloud_name),
                ("CLOUDINARY_API_KEY", self.api_key),
                ("CLOUDINARY_API_SECRET", self.api_secret),
            ) if not value]
            if missing:
                raise ConfigurationError(
                    f"Cloudinary mode requires environment variables: {', '.join(missing)}"
                )
            return CloudinaryCompositor(
                self.cloud_name, self.api_key, self.api_secret,
                folder=self.folder, timeout=self.timeout, max_workers=self.max_workers,
            )
        raise ConfigurationError(
            f"Unknown IMAGE_API_MODE: {self.mode}. Valid options: {', '.join(IMAGE_API_MODES)}"
        )

    def build(self, image_urls) -> CompositeResult:
        image_urls = require_image_urls(image_urls)
        backend = self.backend()
        log.info("Processing %d images using mode: %s", len(image_urls), backend.name)
        return backend.compose(image_urls)
