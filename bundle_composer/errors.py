"""Error taxonomy for the bundle image pipeline.

Every error carries the HTTP status a route should answer with, so route
handlers can turn any of them into a ``{"error": ...}`` body directly.
"""


class BundleImageError(Exception):
    status_code = 500

    def __init__(self, message: str, *, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> dict:
        return {"error": self.message}


class ValidationError(BundleImageError):
    """Malformed or missing input; raised before any external call."""
    status_code = 400


class InvalidInput(ValidationError):
    """A value outside the domain of a pure computation (e.g. image count <= 0)."""


class ConfigurationError(BundleImageError):
    """A required setting or credential is absent or unrecognised."""
    status_code = 500


class ProductNotFound(BundleImageError):
    """Per-product lookup miss. The resolver skips these; they never reach a client."""
    status_code = 404


class ExternalServiceError(BundleImageError):
    """Shopify or the compositing backend failed."""
    status_code = 500


class UserError(ExternalServiceError):
    """Shopify rejected a mutation's input (``userErrors``)."""
    status_code = 400
