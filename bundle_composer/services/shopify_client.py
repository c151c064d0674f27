import logging

import httpx

from ..errors import ConfigurationError, ExternalServiceError, UserError

log = logging.getLogger(__name__)

BUNDLE_COMPONENTS_QUERY = """
query GetBundleComponentImages($productId: ID!) {
  product(id: $productId) {
    id
    title
    bundleComponents(first: 10) {
      edges {
        node {
          componentProduct {
            id
            title
            featuredMedia {
              ... on MediaImage {
                image {
                  url
                  altText
                }
              }
            }
          }
        }
      }
    }
  }
}
"""

UPDATE_PRODUCT_MEDIA_MUTATION = """
mutation UpdateProductMedia($productId: ID!, $imageUrl: String!, $altText: String!) {
  productUpdate(
    product: { id: $productId },
    media: [{
      originalSource: $imageUrl,
      alt: $altText,
      mediaContentType: IMAGE
    }]
  ) {
    product {
      id
      media(first: 5) {
        nodes {
          alt
          mediaContentType
          preview {
            status
          }
        }
      }
    }
    userErrors {
      field
      message
    }
  }
}
"""


class ShopifyClient:
    def __init__(self, store_domain: str | None, admin_token: str | None,
                 api_version: str = "2024-10", timeout: float = 30):
        self.domain = store_domain
        self.token = admin_token
        self.api_version = api_version
        self.timeout = timeout
        self.base = f"https://{self.domain}/admin/api/{self.api_version}"
        self.headers = {
            "X-Shopify-Access-Token": self.token or "",
            "Content-Type": "application/json",
        }

    def _require_credentials(self):
        missing = [name for name, value in (
            ("SHOPIFY_STORE_DOMAIN", self.domain),
            ("SHOPIFY_ADMIN_TOKEN", self.token),
        ) if not value]
        if missing:
            raise ConfigurationError(f"Missing Shopify configuration: {', '.join(missing)}")

    def _graphql(self, query: str, variables: dict) -> dict:
        self._require_credentials()
        url = f"{self.base}/graphql.json"
        payload = {"query": query, "variables": variables}
        try:
            with httpx.Client(timeout=self.timeout) as client:
                r = client.post(url, headers=self.headers, json=payload)
                r.raise_for_status()
                body = r.json()
        except httpx.HTTPStatusError as e:
            raise ExternalServiceError(f"Shopify API error: {e.response.status_code} (body: {e.response.text})") from e
        except httpx.HTTPError as e:
            raise ExternalServiceError(f"Shopify API request failed: {e}") from e
        except ValueError as e:
            raise ExternalServiceError(f"Shopify API returned a non-JSON response: {e}") from e
        if not isinstance(body, dict):
            raise ExternalServiceError("Shopify API returned an unexpected response body")
        if body.get("errors"):
            messages = ", ".join(e.get("message", "Unknown GraphQL error") for e in body["errors"])
            raise ExternalServiceError(messages)
        return body.get("data") or {}

    def query_bundle_components(self, product_id: str) -> dict | None:
        """Fetch a product's title and its bundle component products.

        Returns ``None`` when Shopify has no product with that id. Each
        component is flattened to ``{id, title, featuredImageUrl, featuredImageAlt}``;
        the image fields are ``None`` when the component has no featured image.
        """
        data = self._graphql(BUNDLE_COMPONENTS_QUERY, {"productId": product_id})
        product = data.get("product")
        if not product:
            return None

        components = []
        for edge in ((product.get("bundleComponents") or {}).get("edges") or []):
            comp = ((edge or {}).get("node") or {}).get("componentProduct") or {}
            image = (comp.get("featuredMedia") or {}).get("image") or {}
            components.append({
                "id": comp.get("id"),
                "title": comp.get("title"),
                "featuredImageUrl": image.get("url"),
                "featuredImageAlt": image.get("altText"),
            })
        return {"id": product.get("id"), "title": product.get("title"), "components": components}

    def set_product_image(self, product_id: str, image_url: str, alt_text: str) -> dict:
        """Attach ``image_url`` to the product's media; returns ``{"mediaCount": n}``."""
        data = self._graphql(
            UPDATE_PRODUCT_MEDIA_MUTATION,
            {"productId": product_id, "imageUrl": image_url, "altText": alt_text},
        )
        payload = data.get("productUpdate") or {}
        user_errors = payload.get("userErrors") or []
        if user_errors:
            msg = ", ".join(e.get("message", "Unknown user error") for e in user_errors)
            raise UserError(f"Product update failed: {msg}")

        product = payload.get("product")
        if not product:
            raise ExternalServiceError("Product update returned no product data")

        media_count = len(((product.get("media") or {}).get("nodes")) or [])
        log.info("Updated product image for %s (media count %d)", product_id, media_count)
        return {"mediaCount": media_count}
