"""
Shared test fixtures and configuration for Bundle Image Composer tests.
"""
import json
from pathlib import Path

import pytest
from flask import Flask
from flask.testing import FlaskClient

from bundle_composer import create_app
from bundle_composer.config import TestConfig
from bundle_composer.models import ComponentImage, ProductImageGroup


# Test fixtures directory
FIXTURES_DIR = Path(__file__).parent / "fixtures"
API_RESPONSES_DIR = FIXTURES_DIR / "api_responses"


@pytest.fixture(scope="session")
def app() -> Flask:
    """Create and configure a test Flask application instance."""
    app = create_app(TestConfig)
    app.config.update({
        "TESTING": True,
        "MAX_WORKERS": 2,
    })
    yield app


@pytest.fixture
def client(app: Flask) -> FlaskClient:
    """Create a Flask test client."""
    return app.test_client()


@pytest.fixture
def mock_env_vars(monkeypatch):
    """Set up mock environment variables for testing."""
    env_vars = {
        "FLASK_ENV": "testing",
        "SHOPIFY_STORE_DOMAIN": "test-store.myshopify.com",
        "SHOPIFY_ADMIN_TOKEN": "test_shopify_token",
        "SHOPIFY_API_VERSION": "2024-10",
        "IMAGE_API_MODE": "cloudinary",
        "CLOUDINARY_CLOUD_NAME": "demo-cloud",
        "CLOUDINARY_API_KEY": "test_cloudinary_key",
        "CLOUDINARY_API_SECRET": "test_cloudinary_secret",
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    return env_vars


@pytest.fixture
def shopify_client(mock_env_vars):
    """Create a ShopifyClient instance for testing."""
    from bundle_composer.services.shopify_client import ShopifyClient
    return ShopifyClient(
        store_domain=mock_env_vars["SHOPIFY_STORE_DOMAIN"],
        admin_token=mock_env_vars["SHOPIFY_ADMIN_TOKEN"],
        api_version=mock_env_vars["SHOPIFY_API_VERSION"],
        timeout=5,
    )


@pytest.fixture
def sample_bundle_components() -> dict:
    """GraphQL response for a bundle with three components, one without an image."""
    return load_fixture("bundle_components.json")


@pytest.fixture
def sample_product_update() -> dict:
    """GraphQL productUpdate response reporting three media items."""
    return load_fixture("product_update.json")


@pytest.fixture
def sample_product_update_user_errors() -> dict:
    """GraphQL productUpdate response rejected with userErrors."""
    return load_fixture("product_update_user_errors.json")


# Helper functions for tests

def load_fixture(filename: str) -> dict:
    """Load a JSON fixture file."""
    fixture_path = API_RESPONSES_DIR / filename
    with open(fixture_path) as f:
        return json.load(f)


def _make_group(product_num: int, title: str, image_count: int = 2) -> ProductImageGroup:
    """Build a ProductImageGroup with ``image_count`` component images."""
    product_id = f"gid://shopify/Product/{product_num}"
    images = tuple(
        ComponentImage(
            parent_product_id=product_id,
            parent_product_title=title,
            component_product_id=f"gid://shopify/Product/{product_num * 100 + i}",
            component_product_title=f"{title} part {i}",
            image_url=f"https://cdn.shopify.com/files/{product_num}-{i}.jpg",
        )
        for i in range(image_count)
    )
    return ProductImageGroup(product_id=product_id, product_title=title, component_images=images)


def _component(num: int, title: str, image_url: str | None = None, alt: str | None = None) -> dict:
    """A flattened component as returned by ShopifyClient.query_bundle_components."""
    return {
        "id": f"gid://shopify/Product/{num}",
        "title": title,
        "featuredImageUrl": image_url,
        "featuredImageAlt": alt,
    }


@pytest.fixture
def make_group():
    """Factory fixture for ProductImageGroup instances."""
    return _make_group


@pytest.fixture
def component():
    """Factory fixture for flattened component dicts."""
    return _component


@pytest.fixture
def sample_cloudinary_upload() -> dict:
    """Cloudinary upload API response for a single image."""
    return load_fixture("cloudinary_upload.json")


@pytest.fixture
def sample_product_not_found() -> dict:
    """GraphQL response for an unknown product id."""
    return load_fixture("product_not_found.json")
