# bundle_composer/extensions.py
import os

from dotenv import load_dotenv
from flask_cors import CORS

from .services.image_composer import ImageComposer
from .services.shopify_client import ShopifyClient

# Load env just once here
load_dotenv()

# The admin extension calls the API from the Shopify admin origin
cors = CORS()

shopify_client = ShopifyClient(
    store_domain=os.getenv("SHOPIFY_STORE_DOMAIN"),
    admin_token=os.getenv("SHOPIFY_ADMIN_TOKEN"),
    api_version=os.getenv("SHOPIFY_API_VERSION", "2024-10"),
    timeout=float(os.getenv("HTTP_TIMEOUT", "30")),
)

# Mode and credentials are checked on each build, not here, so a missing
# Cloudinary key only fails the compose endpoints.
image_composer = ImageComposer.from_config(os.environ)
