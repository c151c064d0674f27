import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()


class Config:
    BASE_DIR = Path(__file__).resolve().parent.parent
    SHOPIFY_STORE_DOMAIN = os.getenv("SHOPIFY_STORE_DOMAIN")
    SHOPIFY_ADMIN_TOKEN = os.getenv("SHOPIFY_ADMIN_TOKEN")
    SHOPIFY_API_VERSION = os.getenv("SHOPIFY_API_VERSION", "2024-10")

    # demo | cloudinary
    IMAGE_API_MODE = os.getenv("IMAGE_API_MODE", "demo")
    CLOUDINARY_CLOUD_NAME = os.getenv("CLOUDINARY_CLOUD_NAME")
    CLOUDINARY_API_KEY = os.getenv("CLOUDINARY_API_KEY")
    CLOUDINARY_API_SECRET = os.getenv("CLOUDINARY_API_SECRET")
    CLOUDINARY_FOLDER = os.getenv("CLOUDINARY_FOLDER", "bundle-images")

    HTTP_TIMEOUT = float(os.getenv("HTTP_TIMEOUT", "30"))
    MAX_WORKERS = int(os.getenv("MAX_WORKERS", "4"))
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    ENVIRONMENT = os.getenv("FLASK_ENV", "development")


class DevConfig(Config):
    DEBUG = True


class ProdConfig(Config):
    DEBUG = False
    ENVIRONMENT = "production"


class TestConfig(Config):
    TESTING = True
    IMAGE_API_MODE = "demo"
