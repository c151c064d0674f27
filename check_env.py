#!/usr/bin/env python
"""
Diagnostic script to check the environment before running the app or tests.
Reports which settings are present (secrets masked) and which packages import.
"""
import os
import sys

from dotenv import load_dotenv

load_dotenv()

print("=" * 60)
print("Bundle Image Composer Environment Diagnostic")
print("=" * 60)
print()

print(f"Python executable: {sys.executable}")
print(f"Python version: {sys.version}")
print()

settings = [
    ("SHOPIFY_STORE_DOMAIN", False),
    ("SHOPIFY_ADMIN_TOKEN", True),
    ("SHOPIFY_API_VERSION", False),
    ("IMAGE_API_MODE", False),
    ("CLOUDINARY_CLOUD_NAME", False),
    ("CLOUDINARY_API_KEY", True),
    ("CLOUDINARY_API_SECRET", True),
    ("HTTP_TIMEOUT", False),
    ("MAX_WORKERS", False),
]

print("Settings:")
for name, secret in settings:
    value = os.getenv(name)
    if not value:
        print(f"  ✗ {name}: not set")
    elif secret:
        print(f"  ✓ {name}: {value[:4]}...")
    else:
        print(f"  ✓ {name}: {value}")
print()

mode = (os.getenv("IMAGE_API_MODE") or "demo").strip().lower()
if mode == "cloudinary":
    missing = [n for n in ("CLOUDINARY_CLOUD_NAME", "CLOUDINARY_API_KEY", "CLOUDINARY_API_SECRET") if not os.getenv(n)]
    if missing:
        print(f"⚠ WARNING: IMAGE_API_MODE=cloudinary but missing: {', '.join(missing)}")
elif mode != "demo":
    print(f"⚠ WARNING: Unknown IMAGE_API_MODE: {mode}. Valid options: demo, cloudinary")
print()

print("Checking dependencies:")
packages = [
    ("flask", "flask"),
    ("flask-cors", "flask_cors"),
    ("cloudinary", "cloudinary"),
    ("httpx", "httpx"),
    ("python-dotenv", "dotenv"),
    ("pytest", "pytest"),
    ("pytest-flask", "pytest_flask"),
    ("pytest-mock", "pytest_mock"),
    ("respx", "respx"),
]

for package, module in packages:
    try:
        mod = __import__(module)
        version = getattr(mod, "__version__", "unknown")
        print(f"  ✓ {package}: {version}")
    except ImportError:
        print(f"  ✗ {package}: NOT INSTALLED")

print()
venv_path = os.environ.get("VIRTUAL_ENV")
if not venv_path:
    print("⚠ WARNING: No virtual environment activated")
    print("  source .venv/bin/activate")
print("=" * 60)
