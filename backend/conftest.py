"""
Pytest configuration file for backend testing.
"""
import os
import sys
from pathlib import Path

# Settings are cached on first import, so the test environment must be in
# place before anything imports core.config.
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test_seller_analytics.db")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("LOG_LEVEL", "WARNING")

# Add the backend directory to Python path so imports work correctly
backend_dir = Path(__file__).parent
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))

# Import all models to ensure SQLAlchemy relationships work
from modules.sellers.models import marketplace_models  # noqa: E402,F401
