"""
Application startup validation and logging setup.

Checks run once before the app serves requests; failures are reported in
the log and, in production, abort startup.
"""

import logging
from typing import List, Tuple

from sqlalchemy import text

from core.config import DEFAULT_JWT_SECRET, get_settings
from core.database import engine

logger = logging.getLogger(__name__)


class StartupValidator:
    """Validates application startup requirements"""

    def __init__(self):
        self.errors: List[str] = []
        self.warnings: List[str] = []

    async def check_database_connection(self) -> bool:
        """Check database connectivity"""
        try:
            async with engine.connect() as conn:
                result = await conn.execute(text("SELECT 1"))
                result.fetchone()
            logger.info("Database connection successful")
            return True
        except Exception as e:
            self.errors.append(f"Database connection failed: {str(e)}")
            return False

    def check_security_settings(self) -> bool:
        settings = get_settings()
        if settings.jwt_secret_key == DEFAULT_JWT_SECRET:
            self.warnings.append("JWT_SECRET_KEY is using the development default")
        return True

    async def run_all_checks(self) -> Tuple[bool, List[str], List[str]]:
        await self.check_database_connection()
        self.check_security_settings()
        return not self.errors, self.errors, self.warnings


async def run_startup_checks() -> Tuple[bool, List[str]]:
    """Run all startup checks, raising in production when any fails."""
    settings = get_settings()
    passed, errors, warnings = await StartupValidator().run_all_checks()

    for warning in warnings:
        logger.warning(f"Startup warning: {warning}")
    for error in errors:
        logger.error(f"Startup error: {error}")

    if not passed:
        if settings.is_production:
            raise RuntimeError("Startup checks failed: " + "; ".join(errors))
        logger.warning("Starting in development mode despite errors")
    else:
        logger.info("All startup checks passed")

    logger.info(f"Starting in {settings.environment.upper()} mode")
    return passed, warnings


def configure_startup_logging():
    """Configure logging for the application"""
    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
