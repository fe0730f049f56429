"""
Dependency injection and service container for FastAPI application.
"""
from functools import lru_cache

from ..utils.logger import setup_logger
from .config import settings
from .services.roster_service import RosterService


# Global logger instance
_logger = None


def get_logger():
    """Get application logger instance."""
    global _logger
    if _logger is None:
        _logger = setup_logger("fastapi_app", settings.log_level)
    return _logger


@lru_cache(maxsize=1)
def get_roster_service() -> RosterService:
    """Get the roster service instance with caching."""
    return RosterService(None, get_logger())
