"""
Logging setup for applications embedding the coaching core.
"""
import logging
from typing import Optional

from .config import CoachSettings, get_settings

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(settings: Optional[CoachSettings] = None) -> None:
    """
    Configure root logging from settings.
    
    Args:
        settings: Settings to use (defaults to the cached instance)
    """
    settings = settings or get_settings()
    level = logging.DEBUG if settings.debug else getattr(logging, settings.log_level)
    
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler()]
    )
    
    logging.getLogger(__name__).debug(
        f"Logging configured (environment={settings.environment}, level={logging.getLevelName(level)})"
    )


__all__ = ['setup_logging', 'LOG_FORMAT']
