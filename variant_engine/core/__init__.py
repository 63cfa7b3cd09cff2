"""
Core utilities package.

- config: environment driven settings
- logger: structured logging with correlation IDs
- errors: HTTP adapter exception and handlers (imported explicitly, so the
  engine modules stay free of the web stack)
"""

from .config import config, Config
from .logger import logger

__all__ = ["config", "Config", "logger"]
