"""Utility modules for mathmark.

Provides:
- logger: get_logger and configure_logging
"""

from mathmark.utils.logger import configure_logging, get_logger

__all__ = ["configure_logging", "get_logger"]
