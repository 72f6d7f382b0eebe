"""
Shared Services Module

Cross-cutting services used across the platform.
"""

from .logging_config import setup_logging

__all__ = ["setup_logging"]
