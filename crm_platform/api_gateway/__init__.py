"""
API Gateway Module

Main FastAPI application exposing the tenant account endpoints.
"""

from .main import app

__all__ = ["app"]
