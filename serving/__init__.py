"""
Footprint Serving module.

Provides:
- FastAPI app factory for assessments, trend predictions and retraining
- Environment-driven settings
- structlog configuration
"""

from serving.api import create_app
from serving.settings import Settings

__all__ = ["create_app", "Settings"]
