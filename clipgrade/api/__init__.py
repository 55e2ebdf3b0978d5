"""
HTTP API for clipgrade.
"""
from clipgrade.api.routes import router

__all__ = ["router"]
