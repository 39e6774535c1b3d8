"""HTTP controllers for web API endpoints.

SECURITY: These controllers MUST NOT access private keys or sign
transactions. All operations are read-only.
"""

from hyprdeposit.web.controllers.deposits import router as deposits_router

__all__ = ["deposits_router"]
