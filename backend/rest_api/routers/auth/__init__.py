"""
Authentication routers - /create, /login, /admin, /me
"""

from .routes import router

__all__ = ["router"]
