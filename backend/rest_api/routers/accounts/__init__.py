"""
Account routers - /user/*
"""

from .routes import router

__all__ = ["router"]
