"""
Table routers - /tables, /table/*
"""

from .routes import router

__all__ = ["router"]
