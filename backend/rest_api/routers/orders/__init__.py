"""
Order routers - /orders, /order/*
"""

from .routes import router

__all__ = ["router"]
