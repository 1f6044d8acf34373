"""
Catalog routers - /products, /product/*
"""

from .routes import router

__all__ = ["router"]
