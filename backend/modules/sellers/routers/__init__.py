# backend/modules/sellers/routers/__init__.py

from .seller_router import router as seller_router

__all__ = ["seller_router"]
