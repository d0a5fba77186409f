"""API route modules."""

from src.api.routes.catalog import router as catalog_router
from src.api.routes.health import router as health_router
from src.api.routes.invoices import router as invoices_router
from src.api.routes.pricing import router as pricing_router
from src.api.routes.sales_documents import jobs_router, quotes_router
from src.api.routes.settings import router as settings_router

__all__ = [
    "health_router",
    "catalog_router",
    "settings_router",
    "quotes_router",
    "jobs_router",
    "invoices_router",
    "pricing_router",
]
