from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core.config import get_settings
from core.exceptions import register_exception_handlers
from app.startup import configure_startup_logging, run_startup_checks

# ========== Seller Analytics ==========
from modules.sellers.routers.seller_router import router as seller_router

configure_startup_logging()
settings = get_settings()

app = FastAPI(
    title="Marketplace Seller Analytics API",
    description="""
    Financial analytics for marketplace sellers.

    ## Features

    * **Private seller report** - Attributed sales, orders, expenses and profit
      for this week and this month, recent orders, 12-month trend and expense
      breakdown by category
    * **Public seller report** - All-time sales/orders and 12-month trend
    * **Expenses** - Record and list seller expenses

    ## Authentication

    Private endpoints require a JWT bearer token whose subject is the
    seller's user id.
    """,
    version="1.0.0",
)

# Register exception handlers for consistent error responses
register_exception_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(seller_router)


@app.on_event("startup")
async def startup_event():
    """Validate configuration and database connectivity"""
    await run_startup_checks()


@app.get("/")
def read_root():
    return {"message": "Seller analytics backend is running"}
