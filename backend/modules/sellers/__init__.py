# backend/modules/sellers/__init__.py

"""
Sellers Module - Seller Financial Analytics

Computes per-seller figures out of a shared pool of multi-seller orders.

Key Features:
- Partial-credit attribution of multi-seller orders to one seller
- Weekly, monthly and all-time sales/order figures
- 12-month sales trend
- Expense totals, expense breakdown by category and profit
- Private (owner) and public (anyone) reports

Components:
- Models: Marketplace tables the reports read from
- Services: Time windows, ownership, attribution, trend, expense, report assembly
- Schemas: Pydantic report and expense contracts
- Routers: FastAPI endpoints
- Tests: pytest suite
"""

__version__ = "1.0.0"
