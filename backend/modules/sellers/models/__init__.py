# backend/modules/sellers/models/__init__.py

from .marketplace_models import (
    User,
    Product,
    Order,
    OrderItem,
    Expense,
    OrderStatus,
    ExpenseCategory,
    ExpenseType,
)

__all__ = [
    "User",
    "Product",
    "Order",
    "OrderItem",
    "Expense",
    "OrderStatus",
    "ExpenseCategory",
    "ExpenseType",
]
