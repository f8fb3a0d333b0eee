# backend/modules/sellers/models/marketplace_models.py

from sqlalchemy import (
    Column, Integer, String, ForeignKey, DateTime, Numeric, Boolean, Text,
    Index, CheckConstraint, Enum as SQLEnum
)
from sqlalchemy.orm import relationship
from enum import Enum

from core.database import Base
from core.mixins import TimestampMixin


class OrderStatus(str, Enum):
    """Fulfilment status of an order"""
    PENDING = "Pending"
    PROCESSING = "Processing"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"
    REFUNDED = "Refunded"


class ExpenseCategory(str, Enum):
    """Fixed set of seller expense categories"""
    MATERIALS = "materials"
    TOOLS = "tools"
    PACKAGING = "packaging"
    SHIPPING = "shipping"
    MARKETING = "marketing"
    UTILITIES = "utilities"
    RENT = "rent"
    LABOR = "labor"
    MAINTENANCE = "maintenance"
    FEES = "fees"
    MISCELLANEOUS = "miscellaneous"


class ExpenseType(str, Enum):
    FIXED = "fixed"
    VARIABLE = "variable"


class User(Base, TimestampMixin):
    """Identity source. Only the seller flag and contact fields are read here."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    is_seller = Column(Boolean, nullable=False, default=False, index=True)
    is_admin = Column(Boolean, nullable=False, default=False)

    products = relationship("Product", back_populates="seller")
    orders = relationship("Order", back_populates="buyer")
    expenses = relationship("Expense", back_populates="seller")


class Product(Base, TimestampMixin):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    price = Column(Numeric(12, 2), nullable=False, default=0)

    seller = relationship("User", back_populates="products")
    order_items = relationship("OrderItem", back_populates="product")


class Order(Base, TimestampMixin):
    """
    A buyer's order. May contain products of several sellers.

    ``total_price`` covers every line item plus tax and shipping; per-seller
    figures are derived from the line items, never from this total.
    ``created_at`` is the ordered-at timestamp used for report windows.
    """
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    tax_price = Column(Numeric(12, 2), nullable=False, default=0)
    shipping_price = Column(Numeric(12, 2), nullable=False, default=0)
    total_price = Column(Numeric(12, 2), nullable=False, default=0)

    order_status = Column(
        SQLEnum(OrderStatus, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=OrderStatus.PENDING,
    )
    is_paid = Column(Boolean, nullable=False, default=False)
    paid_at = Column(DateTime, nullable=True)
    is_delivered = Column(Boolean, nullable=False, default=False)
    delivered_at = Column(DateTime, nullable=True)

    buyer = relationship("User", back_populates="orders")
    items = relationship(
        "OrderItem", back_populates="order", order_by="OrderItem.id"
    )


class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    quantity = Column(Integer, nullable=False)
    price = Column(Numeric(12, 2), nullable=False)  # unit price at order time

    order = relationship("Order", back_populates="items")
    product = relationship("Product", back_populates="order_items")

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_order_items_quantity_positive"),
        CheckConstraint("price >= 0", name="ck_order_items_price_non_negative"),
    )


class Expense(Base, TimestampMixin):
    __tablename__ = "expenses"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    amount = Column(Numeric(12, 2), nullable=False)
    category = Column(
        SQLEnum(ExpenseCategory, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=ExpenseCategory.MISCELLANEOUS,
    )
    type = Column(
        SQLEnum(ExpenseType, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=ExpenseType.VARIABLE,
    )
    incurred_at = Column(DateTime, nullable=False)

    seller = relationship("User", back_populates="expenses")

    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_expenses_amount_positive"),
        Index("idx_expenses_user_incurred_at", "user_id", "incurred_at"),
    )
