# backend/modules/sellers/constants.py

"""
Constants for the sellers module.
"""

from decimal import Decimal

# Time windows
SUNDAY = 6  # date.weekday() numbering
TREND_WINDOW_MONTHS = 12  # current month included

# Money
ZERO = Decimal("0")
MONEY_PRECISION = 12
MONEY_SCALE = 2
MIN_EXPENSE_AMOUNT = Decimal("0.01")

# Identifiers
MAX_SELLER_ID = 2**31 - 1  # users.id is a 32-bit integer column

# Reports
DEFAULT_RECENT_ORDERS_LIMIT = 5

# Public-safe failure message; internals are logged only
REPORT_FAILURE_MESSAGE = "Server error while generating report"
