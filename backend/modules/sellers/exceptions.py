# backend/modules/sellers/exceptions.py

from typing import Any

from core.exceptions import InternalServerError, NotFoundError, ValidationError

from .constants import MAX_SELLER_ID, REPORT_FAILURE_MESSAGE


class InvalidIdentifier(ValidationError):
    """Malformed seller identifier, raised before any data-store access"""

    def __init__(self, value: Any):
        super().__init__(detail="Invalid Seller ID", error_code="INVALID_SELLER_ID")
        self.value = value


class SellerNotFound(NotFoundError):
    """Public report target does not exist or is not flagged as a seller"""

    def __init__(self, seller_id: int):
        super().__init__(detail="Seller not found", error_code="SELLER_NOT_FOUND")
        self.seller_id = seller_id


class AggregationFailure(InternalServerError):
    """
    A sub-aggregation of a report failed, timed out or was aborted.

    The public message never carries the underlying error; it is kept on
    ``sub_aggregation`` and the exception chain for logging.
    """

    def __init__(self, sub_aggregation: str, reason: str = ""):
        super().__init__(
            detail=REPORT_FAILURE_MESSAGE, error_code="REPORT_GENERATION_FAILED"
        )
        self.sub_aggregation = sub_aggregation
        self.reason = reason

    def __str__(self) -> str:
        return f"{self.sub_aggregation} failed: {self.reason}" if self.reason else self.sub_aggregation


def validate_seller_id(value: Any) -> int:
    """Return ``value`` as a positive integer id or raise InvalidIdentifier."""
    if isinstance(value, bool):
        raise InvalidIdentifier(value)
    if isinstance(value, int):
        seller_id = value
    elif isinstance(value, str) and _is_id_string(value.strip()):
        seller_id = int(value.strip())
    else:
        raise InvalidIdentifier(value)

    if not 0 < seller_id <= MAX_SELLER_ID:
        raise InvalidIdentifier(value)
    return seller_id


def _is_id_string(text: str) -> bool:
    # Length check keeps int() away from arbitrarily long digit strings
    return (
        text.isascii()
        and text.isdigit()
        and len(text) <= len(str(MAX_SELLER_ID))
    )
