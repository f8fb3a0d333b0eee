# backend/modules/sellers/routers/seller_router.py

from datetime import datetime
from typing import List, Optional
import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from core.auth import TokenData, get_current_user
from core.database import get_db, get_session_factory
from core.exceptions import AuthorizationError, ValidationError

from ..models.marketplace_models import User
from ..schemas.expense_schemas import ExpenseCreate, ExpenseResponse
from ..schemas.seller_report_schemas import PrivateReportResponse, PublicReportResponse
from ..services.expense_service import ExpenseService
from ..services.ownership_service import OwnershipService
from ..services.seller_report_service import SellerReportService
from ..services.time_windows import to_naive_utc

router = APIRouter(prefix="/sellers", tags=["Seller Reports"])
logger = logging.getLogger(__name__)


async def require_seller(
    current_user: TokenData = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> User:
    """The authenticated user, provided it is flagged as a seller."""
    seller = await OwnershipService(db).get_seller(current_user.user_id)
    if seller is None:
        logger.warning(f"User {current_user.user_id} is not a seller")
        raise AuthorizationError("Not authorized as a seller")
    return seller


def get_report_service(
    session_factory: async_sessionmaker = Depends(get_session_factory),
) -> SellerReportService:
    return SellerReportService(session_factory)


@router.get(
    "/reports",
    response_model=PrivateReportResponse,
    response_model_by_alias=True,
)
async def get_seller_report(
    fill_empty_months: bool = Query(
        False, description="Return a zero row for months without sales"
    ),
    seller: User = Depends(require_seller),
    service: SellerReportService = Depends(get_report_service),
):
    """
    Sales, expense and profit report for the logged-in seller.

    Includes all-time overview, this week's and this month's figures with
    profit, the five most recent orders containing the seller's products,
    the 12-month sales trend and expenses by category.
    """
    return await service.build_private_report(
        seller.id, fill_empty_months=fill_empty_months
    )


@router.get(
    "/{seller_id}/report",
    response_model=PublicReportResponse,
    response_model_by_alias=True,
)
async def get_public_seller_report(
    seller_id: str,
    fill_empty_months: bool = Query(
        False, description="Return a zero row for months without sales"
    ),
    service: SellerReportService = Depends(get_report_service),
):
    """
    Public sales report for any seller.

    Only all-time sales/order totals and the 12-month sales trend; no
    expense or profit data.
    """
    return await service.build_public_report(
        seller_id, fill_empty_months=fill_empty_months
    )


@router.post(
    "/expenses",
    response_model=ExpenseResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_seller_expense(
    expense_in: ExpenseCreate,
    seller: User = Depends(require_seller),
    db: AsyncSession = Depends(get_db),
):
    """Record an expense for the logged-in seller."""
    return await ExpenseService(db).add_expense(seller.id, expense_in)


@router.get("/expenses", response_model=List[ExpenseResponse])
async def list_seller_expenses(
    date_from: Optional[datetime] = Query(None, description="Incurred on or after"),
    date_to: Optional[datetime] = Query(None, description="Incurred before"),
    seller: User = Depends(require_seller),
    db: AsyncSession = Depends(get_db),
):
    """List the logged-in seller's expenses, newest first."""
    date_from = to_naive_utc(date_from) if date_from else None
    date_to = to_naive_utc(date_to) if date_to else None
    if date_from and date_to and date_to < date_from:
        raise ValidationError("date_to must be after date_from")
    return await ExpenseService(db).list_expenses(seller.id, date_from, date_to)
