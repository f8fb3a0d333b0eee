# backend/modules/sellers/services/ownership_service.py

import logging
from typing import FrozenSet

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.marketplace_models import Product, User

logger = logging.getLogger(__name__)


class OwnershipService:
    """Resolves which products belong to a seller and whether a user is a seller"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_owned_product_ids(self, seller_id: int) -> FrozenSet[int]:
        """
        Product ids owned by ``seller_id``.

        An empty set is a valid answer: a seller without products gets an
        all-zero report.
        """
        result = await self.db.execute(
            select(Product.id).where(Product.user_id == seller_id)
        )
        product_ids = frozenset(result.scalars().all())
        if not product_ids:
            logger.info(f"Seller {seller_id} owns no products")
        return product_ids

    async def is_seller(self, user_id: int) -> bool:
        return await self.get_seller(user_id) is not None

    async def get_seller(self, user_id: int):
        """The user row when it is flagged as a seller, else None."""
        result = await self.db.execute(
            select(User).where(User.id == user_id, User.is_seller.is_(True))
        )
        return result.scalar_one_or_none()
