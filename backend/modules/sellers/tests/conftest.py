"""
Test configuration and fixtures for the sellers module.

Every test gets its own file-backed SQLite database so concurrent report
sub-aggregations can open independent sessions against the same data.
"""

from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional, Sequence, Tuple

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from core.auth import create_access_token
from core.database import Base, get_db, get_session_factory
from modules.sellers.models import (
    Expense,
    ExpenseCategory,
    ExpenseType,
    Order,
    OrderItem,
    OrderStatus,
    Product,
    User,
)

# Thursday; the week (starting Sunday) began on 2026-10-18
NOW = datetime(2026, 10, 22, 15, 0)


class MarketplaceSeeder:
    """Creates marketplace rows with explicit timestamps."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self._emails = 0

    async def user(self, name: str = "User", is_seller: bool = False) -> User:
        self._emails += 1
        user = User(
            name=name,
            email=f"{name.lower().replace(' ', '.')}.{self._emails}@example.com",
            is_seller=is_seller,
        )
        self.db.add(user)
        await self.db.commit()
        await self.db.refresh(user)
        return user

    async def seller(self, name: str = "Seller") -> User:
        return await self.user(name, is_seller=True)

    async def product(self, seller: User, name: str, price) -> Product:
        product = Product(user_id=seller.id, name=name, price=Decimal(str(price)))
        self.db.add(product)
        await self.db.commit()
        await self.db.refresh(product)
        return product

    async def order(
        self,
        buyer: User,
        created_at: datetime,
        lines: Sequence[Tuple[Product, int]],
        tax_price: Decimal = Decimal("0"),
        shipping_price: Decimal = Decimal("0"),
        status: OrderStatus = OrderStatus.PENDING,
    ) -> Order:
        """Place an order of ``(product, quantity)`` lines at the product's price."""
        items_price = sum(
            (Decimal(str(product.price)) * quantity for product, quantity in lines),
            Decimal("0"),
        )
        order = Order(
            user_id=buyer.id,
            tax_price=tax_price,
            shipping_price=shipping_price,
            total_price=items_price + tax_price + shipping_price,
            order_status=status,
            created_at=created_at,
            updated_at=created_at,
        )
        self.db.add(order)
        await self.db.flush()
        for product, quantity in lines:
            self.db.add(
                OrderItem(
                    order_id=order.id,
                    product_id=product.id,
                    name=product.name,
                    quantity=quantity,
                    price=Decimal(str(product.price)),
                )
            )
        await self.db.commit()
        await self.db.refresh(order)
        return order

    async def expense(
        self,
        seller: User,
        amount,
        incurred_at: datetime,
        category: ExpenseCategory = ExpenseCategory.MISCELLANEOUS,
        title: str = "Expense",
        expense_type: ExpenseType = ExpenseType.VARIABLE,
    ) -> Expense:
        expense = Expense(
            user_id=seller.id,
            title=title,
            amount=Decimal(str(amount)),
            category=category,
            type=expense_type,
            incurred_at=incurred_at,
        )
        self.db.add(expense)
        await self.db.commit()
        await self.db.refresh(expense)
        return expense


def product_ids(products: Iterable[Product]) -> frozenset:
    return frozenset(product.id for product in products)


def auth_headers(user: User, email: Optional[str] = None) -> dict:
    token = create_access_token({"sub": user.id, "email": email or user.email})
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def engine(tmp_path):
    """Fresh schema in a per-test SQLite file."""
    test_engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'sellers.db'}",
        connect_args={"check_same_thread": False},
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(
        bind=engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )


@pytest_asyncio.fixture
async def db_session(session_factory):
    """Create a fresh database session for each test."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def seed(db_session):
    return MarketplaceSeeder(db_session)


@pytest_asyncio.fixture
async def marketplace(seed):
    """
    Two sellers sharing a buyer's orders.

    Seller S owns P (100) and Q (30); seller T owns R (70). O1 three days
    before NOW holds [P x2, R x1], O2 forty days before NOW holds [P x1].
    """
    seller = await seed.seller("Seller S")
    other = await seed.seller("Seller T")
    buyer = await seed.user("Buyer B")

    p = await seed.product(seller, "P", "100.00")
    q = await seed.product(seller, "Q", "30.00")
    r = await seed.product(other, "R", "70.00")

    o1 = await seed.order(
        buyer,
        datetime(2026, 10, 19, 10, 0),
        [(p, 2), (r, 1)],
        tax_price=Decimal("27.00"),
        shipping_price=Decimal("10.00"),
    )
    o2 = await seed.order(buyer, datetime(2026, 9, 12, 9, 30), [(p, 1)])

    return {
        "seller": seller,
        "other": other,
        "buyer": buyer,
        "products": {"P": p, "Q": q, "R": r},
        "orders": {"O1": o1, "O2": o2},
    }


@pytest_asyncio.fixture
async def async_client(session_factory):
    """Async client against the app with the test database wired in."""
    from app.main import app

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: session_factory

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as client:
        yield client

    app.dependency_overrides.clear()
