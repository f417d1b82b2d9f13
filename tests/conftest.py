"""Shared test fixtures.

Each test gets its own in-memory SQLite database and an app built around it.
The Xendit client is an AsyncMock so no request leaves the process.
"""

from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from diro.core.config import Settings
from diro.core.database import build_engine, build_session_factory
from diro.main import create_app
from diro.models import Base, Court, Timeslot
from diro.services.xendit import InvoiceResponse, XenditClient

INVOICE_URL = "https://checkout-staging.xendit.co/web/inv_test123"


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        database_url="sqlite+aiosqlite://",
        xendit_secret_key="xnd_development_test",
    )


@pytest.fixture
async def engine(settings):
    engine = build_engine(settings)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
def payment_client():
    client = AsyncMock(spec=XenditClient)
    client.create_invoice.return_value = InvoiceResponse(
        id="inv_test123",
        external_id="1",
        status="PENDING",
        invoice_url=INVOICE_URL,
        amount=50000,
        currency="IDR",
    )
    return client


@pytest.fixture
def app(settings, engine, payment_client):
    return create_app(settings, payment_client=payment_client, engine=engine)


@pytest.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def seed_courts(session_factory):
    """Two active courts, one inactive; two active timeslots, one inactive."""
    async with session_factory() as db:
        courts = {
            "c1": Court(name="Lapangan A", description="Main court"),
            "c2": Court(name="Lapangan B", description="Synthetic floor"),
            "closed": Court(name="Lapangan D", description="Outdoor", is_active=False),
        }
        timeslots = {
            "t1": Timeslot(start_time="08:00", end_time="09:00"),
            "t2": Timeslot(start_time="09:00", end_time="10:00"),
            "retired": Timeslot(start_time="12:00", end_time="13:00", is_active=False),
        }
        db.add_all([*courts.values(), *timeslots.values()])
        await db.commit()
        return {**courts, **timeslots}
