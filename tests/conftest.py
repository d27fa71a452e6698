"""Pytest fixtures for CargoFlow tests.

Everything runs against the in-memory backend; the SQL repository is covered
separately with a mocked AsyncSession.
"""

import os

# Must be set before cargoflow.config is imported
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("STORAGE_BACKEND", "memory")

from collections.abc import AsyncGenerator  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from cargoflow.app import app  # noqa: E402
from cargoflow.modules.process.state_machine import ProcessStateMachine  # noqa: E402
from cargoflow.modules.report.service import ReportService  # noqa: E402
from cargoflow.repositories.dependencies import get_stores  # noqa: E402
from cargoflow.repositories.memory import (  # noqa: E402
    InMemoryEntityStore,
    InMemoryProcessRepository,
)


@pytest.fixture
def entities() -> InMemoryEntityStore:
    return InMemoryEntityStore()


@pytest.fixture
def processes(entities: InMemoryEntityStore) -> InMemoryProcessRepository:
    return InMemoryProcessRepository(entities)


@pytest.fixture
def machine(entities, processes) -> ProcessStateMachine:
    return ProcessStateMachine(entities, processes)


@pytest.fixture
def reports(entities, processes) -> ReportService:
    return ReportService(entities, processes, timezone="UTC")


# ---------------------------------------------------------------------------
# Payload builders
# ---------------------------------------------------------------------------


@pytest.fixture
def product_payload():
    def _make(**overrides) -> dict:
        payload = {
            "name": "Widget",
            "dimensions": {"length": 10, "width": 10, "height": 10},
            "weight": 500,
            "regulations": {"fragile": True},
            "flowType": "outbound",
        }
        payload.update(overrides)
        return payload

    return _make


@pytest.fixture
def transport_payload():
    def _make(**overrides) -> dict:
        payload = {
            "driverName": "A",
            "licenseNumber": "1",
            "vehicleType": "truck",
            "vehiclePlate": "X1",
        }
        payload.update(overrides)
        return payload

    return _make


@pytest.fixture
def delivery_payload():
    def _make(**overrides) -> dict:
        payload = {
            "originPlace": "A",
            "destinationPlace": "B",
            "departureTime": "2026-03-01T08:30:00Z",
        }
        payload.update(overrides)
        return payload

    return _make


# ---------------------------------------------------------------------------
# HTTP client
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def async_client(entities, processes) -> AsyncGenerator[AsyncClient, None]:
    """Yield an httpx AsyncClient wired to the app with fresh in-memory stores."""

    async def override_get_stores():
        yield entities, processes

    app.dependency_overrides[get_stores] = override_get_stores

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
