"""Unit tests for the SQL entity store and process repository (mocked AsyncSession)."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.dialects import postgresql

from cargoflow.exceptions import ConflictException, NotFoundException, ReferenceException
from cargoflow.models.enums import FlowType, PdfType, ProcessStatus, VehicleType
from cargoflow.models.process import Process
from cargoflow.models.product import Product
from cargoflow.models.transport import Transport
from cargoflow.modules.inventory.schemas import (
    GeneratedPdfCreate,
    ProductCreate,
    TransportCreate,
    TransportPatch,
)
from cargoflow.modules.process.schemas import ProcessCreate, ProcessPatch
from cargoflow.repositories.interfaces import EntityStore, ProcessRepository
from cargoflow.repositories.sql import SqlEntityStore, SqlProcessRepository

# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_db():
    """Create a mock AsyncSession."""
    session = AsyncMock()
    session.add = MagicMock()
    session.flush = AsyncMock()
    return session


@pytest.fixture
def store(mock_db):
    return SqlEntityStore(mock_db)


@pytest.fixture
def repo(mock_db):
    return SqlProcessRepository(mock_db)


def _make_scalar_result(value):
    """Create a mock result that returns a scalar value."""
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    result.scalar.return_value = value
    unique_mock = MagicMock()
    unique_mock.scalar_one_or_none.return_value = value
    unique_scalars = MagicMock()
    unique_scalars.all.return_value = [value] if value else []
    unique_mock.scalars.return_value = unique_scalars
    result.unique.return_value = unique_mock
    scalars_mock = MagicMock()
    scalars_mock.all.return_value = [value] if value else []
    result.scalars.return_value = scalars_mock
    return result


def _make_process(version=1, status=ProcessStatus.IN_PROGRESS, current_event=1) -> Process:
    now = datetime.now(UTC)
    return Process(
        id=uuid.uuid4(),
        product_id=uuid.uuid4(),
        current_event=current_event,
        status=status,
        process_type=FlowType.OUTBOUND,
        version=version,
        created_at=now,
        updated_at=now,
    )


def test_sql_implementations_satisfy_protocols(store, repo):
    assert isinstance(store, EntityStore)
    assert isinstance(repo, ProcessRepository)


# ---------------------------------------------------------------------------
# Entity store
# ---------------------------------------------------------------------------


class TestSqlEntityStore:
    @pytest.mark.asyncio
    async def test_create_product_adds_and_flushes(self, store, mock_db):
        product = await store.create_product(
            ProductCreate(
                name="Widget",
                dimensions={"length": 1, "width": 2, "height": 3},
                weight=500,
                regulations={"lithium": True},
                flow_type=FlowType.INBOUND,
            )
        )

        mock_db.add.assert_called_once_with(product)
        mock_db.flush.assert_awaited_once()
        assert isinstance(product, Product)
        assert product.regulations["lithium"] is True
        assert product.regulations["fragile"] is False
        assert product.created_at is not None

    @pytest.mark.asyncio
    async def test_get_product_not_found(self, store, mock_db):
        mock_db.execute.return_value = _make_scalar_result(None)
        assert await store.get_product(uuid.uuid4()) is None

    @pytest.mark.asyncio
    async def test_count_products(self, store, mock_db):
        mock_db.execute.return_value = _make_scalar_result(7)
        assert await store.count_products() == 7

    @pytest.mark.asyncio
    async def test_update_transport_applies_patch(self, store, mock_db):
        transport = Transport(
            id=uuid.uuid4(),
            driver_name="A",
            license_number="1",
            vehicle_type=VehicleType.VAN,
            vehicle_plate="X1",
        )
        mock_db.execute.return_value = _make_scalar_result(transport)

        updated = await store.update_transport(
            transport.id, TransportPatch(vehicle_type=VehicleType.TRUCK)
        )

        assert updated.vehicle_type == VehicleType.TRUCK
        assert updated.driver_name == "A"
        mock_db.flush.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_update_unknown_transport(self, store, mock_db):
        mock_db.execute.return_value = _make_scalar_result(None)
        assert await store.update_transport(uuid.uuid4(), TransportPatch(notes="x")) is None
        mock_db.flush.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_create_transport_and_pdf(self, store, mock_db):
        transport = await store.create_transport(
            TransportCreate(
                driver_name="A",
                license_number="1",
                vehicle_type=VehicleType.TRUCK,
                vehicle_plate="X1",
                notes="",
            )
        )
        record = await store.create_generated_pdf(
            GeneratedPdfCreate(
                process_id=uuid.uuid4(), pdf_type=PdfType.TRANSPORT, file_name="t.pdf"
            )
        )

        assert transport.notes is None
        assert record.generated_at is not None
        assert mock_db.add.call_count == 2


# ---------------------------------------------------------------------------
# Process repository
# ---------------------------------------------------------------------------


class TestSqlCreateProcess:
    @pytest.mark.asyncio
    async def test_unknown_product(self, repo, mock_db):
        mock_db.execute.return_value = _make_scalar_result(None)

        with pytest.raises(ReferenceException):
            await repo.create_process(
                ProcessCreate(
                    product_id=uuid.uuid4(),
                    process_type=FlowType.OUTBOUND,
                    status=ProcessStatus.IN_PROGRESS,
                    current_event=1,
                )
            )
        mock_db.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_creates_with_explicit_status(self, repo, mock_db):
        product_id = uuid.uuid4()
        mock_db.execute.return_value = _make_scalar_result(product_id)

        process = await repo.create_process(
            ProcessCreate(
                product_id=product_id,
                process_type=FlowType.INBOUND,
                status=ProcessStatus.IN_PROGRESS,
                current_event=1,
            )
        )

        assert process.status == ProcessStatus.IN_PROGRESS
        assert process.version == 1
        assert process.created_at == process.updated_at
        mock_db.add.assert_called_once_with(process)
        mock_db.flush.assert_awaited_once()


class TestSqlUpdateProcess:
    @pytest.mark.asyncio
    async def test_not_found(self, repo, mock_db):
        mock_db.execute.return_value = _make_scalar_result(None)

        with pytest.raises(NotFoundException, match="not found"):
            await repo.update_process(uuid.uuid4(), ProcessPatch(status=ProcessStatus.PAUSED))

    @pytest.mark.asyncio
    async def test_version_mismatch(self, repo, mock_db):
        process = _make_process(version=3)
        mock_db.execute.return_value = _make_scalar_result(process)

        with pytest.raises(ConflictException):
            await repo.update_process(
                process.id, ProcessPatch(status=ProcessStatus.PAUSED), expected_version=2
            )
        assert process.status == ProcessStatus.IN_PROGRESS
        mock_db.flush.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_applies_patch(self, repo, mock_db):
        process = _make_process()
        transport_id = uuid.uuid4()
        mock_db.execute.return_value = _make_scalar_result(process)

        updated = await repo.update_process(
            process.id,
            ProcessPatch(transport_id=transport_id, current_event=3),
            expected_version=1,
        )

        assert updated.transport_id == transport_id
        assert updated.current_event == 3
        assert updated.status == ProcessStatus.IN_PROGRESS
        assert updated.version == 2
        mock_db.flush.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_locks_the_row(self, repo, mock_db):
        process = _make_process()
        mock_db.execute.return_value = _make_scalar_result(process)

        await repo.update_process(process.id, ProcessPatch(status=ProcessStatus.PAUSED))

        statement = mock_db.execute.call_args.args[0]
        assert "FOR UPDATE" in str(statement.compile(dialect=postgresql.dialect()))


class TestSqlComposition:
    @pytest.mark.asyncio
    async def test_missing_product_is_absent(self, repo, mock_db):
        process = MagicMock(product=None)
        mock_db.execute.return_value = _make_scalar_result(process)

        assert await repo.get_process_with_details(uuid.uuid4()) is None

    @pytest.mark.asyncio
    async def test_composes_children(self, repo, mock_db):
        product, transport, pdf = MagicMock(), MagicMock(), MagicMock()
        process = MagicMock(product=product, transport=transport, delivery=None, pdf_records=[pdf])
        mock_db.execute.return_value = _make_scalar_result(process)

        details = await repo.get_process_with_details(uuid.uuid4())

        assert details.process is process
        assert details.product is product
        assert details.transport is transport
        assert details.delivery is None
        assert details.pdfs == [pdf]

    @pytest.mark.asyncio
    async def test_all_skips_orphans(self, repo, mock_db):
        orphan = MagicMock(product=None)
        result = MagicMock()
        result.unique.return_value.scalars.return_value.all.return_value = [orphan]
        mock_db.execute.return_value = result

        assert await repo.get_all_processes_with_details() == []

    @pytest.mark.asyncio
    async def test_stats(self, repo, mock_db):
        rows = MagicMock()
        rows.all.return_value = [
            SimpleNamespace(current_event=3, status=ProcessStatus.IN_PROGRESS),
            SimpleNamespace(current_event=4, status=ProcessStatus.COMPLETED),
            SimpleNamespace(current_event=1, status=ProcessStatus.PAUSED),
        ]
        mock_db.execute.side_effect = [_make_scalar_result(5), rows]

        stats = await repo.get_stats()

        assert stats.total_products == 5
        assert stats.in_transit == 1
        assert stats.delivered == 1
        assert stats.active_processes == 2
