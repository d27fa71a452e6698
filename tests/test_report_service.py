"""Tests for report projections and the PDF audit trail they append to."""

from __future__ import annotations

import re
import uuid
from datetime import UTC, datetime
from decimal import Decimal

import pytest

from cargoflow.exceptions import BusinessRuleException, NotFoundException
from cargoflow.models.enums import PdfType
from cargoflow.modules.report.service import (
    format_dimensions,
    format_weight,
    invoice_number,
    regulation_labels,
    vat,
)

DATE_RE = re.compile(r"^\d{2}/\d{2}/\d{4}$")
DATETIME_RE = re.compile(r"^\d{2}/\d{2}/\d{4}, \d{2}:\d{2}:\d{2}$")


async def _outbound(machine, product_payload, transport_payload, delivery_payload, **product):
    registered = await machine.register_product(product_payload(**product))
    process_id = registered.process.id
    await machine.submit_transport(process_id, transport_payload())
    await machine.submit_delivery(process_id, delivery_payload())
    return process_id


# ---------------------------------------------------------------------------
# Display helpers
# ---------------------------------------------------------------------------


class TestFormatting:
    @pytest.mark.parametrize(
        "grams, expected",
        [(500, "0.5 kg"), (1500, "1.5 kg"), (2000, "2 kg"), (123456, "123.456 kg")],
    )
    def test_weight(self, grams, expected):
        assert format_weight(grams) == expected

    def test_dimensions(self):
        assert format_dimensions({"length": 10.0, "width": 2.5, "height": 3}) == "10x2.5x3 cm"

    def test_regulation_labels_in_fixed_order(self):
        flags = {"oversized": True, "fragile": True, "lithium": False}
        assert regulation_labels(flags) == ["Fragile", "Oversized"]

    def test_vat_rounds_half_up(self):
        assert vat(Decimal("50005")) == Decimal("9501")
        assert vat(Decimal("25000")) == Decimal("4750")

    def test_invoice_number(self):
        process_id = uuid.UUID("0123abcd-0000-0000-0000-000000000000")
        assert invoice_number("FAC", process_id) == "FAC-0123ABCD"

    def test_timestamps_use_report_timezone(self, reports):
        moment = datetime(2026, 1, 2, 3, 4, 5, tzinfo=UTC)
        assert reports._datetime(moment) == "02/01/2026, 03:04:05"
        assert reports._date(moment) == "02/01/2026"


# ---------------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------------


class TestWarehouseReport:
    @pytest.mark.asyncio
    async def test_projection_and_record(
        self, machine, reports, entities, product_payload, transport_payload, delivery_payload
    ):
        process_id = await _outbound(machine, product_payload, transport_payload, delivery_payload)

        report = await reports.warehouse_report(process_id)

        assert report.process_type == "OUTBOUND"
        assert DATE_RE.match(report.date)
        assert report.product.weight == "0.5 kg"
        assert report.product.dimensions == "10x10x10 cm"
        assert report.product.regulations == ["Fragile"]
        assert report.transport.vehicle == "truck - X1"
        assert report.transport.notes == "No remarks"
        assert report.delivery.departure_time == "01/03/2026, 08:30:00"
        assert report.current_event == 4
        assert DATETIME_RE.match(report.created_at)

        records = await entities.list_generated_pdfs(process_id)
        assert len(records) == 1
        assert records[0].pdf_type == PdfType.WAREHOUSE
        assert records[0].file_name == f"warehouse-process-{process_id}.pdf"

    @pytest.mark.asyncio
    async def test_unknown_process(self, reports, entities):
        with pytest.raises(NotFoundException):
            await reports.warehouse_report(uuid.uuid4())
        assert entities.pdf_records == {}


class TestEntryReport:
    @pytest.mark.asyncio
    async def test_inbound_complaint(self, machine, reports, product_payload, transport_payload):
        registered = await machine.register_product(product_payload(flowType="inbound"))
        process_id = registered.process.id
        await machine.submit_transport(process_id, transport_payload(notes="Wet pallet"))
        await machine.complete_inbound_confirmation(
            process_id, {"action": "complaint", "notes": "damaged box"}
        )

        report = await reports.entry_report(process_id)

        assert report.process_type == "INBOUND"
        assert report.status == "complaint"
        assert report.event3_status == "complaint"
        assert report.complaint_notes == "damaged box"
        assert report.confirmed_at is None
        assert report.transport.notes == "Wet pallet"

    @pytest.mark.asyncio
    async def test_confirmed_has_timestamp(
        self, machine, reports, entities, product_payload, transport_payload
    ):
        registered = await machine.register_product(product_payload(flowType="inbound"))
        process_id = registered.process.id
        await machine.submit_transport(process_id, transport_payload())
        await machine.complete_inbound_confirmation(process_id, {"action": "confirmed"})

        report = await reports.entry_report(process_id)

        assert DATETIME_RE.match(report.confirmed_at)
        records = await entities.list_generated_pdfs(process_id)
        assert [r.pdf_type for r in records] == [PdfType.INBOUND_CONFIRMATION]
        assert records[0].file_name == f"entry-process-{process_id}.pdf"

    @pytest.mark.asyncio
    async def test_outbound_rejected(self, machine, reports, entities, product_payload):
        registered = await machine.register_product(product_payload())

        with pytest.raises(BusinessRuleException, match="inbound"):
            await reports.entry_report(registered.process.id)
        assert entities.pdf_records == {}


class TestTransportReport:
    @pytest.mark.asyncio
    async def test_before_transport(self, machine, reports, product_payload):
        registered = await machine.register_product(product_payload())

        report = await reports.transport_report(registered.process.id)

        assert report.transport is None
        assert report.route is None
        assert report.product.regulations == []

    @pytest.mark.asyncio
    async def test_with_route(
        self, machine, reports, entities, product_payload, transport_payload, delivery_payload
    ):
        process_id = await _outbound(machine, product_payload, transport_payload, delivery_payload)

        report = await reports.transport_report(process_id)

        assert report.transport.vehicle == "TRUCK - X1"
        assert report.transport.notes == "No special remarks"
        assert report.route.origin == "A"
        assert report.route.destination == "B"
        records = await entities.list_generated_pdfs(process_id)
        assert [r.pdf_type for r in records] == [PdfType.TRANSPORT]


# ---------------------------------------------------------------------------
# Invoices
# ---------------------------------------------------------------------------


class TestTransportInvoice:
    @pytest.mark.asyncio
    async def test_requires_transport(self, machine, reports, entities, product_payload):
        registered = await machine.register_product(product_payload())

        with pytest.raises(NotFoundException, match="Process or transport not found"):
            await reports.transport_invoice(registered.process.id)
        assert entities.pdf_records == {}

    @pytest.mark.asyncio
    async def test_amounts(self, machine, reports, entities, product_payload, transport_payload):
        registered = await machine.register_product(product_payload(weight=500))
        process_id = registered.process.id
        await machine.submit_transport(process_id, transport_payload())

        invoice = await reports.transport_invoice(process_id)

        assert invoice.billing.subtotal == Decimal("52500")
        assert invoice.billing.tax == Decimal("9975")
        assert invoice.billing.total == Decimal("62475")
        assert invoice.invoice_number.startswith("FAC-")
        assert DATE_RE.match(invoice.due_date)
        assert invoice.billing_company.rut == "76.543.210-K"
        assert invoice.client_company.name == "Cargo Fast"
        assert invoice.service_details.vehicle == "truck - X1"
        assert invoice.notes == "Transport service completed satisfactorily"

        records = await entities.list_generated_pdfs(process_id)
        assert [r.file_name for r in records] == [f"transport-invoice-{process_id}.pdf"]
        assert records[0].pdf_type == PdfType.INVOICE

    @pytest.mark.asyncio
    async def test_tax_rounding(self, machine, reports, product_payload, transport_payload):
        registered = await machine.register_product(product_payload(weight=1))
        await machine.submit_transport(registered.process.id, transport_payload())

        invoice = await reports.transport_invoice(registered.process.id)

        assert invoice.billing.subtotal == Decimal("50005")
        assert invoice.billing.tax == Decimal("9501")


class TestServiceInvoice:
    @pytest.mark.asyncio
    async def test_outbound_with_all_services(
        self, machine, reports, product_payload, transport_payload, delivery_payload
    ):
        process_id = await _outbound(
            machine,
            product_payload,
            transport_payload,
            delivery_payload,
            regulations={"refrigerated": True, "valuable": True},
        )

        invoice = await reports.service_invoice(process_id)

        assert [line.description for line in invoice.services] == [
            "Shipment preparation",
            "Transport service",
            "Delivery to destination",
        ]
        assert invoice.totals.subtotal == Decimal("75000")
        assert invoice.totals.tax == Decimal("14250")
        assert invoice.totals.total == Decimal("89250")
        assert invoice.product.regulations == ["Cold chain", "Additional insurance"]
        assert invoice.invoice_number.startswith("INV-")
        assert invoice.transport is not None
        assert invoice.delivery is not None

    @pytest.mark.asyncio
    async def test_inbound_reception_only(self, machine, reports, entities, product_payload):
        registered = await machine.register_product(product_payload(flowType="inbound"))
        process_id = registered.process.id

        invoice = await reports.service_invoice(process_id)

        assert [line.description for line in invoice.services] == ["Warehouse reception"]
        assert invoice.totals.subtotal == Decimal("25000")
        assert invoice.totals.total == Decimal("29750")
        records = await entities.list_generated_pdfs(process_id)
        assert [r.file_name for r in records] == [f"invoice-process-{process_id}.pdf"]


# ---------------------------------------------------------------------------
# History
# ---------------------------------------------------------------------------


class TestPdfHistory:
    @pytest.mark.asyncio
    async def test_only_processes_with_records(self, machine, reports, product_payload):
        with_pdfs = await machine.register_product(product_payload())
        await machine.register_product(product_payload())

        await reports.warehouse_report(with_pdfs.process.id)
        await reports.service_invoice(with_pdfs.process.id)

        history = await reports.pdf_history()

        assert [d.process.id for d in history] == [with_pdfs.process.id]
        assert len(history[0].pdfs) == 2

    @pytest.mark.asyncio
    async def test_each_report_appends_one_record(
        self, machine, reports, entities, product_payload
    ):
        registered = await machine.register_product(product_payload())
        process_id = registered.process.id

        await reports.warehouse_report(process_id)
        await reports.warehouse_report(process_id)

        assert len(await entities.list_generated_pdfs(process_id)) == 2
