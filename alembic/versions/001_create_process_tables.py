"""Warehouse process tables

Revision ID: 001
Revises: None
Create Date: 2026-10-19

Creates: products, transports, deliveries, processes, generated_pdfs
Enums: flowtype, vehicletype, processstatus, inboundoutcome, pdftype
"""

from collections.abc import Sequence

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.execute('CREATE EXTENSION IF NOT EXISTS "pgcrypto";')

    # ── 1. Enum types (lowercase member values) ──────────────────────────
    op.execute("CREATE TYPE flowtype AS ENUM ('inbound', 'outbound');")
    op.execute("""
        CREATE TYPE vehicletype AS ENUM (
            'truck', 'van', 'box-truck', 'trailer', 'motorcycle'
        );
    """)
    op.execute("""
        CREATE TYPE processstatus AS ENUM (
            'draft', 'in_progress', 'paused', 'completed', 'complaint'
        );
    """)
    op.execute("CREATE TYPE inboundoutcome AS ENUM ('confirmed', 'complaint');")
    op.execute("""
        CREATE TYPE pdftype AS ENUM (
            'warehouse', 'inbound_confirmation', 'transport', 'invoice'
        );
    """)

    # ── 2. Entities ──────────────────────────────────────────────────────
    op.execute("""
        CREATE TABLE products (
            id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            name VARCHAR(255) NOT NULL,
            dimensions JSONB NOT NULL,
            weight INTEGER NOT NULL CHECK (weight > 0),
            regulations JSONB NOT NULL,
            flow_type flowtype NOT NULL,
            created_at TIMESTAMPTZ NOT NULL DEFAULT now()
        );
    """)
    op.execute("""
        CREATE TABLE transports (
            id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            driver_name VARCHAR(200) NOT NULL,
            license_number VARCHAR(100) NOT NULL,
            vehicle_type vehicletype NOT NULL,
            vehicle_plate VARCHAR(50) NOT NULL,
            driver_photo TEXT,
            notes TEXT,
            created_at TIMESTAMPTZ NOT NULL DEFAULT now()
        );
    """)
    op.execute("""
        CREATE TABLE deliveries (
            id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            origin_place VARCHAR(500) NOT NULL,
            destination_place VARCHAR(500) NOT NULL,
            departure_time TIMESTAMPTZ NOT NULL,
            delivery_notes TEXT,
            completed_at TIMESTAMPTZ NOT NULL DEFAULT now()
        );
    """)

    # ── 3. Processes (status has no default; the caller always sets it) ──
    op.execute("""
        CREATE TABLE processes (
            id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            product_id UUID NOT NULL REFERENCES products(id) ON DELETE RESTRICT,
            transport_id UUID REFERENCES transports(id) ON DELETE RESTRICT,
            delivery_id UUID REFERENCES deliveries(id) ON DELETE RESTRICT,

            current_event INTEGER NOT NULL CHECK (current_event BETWEEN 1 AND 4),
            status processstatus NOT NULL,
            process_type flowtype NOT NULL,

            event3_status inboundoutcome,
            complaint_notes TEXT,
            confirmed_at TIMESTAMPTZ,

            version INTEGER NOT NULL DEFAULT 1,
            created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            CONSTRAINT uq_processes_product_id UNIQUE (product_id)
        );
    """)
    op.execute("CREATE INDEX ix_processes_status ON processes (status);")
    op.execute(
        "CREATE INDEX ix_processes_transport_id ON processes (transport_id) "
        "WHERE transport_id IS NOT NULL;"
    )
    op.execute(
        "CREATE INDEX ix_processes_delivery_id ON processes (delivery_id) "
        "WHERE delivery_id IS NOT NULL;"
    )

    # ── 4. Generated PDF audit log ───────────────────────────────────────
    op.execute("""
        CREATE TABLE generated_pdfs (
            id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            process_id UUID NOT NULL REFERENCES processes(id) ON DELETE CASCADE,
            pdf_type pdftype NOT NULL,
            file_name VARCHAR(255) NOT NULL,
            file_path VARCHAR(500),
            generated_at TIMESTAMPTZ NOT NULL DEFAULT now()
        );
    """)
    op.execute("CREATE INDEX ix_generated_pdfs_process_id ON generated_pdfs (process_id);")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS generated_pdfs;")
    op.execute("DROP TABLE IF EXISTS processes;")
    op.execute("DROP TABLE IF EXISTS deliveries;")
    op.execute("DROP TABLE IF EXISTS transports;")
    op.execute("DROP TABLE IF EXISTS products;")
    op.execute("DROP TYPE IF EXISTS pdftype;")
    op.execute("DROP TYPE IF EXISTS inboundoutcome;")
    op.execute("DROP TYPE IF EXISTS processstatus;")
    op.execute("DROP TYPE IF EXISTS vehicletype;")
    op.execute("DROP TYPE IF EXISTS flowtype;")
