# /app/models/quotation.py
from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import (
    String,
    Text,
    Float,
    Integer,
    DateTime,
    ForeignKey,
    Index,
    CheckConstraint,
    Uuid,
    func,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base, JSONDocument


class Quotation(Base):
    """
    A priced service offer to a customer.

    Core commercial fields are real columns. The optional descriptive
    blocks (scopeTable, tenderInclusions, ...) and any unknown keys sent
    by the client live in details_json, stored verbatim.
    """
    __tablename__ = "quotations"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    # public link token, immutable once assigned
    proposal_id: Mapped[str] = mapped_column(String(10), nullable=False, unique=True)

    # customer / site
    customer_name: Mapped[str] = mapped_column(String(256), nullable=False)
    customer_email: Mapped[str] = mapped_column(String(320), nullable=False)
    customer_phone: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    customer_address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    development_address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    site_address: Mapped[str] = mapped_column(Text, nullable=False)

    # project
    project_title: Mapped[Optional[str]] = mapped_column(String(256), nullable=True)
    project_description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    quotation_type: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    scope: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    quotation_date: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    job_type: Mapped[List[str]] = mapped_column(JSONDocument, nullable=False, default=list)

    # commercial
    items: Mapped[List[Dict[str, Any]]] = mapped_column(
        JSONDocument, nullable=False, default=list
    )
    subtotal: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    vat_rate: Mapped[float] = mapped_column(
        Float, nullable=False, default=20, server_default=text("20")
    )
    vat_amount: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    total_amount: Mapped[float] = mapped_column(Float, nullable=False, default=0)

    exclusions: Mapped[List[str]] = mapped_column(JSONDocument, nullable=False, default=list)
    payment_terms: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    hourly_rates: Mapped[List[Dict[str, Any]]] = mapped_column(
        JSONDocument, nullable=False, default=list
    )
    valid_until: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    details_json: Mapped[Dict[str, Any]] = mapped_column(
        JSONDocument, nullable=False, default=dict
    )

    status: Mapped[str] = mapped_column(
        String(16), nullable=False, default="draft", server_default=text("'draft'")
    )

    created_by: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    version: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default=text("0")
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    __table_args__ = (
        Index("ix_quotations_created_by_created_at", "created_by", "created_at"),
        CheckConstraint(
            "status IN ('draft','sent','viewed','accepted','rejected','expired')",
            name="ck_quotations_status",
        ),
    )
