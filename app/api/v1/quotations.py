# app/api/v1/quotations.py
from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, HTTPException
from sqlalchemy.orm import Session

from app.core.auth_deps import get_current_principal
from app.core.errors import QuotationError
from app.db.session import get_db
from app.policies.principal import Principal
from app.services.quotations_service import (
    QuotationsService,
    build_public_link,
    serialize_quotation,
)

router = APIRouter(prefix="/quotations")

LIST_OMIT = ("version", "updatedAt")


def _http(e: QuotationError) -> HTTPException:
    return HTTPException(status_code=e.status_code, detail=e.message)


@router.post("", status_code=201)
def create_quotation(
    payload: Dict[str, Any] = Body(...),
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    try:
        q = QuotationsService().create(db, principal=principal, payload=payload)
    except QuotationError as e:
        raise _http(e)

    return {
        "success": True,
        "data": serialize_quotation(q),
        "publicLink": build_public_link(q.proposal_id),
        "message": "Quotation created. Copy the link and send it manually via email.",
    }


@router.get("")
def list_quotations(
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    rows = QuotationsService().list_for_owner(db, principal=principal)
    return {
        "success": True,
        "count": len(rows),
        "data": [serialize_quotation(q, omit=LIST_OMIT) for q in rows],
    }


@router.get("/{quotationId}")
def get_quotation(
    quotationId: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    try:
        q = QuotationsService().get_owned(
            db,
            quotation_id=quotationId,
            principal=principal,
            denied_message="Not authorized to access this quotation",
        )
    except QuotationError as e:
        raise _http(e)

    return {"success": True, "data": serialize_quotation(q)}


@router.put("/{quotationId}")
def update_quotation(
    quotationId: str,
    payload: Dict[str, Any] = Body(...),
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    try:
        q = QuotationsService().update(
            db, quotation_id=quotationId, principal=principal, payload=payload
        )
    except QuotationError as e:
        raise _http(e)

    return {
        "success": True,
        "data": serialize_quotation(q),
        "publicLink": build_public_link(q.proposal_id),
    }


@router.delete("/{quotationId}")
def delete_quotation(
    quotationId: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    try:
        QuotationsService().delete(db, quotation_id=quotationId, principal=principal)
    except QuotationError as e:
        raise _http(e)

    return {"success": True, "message": "Quotation deleted successfully"}


@router.post("/{quotationId}/send")
def send_quotation(
    quotationId: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Marks the quotation as sent; delivery of the link itself is manual."""
    try:
        q = QuotationsService().mark_sent(
            db, quotation_id=quotationId, principal=principal
        )
    except QuotationError as e:
        raise _http(e)

    return {
        "success": True,
        "message": "Quotation marked as sent. Copy the link below and send it manually via your email.",
        "publicLink": build_public_link(q.proposal_id),
        "proposalId": q.proposal_id,
    }
