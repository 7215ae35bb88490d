# app/api/v1/proposals.py
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.core.errors import QuotationError
from app.db.session import get_db
from app.services.quotations_service import QuotationsService, serialize_quotation

# Public, no bearer dependency: the proposal id is the only credential.
router = APIRouter(prefix="/proposal")

PUBLIC_OMIT = ("createdBy", "version", "updatedAt")


@router.get("/{proposalId}")
def view_proposal(proposalId: str, db: Session = Depends(get_db)):
    try:
        q = QuotationsService().view_public(db, proposal_id=proposalId)
    except QuotationError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)

    return {"success": True, "data": serialize_quotation(q, omit=PUBLIC_OMIT)}
