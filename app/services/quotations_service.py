# app/services/quotations_service.py
from __future__ import annotations

import logging
import uuid
from datetime import date, datetime, time, timezone
from typing import Any, Dict, Iterable, List, Optional

from pydantic import TypeAdapter, ValidationError as PydanticValidationError
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.config import Settings, get_settings
from app.core.errors import QuotationNotFound, QuotationValidationError
from app.core.proposal_ids import generate_proposal_id, is_proposal_id
from app.models.enums import JobType, QuotationStatus
from app.models.quotation import Quotation
from app.policies.principal import Principal
from app.policies.quotation_policy import (
    can_transition,
    require_owner,
    require_send_allowed,
)
from app.schemas.quotations import HourlyRate, QuotationItem, coerce_number

logger = logging.getLogger(__name__)


REQUIRED_TEXT_FIELDS = {
    "customerName": "customer_name",
    "customerEmail": "customer_email",
    "siteAddress": "site_address",
}

OPTIONAL_TEXT_FIELDS = {
    "customerPhone": "customer_phone",
    "customerAddress": "customer_address",
    "developmentAddress": "development_address",
    "projectTitle": "project_title",
    "projectDescription": "project_description",
    "quotationType": "quotation_type",
    "scope": "scope",
    "paymentTerms": "payment_terms",
}

# api key -> (column, default when absent or non-numeric)
NUMERIC_FIELDS = {
    "subtotal": ("subtotal", 0.0),
    "vatRate": ("vat_rate", 20.0),
    "vatAmount": ("vat_amount", 0.0),
    "totalAmount": ("total_amount", 0.0),
}

DATE_FIELDS = {
    "quotationDate": "quotation_date",
    "validUntil": "valid_until",
}

LIST_FIELDS = {
    "jobType": "job_type",
    "items": "items",
    "exclusions": "exclusions",
    "hourlyRates": "hourly_rates",
}

# never writable through the generic update path
IMMUTABLE_FIELDS = {"proposalId", "createdBy", "status"}

# server-managed, silently ignored when echoed back by clients
SERVER_FIELDS = {"id", "_id", "createdAt", "updatedAt", "version", "__v"}

JOB_TYPE_VALUES = {j.value for j in JobType}

MISSING_REQUIRED_MSG = "Missing required fields: customerName, customerEmail, siteAddress"
JOB_TYPE_MSG = "jobType must be a non-empty array (Electric, Gas, and/or Water)"
ITEMS_MSG = "items must be a non-empty array"

_DATETIME = TypeAdapter(datetime)
_DATE = TypeAdapter(date)


def build_public_link(proposal_id: str, settings: Optional[Settings] = None) -> str:
    settings = settings or get_settings()
    return f"{settings.frontend_public_url.rstrip('/')}/proposal/{proposal_id}"


def _iso(dt: Optional[datetime]) -> Optional[str]:
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.isoformat()


def serialize_quotation(q: Quotation, omit: Iterable[str] = ()) -> Dict[str, Any]:
    """
    API shape of a quotation (camelCase). Descriptive blocks are spread at
    the top level; core fields always win over same-named detail keys.
    """
    data: Dict[str, Any] = dict(q.details_json or {})
    data.update(
        {
            "id": str(q.id),
            "proposalId": q.proposal_id,
            "customerName": q.customer_name,
            "customerEmail": q.customer_email,
            "customerPhone": q.customer_phone,
            "customerAddress": q.customer_address,
            "developmentAddress": q.development_address,
            "siteAddress": q.site_address,
            "jobType": list(q.job_type or []),
            "projectTitle": q.project_title,
            "projectDescription": q.project_description,
            "quotationType": q.quotation_type,
            "scope": q.scope,
            "quotationDate": _iso(q.quotation_date),
            "items": list(q.items or []),
            "subtotal": q.subtotal,
            "vatRate": q.vat_rate,
            "vatAmount": q.vat_amount,
            "totalAmount": q.total_amount,
            "exclusions": list(q.exclusions or []),
            "paymentTerms": q.payment_terms,
            "hourlyRates": list(q.hourly_rates or []),
            "validUntil": _iso(q.valid_until),
            "status": q.status,
            "createdBy": str(q.created_by),
            "version": q.version,
            "createdAt": _iso(q.created_at),
            "updatedAt": _iso(q.updated_at),
        }
    )
    for key in omit:
        data.pop(key, None)
    return data


# ─────────────────────────────────────────────
# FIELD VALIDATION
# ─────────────────────────────────────────────


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return value is False


def _text(value: Any, field: str) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise QuotationValidationError(f"{field} must be a string")
    return str(value)


def _job_types(value: Any) -> List[str]:
    if not isinstance(value, list) or not value:
        raise QuotationValidationError(JOB_TYPE_MSG)
    if any(not isinstance(v, str) or v not in JOB_TYPE_VALUES for v in value):
        raise QuotationValidationError(JOB_TYPE_MSG)
    # keep order, drop repeats
    return list(dict.fromkeys(value))


def _items(value: Any) -> List[Dict[str, Any]]:
    if not isinstance(value, list) or not value:
        raise QuotationValidationError(ITEMS_MSG)
    out: List[Dict[str, Any]] = []
    for idx, raw in enumerate(value):
        if not isinstance(raw, dict):
            raise QuotationValidationError(f"items[{idx}] must be an object")
        try:
            out.append(QuotationItem.model_validate(raw).model_dump())
        except PydanticValidationError as e:
            err = e.errors()[0]
            loc = ".".join(str(p) for p in err["loc"])
            raise QuotationValidationError(f"items[{idx}].{loc}: {err['msg']}")
    return out


def _exclusions(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list):
        raise QuotationValidationError("exclusions must be an array of strings")
    return [_text(v, "exclusions") or "" for v in value]


def _hourly_rates(value: Any) -> List[Dict[str, Any]]:
    if value is None:
        return []
    if not isinstance(value, list) or any(not isinstance(v, dict) for v in value):
        raise QuotationValidationError("hourlyRates must be an array of {role, rate}")
    try:
        return [HourlyRate.model_validate(v).model_dump() for v in value]
    except PydanticValidationError:
        raise QuotationValidationError("hourlyRates must be an array of {role, rate}")


def _datetime(value: Any, field: str) -> Optional[datetime]:
    if value is None or value == "":
        return None
    try:
        dt = _DATETIME.validate_python(value)
    except PydanticValidationError:
        try:
            d = _DATE.validate_python(value)
        except PydanticValidationError:
            raise QuotationValidationError(f"{field} must be a valid date")
        dt = datetime.combine(d, time.min)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def _strict_number(value: Any, field: str) -> float:
    num = coerce_number(value, None)
    if num is None:
        raise QuotationValidationError(f"{field} must be a number")
    return num


def _parse_uuid(raw: str) -> Optional[uuid.UUID]:
    try:
        return uuid.UUID(str(raw))
    except (TypeError, ValueError):
        return None


class QuotationsService:
    # ─────────────────────────────────────────────
    # INTERNAL READ HELPERS
    # ─────────────────────────────────────────────

    def _get(self, db: Session, quotation_id: str) -> Quotation:
        qid = _parse_uuid(quotation_id)
        q = db.get(Quotation, qid) if qid else None
        if not q:
            raise QuotationNotFound("Quotation not found")
        return q

    def get_owned(
        self,
        db: Session,
        *,
        quotation_id: str,
        principal: Principal,
        denied_message: str = "Not authorized",
    ) -> Quotation:
        """Existence first, then ownership: non-owners get 403, not 404."""
        q = self._get(db, quotation_id)
        require_owner(principal, q.created_by, denied_message)
        return q

    # ─────────────────────────────────────────────
    # OWNER-SCOPED OPERATIONS
    # ─────────────────────────────────────────────

    def create(
        self, db: Session, *, principal: Principal, payload: Dict[str, Any]
    ) -> Quotation:
        if any(_is_blank(payload.get(k)) for k in REQUIRED_TEXT_FIELDS):
            raise QuotationValidationError(MISSING_REQUIRED_MSG)
        job_type = _job_types(payload.get("jobType"))
        items = _items(payload.get("items"))

        values: Dict[str, Any] = {}
        for key, column in REQUIRED_TEXT_FIELDS.items():
            values[column] = _text(payload[key], key).strip()
        for key, column in OPTIONAL_TEXT_FIELDS.items():
            values[column] = _text(payload.get(key), key)
        for key, (column, default) in NUMERIC_FIELDS.items():
            values[column] = coerce_number(payload.get(key), default)
        for key, column in DATE_FIELDS.items():
            values[column] = _datetime(payload.get(key), key)

        details = {
            k: v
            for k, v in payload.items()
            if k not in REQUIRED_TEXT_FIELDS
            and k not in OPTIONAL_TEXT_FIELDS
            and k not in NUMERIC_FIELDS
            and k not in DATE_FIELDS
            and k not in LIST_FIELDS
            and k not in IMMUTABLE_FIELDS
            and k not in SERVER_FIELDS
        }

        now = datetime.now(timezone.utc)
        q = Quotation(
            proposal_id=generate_proposal_id(),
            job_type=job_type,
            items=items,
            exclusions=_exclusions(payload.get("exclusions")),
            hourly_rates=_hourly_rates(payload.get("hourlyRates")),
            details_json=details,
            status=QuotationStatus.draft.value,
            created_by=uuid.UUID(principal.user_id),
            version=0,
            created_at=now,
            updated_at=now,
            **values,
        )
        if q.quotation_date is None:
            q.quotation_date = now

        db.add(q)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            logger.error(
                "quotation insert rejected by store",
                extra={"proposal_id": q.proposal_id, "user_id": principal.user_id},
            )
            raise
        db.refresh(q)

        logger.info(
            "quotation created",
            extra={"quotation_id": str(q.id), "proposal_id": q.proposal_id},
        )
        return q

    def list_for_owner(self, db: Session, *, principal: Principal) -> List[Quotation]:
        owner = _parse_uuid(principal.user_id)
        if owner is None:
            return []
        stmt = (
            select(Quotation)
            .where(Quotation.created_by == owner)
            .order_by(Quotation.created_at.desc())
        )
        return list(db.execute(stmt).scalars().all())

    def update(
        self,
        db: Session,
        *,
        quotation_id: str,
        principal: Principal,
        payload: Dict[str, Any],
    ) -> Quotation:
        q = self.get_owned(
            db,
            quotation_id=quotation_id,
            principal=principal,
            denied_message="Not authorized to update this quotation",
        )

        changes: Dict[str, Any] = {}
        details = dict(q.details_json or {})

        for key, value in payload.items():
            if key in IMMUTABLE_FIELDS or key in SERVER_FIELDS:
                continue
            if key in REQUIRED_TEXT_FIELDS:
                if _is_blank(value):
                    raise QuotationValidationError(f"{key} is required")
                changes[REQUIRED_TEXT_FIELDS[key]] = _text(value, key).strip()
            elif key in OPTIONAL_TEXT_FIELDS:
                changes[OPTIONAL_TEXT_FIELDS[key]] = _text(value, key)
            elif key in NUMERIC_FIELDS:
                column, default = NUMERIC_FIELDS[key]
                changes[column] = (
                    default if value is None else _strict_number(value, key)
                )
            elif key in DATE_FIELDS:
                changes[DATE_FIELDS[key]] = _datetime(value, key)
            elif key == "jobType":
                changes["job_type"] = _job_types(value)
            elif key == "items":
                changes["items"] = _items(value)
            elif key == "exclusions":
                changes["exclusions"] = _exclusions(value)
            elif key == "hourlyRates":
                changes["hourly_rates"] = _hourly_rates(value)
            else:
                details[key] = value

        for column, value in changes.items():
            setattr(q, column, value)
        q.details_json = details
        q.updated_at = datetime.now(timezone.utc)
        q.version = (q.version or 0) + 1

        db.add(q)
        db.commit()
        db.refresh(q)

        logger.info(
            "quotation updated",
            extra={"quotation_id": str(q.id), "fields": sorted(payload.keys())},
        )
        return q

    def delete(self, db: Session, *, quotation_id: str, principal: Principal) -> None:
        q = self.get_owned(db, quotation_id=quotation_id, principal=principal)
        db.delete(q)
        db.commit()
        logger.info("quotation deleted", extra={"quotation_id": quotation_id})

    def mark_sent(
        self, db: Session, *, quotation_id: str, principal: Principal
    ) -> Quotation:
        q = self.get_owned(db, quotation_id=quotation_id, principal=principal)
        require_send_allowed(q.status)

        q.status = QuotationStatus.sent.value
        q.updated_at = datetime.now(timezone.utc)
        q.version = (q.version or 0) + 1
        db.add(q)
        db.commit()
        db.refresh(q)

        logger.info(
            "quotation marked as sent",
            extra={"quotation_id": str(q.id), "proposal_id": q.proposal_id},
        )
        return q

    # ─────────────────────────────────────────────
    # PUBLIC
    # ─────────────────────────────────────────────

    def view_public(self, db: Session, *, proposal_id: str) -> Quotation:
        q = None
        if is_proposal_id(proposal_id):
            q = db.execute(
                select(Quotation).where(Quotation.proposal_id == proposal_id)
            ).scalar_one_or_none()
        if not q:
            raise QuotationNotFound("Quotation not found or link has expired")

        if q.status == QuotationStatus.sent.value and can_transition(
            q.status, QuotationStatus.viewed.value
        ):
            q.status = QuotationStatus.viewed.value
            q.updated_at = datetime.now(timezone.utc)
            db.add(q)
            db.commit()
            db.refresh(q)
            logger.info("proposal first viewed", extra={"proposal_id": proposal_id})

        return q
