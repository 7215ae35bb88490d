#app/policies/quotation_policy.py
from __future__ import annotations

from typing import Dict, FrozenSet

from app.core.errors import InvalidStatusTransition, QuotationForbidden
from app.models.enums import QuotationStatus
from app.policies.principal import Principal


# Explicit lifecycle table. Anything not listed is rejected.
ALLOWED_TRANSITIONS: Dict[QuotationStatus, FrozenSet[QuotationStatus]] = {
    QuotationStatus.draft: frozenset({QuotationStatus.sent}),
    QuotationStatus.sent: frozenset({QuotationStatus.viewed}),
}

ALREADY_SENT_STATES = frozenset({QuotationStatus.sent, QuotationStatus.accepted})


def can_transition(current: str, target: str) -> bool:
    try:
        cur = QuotationStatus(current)
        tgt = QuotationStatus(target)
    except ValueError:
        return False
    return tgt in ALLOWED_TRANSITIONS.get(cur, frozenset())


def require_send_allowed(current: str) -> None:
    if current in {s.value for s in ALREADY_SENT_STATES}:
        raise InvalidStatusTransition("Quotation has already been sent or accepted")
    if not can_transition(current, QuotationStatus.sent.value):
        raise InvalidStatusTransition(
            f"Cannot send a quotation with status '{current}'"
        )


def require_owner(principal: Principal, created_by, message: str) -> None:
    """Existence is checked by the caller first; this only compares owners."""
    if str(created_by) != principal.user_id:
        raise QuotationForbidden(message)
