from __future__ import annotations

import re
import secrets
import string

PROPOSAL_ID_ALPHABET = string.ascii_lowercase + string.digits
PROPOSAL_ID_LENGTH = 10

PROPOSAL_ID_RE = re.compile(r"^[a-z0-9]{10}$")


def generate_proposal_id(length: int = PROPOSAL_ID_LENGTH) -> str:
    """
    Random public token for proposal links.

    Uniqueness is left to the unique index on quotations.proposal_id;
    a clash surfaces as an IntegrityError and is not retried here.
    """
    return "".join(secrets.choice(PROPOSAL_ID_ALPHABET) for _ in range(length))


def is_proposal_id(value: str) -> bool:
    return bool(PROPOSAL_ID_RE.match(value or ""))
