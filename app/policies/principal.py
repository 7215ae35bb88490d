#app/policies/principal.py
from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True)
class Principal:
    """Authenticated caller, resolved from the bearer token."""

    user_id: str
    email: str
    name: str
